# cvhistory/domain/exceptions.py


class VersioningError(Exception):
    """
    Base class for every error raised by the versioning core.

    `code` is stable and safe to show to API clients; `status_code`
    is what the HTTP layer answers with.
    """

    code = "versioning_error"
    status_code = 500


class NotFound(VersioningError):
    code = "not_found"
    status_code = 404


class Unauthorized(VersioningError):
    code = "unauthorized"
    status_code = 403


class Conflict(VersioningError):
    """Lost a version-numbering race."""

    code = "conflict"
    status_code = 409


class ValidationError(VersioningError):
    code = "validation_error"
    status_code = 400
