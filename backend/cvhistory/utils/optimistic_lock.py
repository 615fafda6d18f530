from flask import request
from datetime import timezone
from dateutil.parser import ParserError, parse

from cvhistory.domain.exceptions import Conflict, ValidationError


def normalize_ts(ts):
    """
    Ensure datetime is timezone-aware.
    Defaults to UTC if naive.
    """
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def enforce_optimistic_lock(updated_at):
    """
    Enforces optimistic locking using the If-Unmodified-Since header.
    Raises Conflict if the document has been modified since.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts or updated_at is None:
        return  # No optimistic lock requested

    try:
        client_ts = normalize_ts(parse(client_ts))
    except (ParserError, OverflowError) as exc:
        raise ValidationError("Invalid If-Unmodified-Since header") from exc

    server_ts = normalize_ts(parse(updated_at) if isinstance(updated_at, str) else updated_at)

    if server_ts > client_ts:
        raise Conflict("Conflict detected. Document has been modified.")
