import re
from typing import Optional

from cvhistory.domain.exceptions import ValidationError

CHANGE_TYPES = {"manual", "ai-generated", "auto-save", "publish", "restore", "branch"}

BRANCH_NAME_MAX_LENGTH = 100
BRANCH_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 ._/-]*$")


def assert_change_type(change_type: str) -> None:
    if not isinstance(change_type, str) or change_type not in CHANGE_TYPES:
        raise ValidationError(
            f"Unknown change type '{change_type}'. "
            f"Expected one of: {', '.join(sorted(CHANGE_TYPES))}"
        )


def assert_branch_name(branch_name: Optional[str]) -> str:
    """
    Validates a branch name and returns it stripped of surrounding whitespace.
    """
    if branch_name is not None and not isinstance(branch_name, str):
        raise ValidationError(f"Branch name must be a string: {branch_name!r}")

    name = (branch_name or "").strip()

    if not name:
        raise ValidationError("Branch name is required.")

    if len(name) > BRANCH_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Branch name must be at most {BRANCH_NAME_MAX_LENGTH} characters."
        )

    if not BRANCH_NAME_PATTERN.match(name):
        raise ValidationError(
            f"Branch name '{name}' may only contain letters, digits, spaces and . _ / -"
        )

    return name


def assert_version_number(version_number) -> int:
    if isinstance(version_number, bool) or not isinstance(version_number, int) or version_number < 1:
        raise ValidationError(f"Version number must be a positive integer: {version_number!r}")
    return version_number
