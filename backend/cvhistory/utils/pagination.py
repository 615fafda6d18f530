# cvhistory/utils/pagination.py
from typing import Tuple

from cvhistory.domain.exceptions import ValidationError

# Largest OFFSET a 64-bit SQL integer can carry
MAX_OFFSET = 2 ** 63 - 1


def page_bounds(page: int, limit: int, *, max_limit: int) -> Tuple[int, int]:
    """
    Validate offset pagination arguments and return (offset, limit).

    Pages are 1-based.
    """
    if page < 1:
        raise ValidationError("Page must be greater than zero")

    if limit < 1 or limit > max_limit:
        raise ValidationError(f"Limit must be between 1 and {max_limit}")

    offset = (page - 1) * limit
    if offset > MAX_OFFSET:
        raise ValidationError(f"Page {page} is out of range")

    return offset, limit
