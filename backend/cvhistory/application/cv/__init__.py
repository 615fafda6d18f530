"""CV versioning operations."""
from .lineage import create_version, create_branch
from .restore_version import restore_version
from .query_versions import get_versions, get_version, get_branches, compare_versions
from .storage_usage import get_storage_usage

__all__ = [
    "create_version",
    "create_branch",
    "restore_version",
    "get_versions",
    "get_version",
    "get_branches",
    "compare_versions",
    "get_storage_usage",
]
