from typing import Dict, Optional

from cvhistory.storage.version_store import VersionStore


def get_storage_usage(*, user_id: str, versions: Optional[VersionStore] = None) -> Dict[str, int]:
    """
    Total number and serialized size of every version the user owns,
    across all of their CVs. Retention policies are built on top of this.
    """
    versions = versions or VersionStore()
    usage = versions.aggregate_size(user_id)

    return {
        "total_versions": usage["count"],
        "total_size_bytes": usage["total_bytes"],
    }
