# cvhistory/normalizers/cv_version.py
from __future__ import annotations

from typing import Any, Dict

from cvhistory.models.cv_version import CvVersion


def _iso(ts):
    return ts.isoformat() if ts is not None else None


def normalize_version(version: CvVersion, include_html: bool = True) -> Dict[str, Any]:
    """
    Normalizes a CvVersion into API-safe JSON.

    Notes:
    - list views drop snapshot.generated_html, which can be large
    - diff is always present (the synthetic "initial" diff for v1)
    """
    snapshot = dict(version.snapshot or {})
    if not include_html:
        snapshot.pop("generated_html", None)

    return {
        "id": version.id,
        "document_id": version.document_id,
        "owner_id": version.owner_id,
        "version": version.version_number,
        "label": version.label,
        "snapshot": snapshot,
        "change_type": version.change_type,
        "change_description": version.change_description,
        "diff": version.diff,
        "parent_version_id": version.parent_version_id,
        "is_branch": version.is_branch,
        "branch_name": version.branch_name,
        "size_bytes": version.size_bytes,
        "created_at": _iso(version.created_at),
    }


def normalize_comparison(result: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "version_a": normalize_version(result["version_a"], include_html=False),
        "version_b": normalize_version(result["version_b"], include_html=False),
        "diff": result["diff"],
    }
