# cvhistory/application/cv/query_versions.py
from typing import Any, Dict, List, Optional

from flask import current_app

from cvhistory.models.cv_version import CvVersion
from cvhistory.domain.diff import diff_snapshots
from cvhistory.domain.invariants.version import assert_version_number
from cvhistory.domain.snapshot import Snapshot
from cvhistory.storage.document_store import DocumentStore, SqlDocumentStore
from cvhistory.storage.version_store import VersionStore
from cvhistory.utils.pagination import page_bounds
from .access import load_owned_state


def get_versions(
    *,
    document_id: str,
    user_id: str,
    page: int = 1,
    limit: int = 20,
    documents: Optional[DocumentStore] = None,
    versions: Optional[VersionStore] = None,
) -> Dict[str, Any]:
    """Mainline versions, newest first, with the total mainline count."""
    documents = documents or SqlDocumentStore()
    versions = versions or VersionStore()

    load_owned_state(documents, document_id, user_id)

    offset, limit = page_bounds(
        page, limit, max_limit=current_app.config.get("VERSION_PAGE_LIMIT_MAX", 100)
    )
    items, total = versions.list(document_id, offset, limit)

    return {"versions": items, "total": total}


def get_version(
    *,
    document_id: str,
    version_number: int,
    user_id: str,
    documents: Optional[DocumentStore] = None,
    versions: Optional[VersionStore] = None,
) -> CvVersion:
    documents = documents or SqlDocumentStore()
    versions = versions or VersionStore()

    assert_version_number(version_number)
    load_owned_state(documents, document_id, user_id)

    return versions.get(document_id, version_number)


def get_branches(
    *,
    document_id: str,
    user_id: str,
    documents: Optional[DocumentStore] = None,
    versions: Optional[VersionStore] = None,
) -> List[CvVersion]:
    documents = documents or SqlDocumentStore()
    versions = versions or VersionStore()

    load_owned_state(documents, document_id, user_id)

    return versions.list_branches(document_id)


def compare_versions(
    *,
    document_id: str,
    version_a: int,
    version_b: int,
    user_id: str,
    documents: Optional[DocumentStore] = None,
    versions: Optional[VersionStore] = None,
) -> Dict[str, Any]:
    """
    What changed going from version A to version B.

    Any two versions of the CV can be compared, in either order,
    including branch heads.
    """
    documents = documents or SqlDocumentStore()
    versions = versions or VersionStore()

    assert_version_number(version_a)
    assert_version_number(version_b)
    load_owned_state(documents, document_id, user_id)

    a = versions.get(document_id, version_a)
    b = versions.get(document_id, version_b)

    return {
        "version_a": a,
        "version_b": b,
        "diff": diff_snapshots(Snapshot.from_state(a.snapshot), Snapshot.from_state(b.snapshot)),
    }
