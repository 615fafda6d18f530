# cvhistory/application/cv/restore_version.py
from typing import Optional
import logging

from cvhistory.domain.invariants.version import assert_version_number
from cvhistory.domain.snapshot import Snapshot
from cvhistory.storage.document_store import DocumentState, DocumentStore, SqlDocumentStore
from cvhistory.storage.version_store import VersionStore
from cvhistory.utils.audit import log_action
from cvhistory.utils.transaction import transactional
from .access import load_owned_state
from .lineage import create_version

logger = logging.getLogger(__name__)


def restore_version(
    *,
    document_id: str,
    version_number: int,
    owner_id: str,
    documents: Optional[DocumentStore] = None,
    versions: Optional[VersionStore] = None,
) -> DocumentState:
    """
    Roll a CV's live state back to a historical version.

    Responsibilities:
    - ownership check
    - snapshot the current live state first (change_type "restore")
    - overwrite the live fields from the target snapshot
    - audit logging

    The pre-restore snapshot is committed before the live document is
    touched. If the overwrite fails, history holds one extra version and
    the live CV is unchanged; the error propagates as-is.
    """
    documents = documents or SqlDocumentStore()
    versions = versions or VersionStore()

    assert_version_number(version_number)

    # 1️⃣ Authorize
    load_owned_state(documents, document_id, owner_id)

    # 2️⃣ Load the target; parse it before anything is written
    target = versions.get(document_id, version_number)
    snapshot = Snapshot.from_state(target.snapshot)

    # 3️⃣ Keep the state we are about to replace
    pre_restore = create_version(
        document_id=document_id,
        owner_id=owner_id,
        change_type="restore",
        change_description=f"Restored from v{version_number}",
        documents=documents,
        versions=versions,
    )

    # 4️⃣ Overwrite the live document
    restored = documents.overwrite_state(document_id, snapshot.to_dict())

    # 5️⃣ Audit logging
    with transactional():
        log_action(
            actor_id=owner_id,
            action="cv.restore",
            entity_type="cv",
            entity_id=document_id,
            payload={
                "from_version": version_number,
                "snapshot_version": pre_restore.version_number,
            },
        )

    logger.info(
        f"CV {document_id} restored to version {version_number} "
        f"(previous state kept as v{pre_restore.version_number})"
    )
    return restored
