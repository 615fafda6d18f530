# cvhistory/application/cv/lineage.py
"""
Version numbering and parent/child lineage.

This module is the only place that decides which number a new version
gets. Every write runs the read-max / compute / insert sequence under
the per-document lock inside one transaction, and the whole sequence
is retried when the unique constraint reports a numbering conflict.
"""
from typing import Callable, Optional
import logging

from flask import current_app

from cvhistory.models.cv_version import CvVersion
from cvhistory.domain.diff import diff_snapshots
from cvhistory.domain.exceptions import Conflict, ValidationError
from cvhistory.domain.invariants.version import (
    assert_branch_name,
    assert_change_type,
    assert_version_number,
)
from cvhistory.domain.snapshot import Snapshot
from cvhistory.storage.document_store import DocumentStore, SqlDocumentStore
from cvhistory.storage.version_store import VersionStore
from cvhistory.utils.audit import log_action
from cvhistory.utils.locks import document_lock
from cvhistory.utils.transaction import transactional
from cvhistory.utils.versioning import default_label, next_version_number, snapshot_document
from .access import load_owned_state

logger = logging.getLogger(__name__)


def _persist(
    *,
    document_id: str,
    actor_id: str,
    build: Callable[[], CvVersion],
    versions: VersionStore,
    action: str,
) -> CvVersion:
    retries = current_app.config.get("VERSION_CONFLICT_RETRIES", 3)
    attempt = 0

    with document_lock(document_id):
        while True:
            try:
                with transactional():
                    version = versions.append(build())

                    log_action(
                        actor_id=actor_id,
                        action=action,
                        entity_type="cv",
                        entity_id=document_id,
                        payload={
                            "version": version.version_number,
                            "change_type": version.change_type,
                            "branch_name": version.branch_name,
                        },
                    )
                return version
            except Conflict:
                attempt += 1
                if attempt > retries:
                    logger.error(
                        f"Giving up on CV {document_id} after {attempt} numbering conflicts"
                    )
                    raise
                logger.warning(
                    f"Version number conflict on CV {document_id}, retrying ({attempt}/{retries})"
                )


def create_version(
    *,
    document_id: str,
    owner_id: str,
    change_type: str,
    change_description: Optional[str] = None,
    label: Optional[str] = None,
    documents: Optional[DocumentStore] = None,
    versions: Optional[VersionStore] = None,
) -> CvVersion:
    """
    Snapshot the live CV as the next mainline version.

    Responsibilities:
    - ownership check
    - next number from the per-document sequence
    - diff against the latest mainline version
    - parent link, size accounting, audit logging
    """
    documents = documents or SqlDocumentStore()
    versions = versions or VersionStore()

    assert_change_type(change_type)
    load_owned_state(documents, document_id, owner_id)

    def build() -> CvVersion:
        # 1️⃣ Read the live state and the current head of the mainline
        state = documents.load_current_state(document_id)
        latest = versions.latest_mainline(document_id)

        # 2️⃣ Freeze and diff
        snapshot = snapshot_document(state)
        previous = Snapshot.from_state(latest.snapshot) if latest else None
        diff = diff_snapshots(previous, snapshot)

        # 3️⃣ Number
        number = next_version_number(versions, document_id)

        version = CvVersion()
        version.document_id = document_id
        version.owner_id = state["owner_id"]
        version.version_number = number
        version.label = label or default_label(number)
        version.snapshot = snapshot.to_dict()
        version.change_type = change_type
        version.change_description = change_description
        version.diff = diff
        version.parent_version_id = latest.id if latest else None
        version.is_branch = False
        version.branch_name = None
        version.size_bytes = snapshot.size_bytes
        return version

    version = _persist(
        document_id=document_id,
        actor_id=owner_id,
        build=build,
        versions=versions,
        action="cv.version.create",
    )

    logger.info(
        f"CV version {version.version_number} created for CV {document_id} [{change_type}]"
    )
    return version


def create_branch(
    *,
    document_id: str,
    owner_id: str,
    branch_name: str,
    from_version_number: Optional[int] = None,
    documents: Optional[DocumentStore] = None,
    versions: Optional[VersionStore] = None,
) -> CvVersion:
    """
    Create a named branch head.

    The head takes the next number of the same per-document sequence as
    the mainline. It snapshots either the live CV or, when
    `from_version_number` is given, that version's stored snapshot. The
    fork point (that version, or the latest mainline version) is the
    parent and the diff baseline.
    """
    documents = documents or SqlDocumentStore()
    versions = versions or VersionStore()

    name = assert_branch_name(branch_name)
    if from_version_number is not None:
        assert_version_number(from_version_number)

    load_owned_state(documents, document_id, owner_id)

    def build() -> CvVersion:
        if versions.branch_exists(document_id, name):
            raise ValidationError(f"Branch '{name}' already exists for this CV")

        if from_version_number is not None:
            fork_point = versions.find(document_id, from_version_number)
            if fork_point is None:
                raise ValidationError(
                    f"Cannot branch from version {from_version_number}: it does not exist"
                )
            snapshot = Snapshot.from_state(fork_point.snapshot)
        else:
            state = documents.load_current_state(document_id)
            fork_point = versions.latest_mainline(document_id)
            snapshot = snapshot_document(state)

        previous = Snapshot.from_state(fork_point.snapshot) if fork_point else None
        number = next_version_number(versions, document_id)

        branch = CvVersion()
        branch.document_id = document_id
        branch.owner_id = owner_id
        branch.version_number = number
        branch.label = name
        branch.snapshot = snapshot.to_dict()
        branch.change_type = "branch"
        branch.change_description = f"Branch created: {name}"
        branch.diff = diff_snapshots(previous, snapshot)
        branch.parent_version_id = fork_point.id if fork_point else None
        branch.is_branch = True
        branch.branch_name = name
        branch.size_bytes = snapshot.size_bytes
        return branch

    branch = _persist(
        document_id=document_id,
        actor_id=owner_id,
        build=build,
        versions=versions,
        action="cv.branch.create",
    )

    logger.info(f'Branch "{name}" created for CV {document_id} at version {branch.version_number}')
    return branch
