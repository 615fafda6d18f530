"""Tests for restoring a CV to a historical version."""

import pytest

from cvhistory.application.cv import create_version, restore_version
from cvhistory.domain.exceptions import NotFound, Unauthorized
from cvhistory.domain.snapshot import Snapshot
from cvhistory.models.audit_log import AuditLog
from cvhistory.models.cv_version import CvVersion
from cvhistory.storage.document_store import SqlDocumentStore

from conftest import OTHER_USER_ID, OWNER_ID, section


class BrokenDocumentStore(SqlDocumentStore):
    """Fails every live-state overwrite."""

    def overwrite_state(self, document_id, fields):
        raise RuntimeError("document store unavailable")


S1 = {
    "title": "Junior Developer",
    "summary": "Fresh graduate.",
    "personal_info": {"full_name": "Grace Hopper"},
    "sections": [section("education", school="Yale")],
    "theme": {"layout": "classic"},
    "template_id": "classic-1",
    "generated_html": "<h1>Junior Developer</h1>",
}

S2 = {
    "title": "Rear Admiral",
    "summary": "Compilers.",
    "personal_info": {"full_name": "Grace Hopper", "email": "grace@navy.mil"},
    "sections": [section("education", school="Yale"), section("skills", items=["COBOL"])],
    "theme": {"layout": "modern"},
    "template_id": "modern-2",
    "generated_html": "<h1>Rear Admiral</h1>",
}


def _current(cv_id):
    return Snapshot.from_state(SqlDocumentStore().load_current_state(cv_id))


class TestRestoreVersion:
    """Test restore_version."""

    def test_round_trip(self, make_cv, update_cv) -> None:
        """Verify restore brings back S1 and keeps S2 as a restore version."""
        cv_id = make_cv(**S1)
        create_version(document_id=cv_id, owner_id=OWNER_ID, change_type="manual")
        update_cv(cv_id, **S2)
        v2 = create_version(document_id=cv_id, owner_id=OWNER_ID, change_type="manual")

        restored = restore_version(document_id=cv_id, version_number=1, owner_id=OWNER_ID)

        assert Snapshot.from_state(restored) == Snapshot.from_state(S1)
        assert _current(cv_id) == Snapshot.from_state(S1)

        v3 = CvVersion.query.filter_by(document_id=cv_id, version_number=3).one()
        assert v3.change_type == "restore"
        assert v3.change_description == "Restored from v1"
        assert v3.snapshot == v2.snapshot
        assert Snapshot.from_state(v3.snapshot) == Snapshot.from_state(S2)

    def test_restore_is_undoable(self, make_cv, update_cv) -> None:
        """Verify restoring the pre-restore version returns to S2."""
        cv_id = make_cv(**S1)
        create_version(document_id=cv_id, owner_id=OWNER_ID, change_type="manual")
        update_cv(cv_id, **S2)
        create_version(document_id=cv_id, owner_id=OWNER_ID, change_type="manual")
        restore_version(document_id=cv_id, version_number=1, owner_id=OWNER_ID)

        restore_version(document_id=cv_id, version_number=3, owner_id=OWNER_ID)

        assert _current(cv_id) == Snapshot.from_state(S2)
        assert CvVersion.query.filter_by(document_id=cv_id).count() == 4

    def test_missing_version_writes_nothing(self, make_cv) -> None:
        """Verify an unknown target version fails before any write."""
        cv_id = make_cv(**S1)

        with pytest.raises(NotFound):
            restore_version(document_id=cv_id, version_number=9, owner_id=OWNER_ID)

        assert CvVersion.query.count() == 0

    def test_wrong_owner_is_unauthorized(self, make_cv) -> None:
        """Verify restore checks ownership."""
        cv_id = make_cv(**S1)
        create_version(document_id=cv_id, owner_id=OWNER_ID, change_type="manual")

        with pytest.raises(Unauthorized):
            restore_version(document_id=cv_id, version_number=1, owner_id=OTHER_USER_ID)

        assert CvVersion.query.count() == 1

    def test_failed_overwrite_keeps_extra_snapshot_only(self, make_cv, update_cv) -> None:
        """Verify a failed overwrite leaves the live CV untouched."""
        cv_id = make_cv(**S1)
        create_version(document_id=cv_id, owner_id=OWNER_ID, change_type="manual")
        update_cv(cv_id, **S2)

        with pytest.raises(RuntimeError):
            restore_version(
                document_id=cv_id,
                version_number=1,
                owner_id=OWNER_ID,
                documents=BrokenDocumentStore(),
            )

        assert _current(cv_id) == Snapshot.from_state(S2)
        pre_restore = CvVersion.query.filter_by(document_id=cv_id, version_number=2).one()
        assert pre_restore.change_type == "restore"
        assert Snapshot.from_state(pre_restore.snapshot) == Snapshot.from_state(S2)

    def test_restore_is_audited(self, make_cv) -> None:
        """Verify the restore itself is audited with both version numbers."""
        cv_id = make_cv(**S1)
        create_version(document_id=cv_id, owner_id=OWNER_ID, change_type="manual")

        restore_version(document_id=cv_id, version_number=1, owner_id=OWNER_ID)

        log = AuditLog.query.filter_by(entity_id=cv_id, action="cv.restore").one()
        assert log.payload == {"from_version": 1, "snapshot_version": 2}
