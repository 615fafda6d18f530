# cvhistory/storage/version_store.py
"""
Persistence for CvVersion rows.

Pure data access: no numbering decisions, no authorization. All
methods work on the current Flask-SQLAlchemy session; committing is the
caller's transactional boundary.
"""
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from cvhistory.extensions import db
from cvhistory.models.cv_version import CvVersion, UQ_BRANCH_NAME, UQ_VERSION_NUMBER
from cvhistory.domain.exceptions import Conflict, NotFound, ValidationError


class VersionStore:

    def append(self, version: CvVersion) -> CvVersion:
        """
        Stage a new version and flush it.

        Raises:
        - Conflict if the document already has this version number
        - ValidationError if the branch name is already taken
        - IntegrityError unchanged for any other constraint
        """
        db.session.add(version)
        try:
            db.session.flush()
        except IntegrityError as exc:
            message = str(exc.orig)
            unique = "unique" in message.lower()
            if UQ_BRANCH_NAME in message or (unique and "branch_name" in message):
                raise ValidationError(
                    f"Branch '{version.branch_name}' already exists for this CV"
                ) from exc
            if UQ_VERSION_NUMBER in message or (unique and "version_number" in message):
                raise Conflict(
                    f"Version {version.version_number} already exists for CV {version.document_id}"
                ) from exc
            raise
        return version

    def latest_mainline(self, document_id: str) -> Optional[CvVersion]:
        return (
            CvVersion.query
            .filter_by(document_id=document_id, is_branch=False)
            .order_by(CvVersion.version_number.desc())
            .first()
        )

    def max_version_number(self, document_id: str) -> int:
        value = (
            db.session.query(func.max(CvVersion.version_number))
            .filter(CvVersion.document_id == document_id)
            .scalar()
        )
        return value or 0

    def find(self, document_id: str, version_number: int) -> Optional[CvVersion]:
        return (
            CvVersion.query
            .filter_by(document_id=document_id, version_number=version_number)
            .first()
        )

    def get(self, document_id: str, version_number: int) -> CvVersion:
        version = self.find(document_id, version_number)
        if version is None:
            raise NotFound(f"Version {version_number} not found")
        return version

    def list(self, document_id: str, offset: int, limit: int) -> Tuple[List[CvVersion], int]:
        query = CvVersion.query.filter_by(document_id=document_id, is_branch=False)

        total = query.count()
        versions = (
            query
            .order_by(CvVersion.version_number.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return versions, total

    def list_branches(self, document_id: str) -> List[CvVersion]:
        return (
            CvVersion.query
            .filter_by(document_id=document_id, is_branch=True)
            .order_by(CvVersion.created_at.desc(), CvVersion.version_number.desc())
            .all()
        )

    def branch_exists(self, document_id: str, branch_name: str) -> bool:
        return (
            CvVersion.query
            .filter_by(document_id=document_id, branch_name=branch_name)
            .first()
        ) is not None

    def aggregate_size(self, owner_id: str) -> Dict[str, int]:
        count, total_bytes = (
            db.session.query(
                func.count(CvVersion.id),
                func.coalesce(func.sum(CvVersion.size_bytes), 0),
            )
            .filter(CvVersion.owner_id == owner_id)
            .one()
        )
        return {"count": int(count), "total_bytes": int(total_bytes)}
