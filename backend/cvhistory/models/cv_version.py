from sqlalchemy import event
from cvhistory.extensions import db
from .base import BaseModel

# Names of the unique constraints; the version store tells them apart on IntegrityError
UQ_VERSION_NUMBER = "uq_cv_version_number"
UQ_BRANCH_NAME = "uq_cv_branch_name"


class CvVersion(BaseModel):
    __tablename__ = "cv_versions"

    document_id = db.Column(
        db.String(36),
        db.ForeignKey("cvs.id"),
        nullable=False
    )
    owner_id = db.Column(db.String(36), nullable=False, index=True)

    version_number = db.Column(db.Integer, nullable=False)
    label = db.Column(db.String(200), nullable=False)

    snapshot = db.Column(db.JSON, nullable=False)

    change_type = db.Column(db.String(20), nullable=False)
    # manual | ai-generated | auto-save | publish | restore | branch
    change_description = db.Column(db.Text, nullable=True)

    diff = db.Column(db.JSON, nullable=False)

    # Lookup only; never cascades
    parent_version_id = db.Column(
        db.String(36),
        db.ForeignKey("cv_versions.id", ondelete="SET NULL"),
        nullable=True
    )

    is_branch = db.Column(db.Boolean, nullable=False, default=False)
    branch_name = db.Column(db.String(100), nullable=True)

    size_bytes = db.Column(db.Integer, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("document_id", "version_number", name=UQ_VERSION_NUMBER),
        db.UniqueConstraint("document_id", "branch_name", name=UQ_BRANCH_NAME),
        db.Index("idx_cv_version_document", "document_id", "is_branch", "version_number"),
        db.Index("idx_cv_version_owner", "owner_id", "created_at"),
    )

    def __repr__(self):
        return (
            f"<CvVersion(document_id={self.document_id}, version={self.version_number}, "
            f"change_type={self.change_type}, branch={self.branch_name})>"
        )


@event.listens_for(CvVersion, "before_update")
def prevent_version_mutation(mapper, connection, target):
    raise RuntimeError("CV versions are immutable")
