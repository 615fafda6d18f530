from cvhistory.extensions import db
from .base import BaseModel, utc_now

# Live fields overwritten on restore
CV_CONTENT_FIELDS = (
    "title",
    "summary",
    "personal_info",
    "sections",
    "theme",
    "template_id",
    "generated_html",
)


class CvDocument(BaseModel):
    __tablename__ = "cvs"

    owner_id = db.Column(db.String(36), nullable=False, index=True)

    title = db.Column(db.String(200), nullable=False)
    summary = db.Column(db.Text, nullable=True)
    personal_info = db.Column(db.JSON(none_as_null=True), nullable=True)
    sections = db.Column(db.JSON, nullable=False, default=list)
    theme = db.Column(db.JSON(none_as_null=True), nullable=True)
    template_id = db.Column(db.String(100), nullable=True)
    generated_html = db.Column(db.Text, nullable=True)

    updated_at = db.Column(db.DateTime(timezone=True), default=utc_now, onupdate=utc_now, index=True)

    def to_state(self):
        state = {field: getattr(self, field) for field in CV_CONTENT_FIELDS}
        state["id"] = self.id
        state["owner_id"] = self.owner_id
        state["sections"] = state["sections"] or []
        state["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return state
