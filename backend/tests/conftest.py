"""Shared fixtures: a Flask app on a throwaway SQLite file and CV factories."""

import pytest

from cvhistory import create_app
from cvhistory.extensions import db
from cvhistory.models.cv import CvDocument

OWNER_ID = "user-1"
OTHER_USER_ID = "user-2"


@pytest.fixture
def app(tmp_path):
    """Create an app with fresh tables and an active app context."""
    app = create_app(
        "testing",
        config_overrides={"SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'cvhistory.db'}"},
    )

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def make_cv(app):
    """Factory that stores a live CV and returns its id."""

    def _make_cv(owner_id: str = OWNER_ID, **fields) -> str:
        cv = CvDocument()
        cv.owner_id = owner_id
        cv.title = fields.pop("title", "Software Engineer CV")
        cv.sections = fields.pop("sections", [])
        for name, value in fields.items():
            setattr(cv, name, value)

        db.session.add(cv)
        db.session.commit()
        return cv.id

    return _make_cv


@pytest.fixture
def update_cv(app):
    """Apply edits to the live CV, as the editor would between snapshots."""

    def _update_cv(cv_id: str, **fields) -> None:
        cv = db.session.get(CvDocument, cv_id)
        for name, value in fields.items():
            setattr(cv, name, value)
        db.session.commit()

    return _update_cv


def section(section_type: str, title: str | None = None, order: int = 0, **content) -> dict:
    """Build a raw section payload as stored on the live CV."""
    return {
        "type": section_type,
        "title": title or section_type.title(),
        "order": order,
        "visible": True,
        "content": content,
    }
