# cvhistory/storage/document_store.py
"""
Document Store collaborator.

The versioning core never touches the `cvs` table directly. It reads
the live state through `load_current_state` and, on restore, hands the
historical fields to `overwrite_state`. Any object implementing
DocumentStore can be injected into the application services.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict
import logging

from cvhistory.extensions import db
from cvhistory.models.cv import CvDocument, CV_CONTENT_FIELDS
from cvhistory.domain.exceptions import NotFound
from cvhistory.utils.transaction import transactional

logger = logging.getLogger(__name__)

DocumentState = Dict[str, Any]


class DocumentStore(ABC):

    @abstractmethod
    def load_current_state(self, document_id: str) -> DocumentState:
        """Live content fields plus `id` and `owner_id`. Raises NotFound."""

    @abstractmethod
    def overwrite_state(self, document_id: str, fields: Dict[str, Any]) -> DocumentState:
        """Replace the live content fields and return the new state."""


class SqlDocumentStore(DocumentStore):
    """DocumentStore backed by the `cvs` table."""

    def _get(self, document_id: str) -> CvDocument:
        document = db.session.get(CvDocument, document_id)
        if document is None:
            raise NotFound(f"CV not found: {document_id}")
        return document

    def load_current_state(self, document_id: str) -> DocumentState:
        return self._get(document_id).to_state()

    def overwrite_state(self, document_id: str, fields: Dict[str, Any]) -> DocumentState:
        with transactional():
            document = self._get(document_id)
            for field in CV_CONTENT_FIELDS:
                setattr(document, field, fields.get(field))
            if document.sections is None:
                document.sections = []
            if not document.title:
                document.title = ""

        logger.debug(f"Live state of CV {document_id} overwritten")
        return document.to_state()
