from cvhistory.domain.exceptions import Unauthorized
from cvhistory.storage.document_store import DocumentStore, DocumentState


def load_owned_state(documents: DocumentStore, document_id: str, user_id: str) -> DocumentState:
    """
    Load the live CV state and check the caller owns it.

    A missing CV raises NotFound, a CV owned by someone else raises
    Unauthorized. The two are never conflated.
    """
    state = documents.load_current_state(document_id)

    if str(state["owner_id"]) != str(user_id):
        raise Unauthorized("Not authorized to access this CV")

    return state
