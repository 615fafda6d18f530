from cvhistory.domain.snapshot import Snapshot


def snapshot_document(state) -> Snapshot:
    """
    Freeze the content fields of a live document state.
    """
    return Snapshot.from_state(state)


def default_label(version_number: int) -> str:
    return f"v{version_number}"


def next_version_number(versions, document_id) -> int:
    """
    Next number of the per-document sequence.

    Branch heads draw from the same sequence as the mainline, so the
    maximum is taken over every version of the document.
    """
    return versions.max_version_number(document_id) + 1
