# cvhistory/utils/locks.py
import threading
from contextlib import contextmanager

_registry_lock = threading.Lock()
# document_id -> [lock, number of threads holding or waiting on it]
_document_locks = {}


def _acquire_entry(document_id: str) -> threading.Lock:
    with _registry_lock:
        entry = _document_locks.setdefault(document_id, [threading.Lock(), 0])
        entry[1] += 1
        return entry[0]


def _release_entry(document_id: str) -> None:
    with _registry_lock:
        entry = _document_locks[document_id]
        entry[1] -= 1
        if entry[1] == 0:
            del _document_locks[document_id]


@contextmanager
def document_lock(document_id: str):
    """
    Serializes writers of a single document within this process.

    Documents never share a lock, so different CVs are versioned
    concurrently. An entry lives only while some thread holds or waits
    on it. Multi-process deployments additionally rely on the
    (document_id, version_number) unique constraint.
    """
    lock = _acquire_entry(document_id)
    try:
        with lock:
            yield
    finally:
        _release_entry(document_id)
