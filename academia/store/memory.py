import copy
import threading
import uuid
from typing import Any, Callable, Optional, Sequence

from academia.core.errors import NotFoundError
from academia.store.base import Document, Filter, OrderBy, check_filters, check_order
from academia.store.paths import CollectionPath, DocumentPath

_MISSING = object()


def _deep_merge(target: dict, incoming: dict) -> dict:
    for key, value in incoming.items():
        current = target.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            _deep_merge(current, value)
        else:
            target[key] = copy.deepcopy(value)
    return target


def _matches(data: dict, filters: Sequence[Filter]) -> bool:
    for field_name, op, expected in filters:
        value = data.get(field_name, _MISSING)
        if op == "==" and value != expected:
            return False
        if op == "!=" and (value is _MISSING or value == expected):
            return False
        if op == "in" and value not in expected:
            return False
    return True


class InMemoryBatch:
    def __init__(self, store: "InMemoryDocumentStore") -> None:
        self._store = store
        self._ops: list[Callable[[dict], None]] = []
        self._committed = False

    def set(self, path: DocumentPath, data: dict, merge: bool = False) -> None:
        payload = copy.deepcopy(data)

        def op(docs: dict) -> None:
            InMemoryDocumentStore._apply_set(docs, path, payload, merge)

        self._ops.append(op)

    def delete(self, path: DocumentPath) -> None:
        self._ops.append(lambda docs: docs.pop(path.path, None))

    def commit(self) -> None:
        if self._committed:
            raise RuntimeError("Batch ja foi executado.")
        self._committed = True
        self._store._commit(self._ops)

    def __len__(self) -> int:
        return len(self._ops)


class InMemoryDocumentStore:
    """Process-local store with the same contract as the Firestore backend."""

    def __init__(self) -> None:
        self._docs: dict[str, dict] = {}
        self._lock = threading.RLock()

    @staticmethod
    def _apply_set(docs: dict, path: DocumentPath, data: dict, merge: bool) -> None:
        if merge and path.path in docs:
            _deep_merge(docs[path.path], data)
        else:
            docs[path.path] = copy.deepcopy(data)

    def _commit(self, ops: list) -> None:
        with self._lock:
            staged = copy.deepcopy(self._docs)
            for op in ops:
                op(staged)
            self._docs = staged

    def get(self, path: DocumentPath) -> Optional[Document]:
        with self._lock:
            data = self._docs.get(path.path)
            if data is None:
                return None
            return Document(path, copy.deepcopy(data))

    def set(self, path: DocumentPath, data: dict, merge: bool = False) -> None:
        with self._lock:
            self._apply_set(self._docs, path, data, merge)

    def update(self, path: DocumentPath, data: dict) -> None:
        with self._lock:
            current = self._docs.get(path.path)
            if current is None:
                raise NotFoundError(f"Documento nao encontrado: {path.path}")
            current.update(copy.deepcopy(data))

    def delete(self, path: DocumentPath) -> None:
        with self._lock:
            self._docs.pop(path.path, None)

    def add(self, collection: CollectionPath, data: dict) -> DocumentPath:
        path = collection.doc(uuid.uuid4().hex[:20])
        self.set(path, data)
        return path

    def query(
        self,
        collection: CollectionPath,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
    ) -> list[Document]:
        checked = check_filters(filters)
        order = check_order(order_by)
        prefix = collection.path + "/"
        with self._lock:
            found = [
                Document(collection.doc(key[len(prefix):]), copy.deepcopy(data))
                for key, data in self._docs.items()
                if key.startswith(prefix) and "/" not in key[len(prefix):] and _matches(data, checked)
            ]
        if order:
            field_name, direction = order
            # Documents without the ordering field are left out, as Firestore does.
            found = [doc for doc in found if doc.data.get(field_name) is not None]
            found.sort(key=lambda doc: _sort_key(doc.data[field_name]), reverse=direction == "desc")
        return found

    def batch(self) -> InMemoryBatch:
        return InMemoryBatch(self)

    def dump(self) -> dict[str, dict]:
        with self._lock:
            return copy.deepcopy(self._docs)


def _sort_key(value: Any):
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (1, value)
    return (2, str(value))
