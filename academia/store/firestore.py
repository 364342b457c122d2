import logging
from contextlib import contextmanager
from typing import Optional, Sequence

from google.api_core import exceptions as google_exceptions
from google.cloud import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from academia.core.errors import BackendError, NotFoundError
from academia.store.base import Document, Filter, OrderBy, check_filters, check_order
from academia.store.paths import CollectionPath, DocumentPath

logger = logging.getLogger("academia.store")


@contextmanager
def translate_errors(action: str):
    try:
        yield
    except google_exceptions.NotFound as exc:
        raise NotFoundError(detail=action) from exc
    except google_exceptions.PermissionDenied as exc:
        raise BackendError("permission-denied", detail=action) from exc
    except (google_exceptions.ServiceUnavailable, google_exceptions.DeadlineExceeded) as exc:
        raise BackendError("unavailable", detail=action) from exc
    except google_exceptions.GoogleAPICallError as exc:
        logger.error("firestore %s failed: %s", action, exc)
        raise BackendError("internal", getattr(exc, "message", None) or str(exc), detail=action) from exc


class FirestoreBatch:
    def __init__(self, client: firestore.Client) -> None:
        self._client = client
        self._batch = client.batch()
        self._size = 0

    def set(self, path: DocumentPath, data: dict, merge: bool = False) -> None:
        self._batch.set(self._client.document(path.path), data, merge=merge)
        self._size += 1

    def delete(self, path: DocumentPath) -> None:
        self._batch.delete(self._client.document(path.path))
        self._size += 1

    def commit(self) -> None:
        with translate_errors(f"batch.commit({self._size})"):
            self._batch.commit()

    def __len__(self) -> int:
        return self._size


class FirestoreDocumentStore:
    def __init__(self, client: firestore.Client) -> None:
        self._client = client

    def get(self, path: DocumentPath) -> Optional[Document]:
        with translate_errors(f"get {path}"):
            snapshot = self._client.document(path.path).get()
        if not snapshot.exists:
            return None
        return Document(path, snapshot.to_dict() or {})

    def set(self, path: DocumentPath, data: dict, merge: bool = False) -> None:
        with translate_errors(f"set {path}"):
            self._client.document(path.path).set(data, merge=merge)

    def update(self, path: DocumentPath, data: dict) -> None:
        with translate_errors(f"update {path}"):
            self._client.document(path.path).update(data)

    def delete(self, path: DocumentPath) -> None:
        with translate_errors(f"delete {path}"):
            self._client.document(path.path).delete()

    def add(self, collection: CollectionPath, data: dict) -> DocumentPath:
        with translate_errors(f"add {collection}"):
            ref = self._client.collection(collection.path).document()
            ref.set(data)
        return collection.doc(ref.id)

    def query(
        self,
        collection: CollectionPath,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
    ) -> list[Document]:
        query = self._client.collection(collection.path)
        for field_name, op, value in check_filters(filters):
            query = query.where(filter=FieldFilter(field_name, op, value))
        order = check_order(order_by)
        if order:
            field_name, direction = order
            query = query.order_by(
                field_name,
                direction=firestore.Query.DESCENDING if direction == "desc" else firestore.Query.ASCENDING,
            )
        with translate_errors(f"query {collection}"):
            snapshots = list(query.stream())
        return [Document(collection.doc(snap.id), snap.to_dict() or {}) for snap in snapshots]

    def batch(self) -> FirestoreBatch:
        return FirestoreBatch(self._client)
