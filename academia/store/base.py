from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Protocol, Sequence, Tuple

from academia.store.paths import CollectionPath, DocumentPath

Filter = Tuple[str, str, Any]
OrderBy = Tuple[str, str]

SUPPORTED_OPERATORS = {"==", "!=", "in"}


@dataclass
class Document:
    path: DocumentPath
    data: dict = field(default_factory=dict)

    @property
    def id(self) -> str:
        return self.path.id

    def to_dict(self) -> dict:
        return {"id": self.id, **self.data}


class WriteBatch(Protocol):
    def set(self, path: DocumentPath, data: dict, merge: bool = False) -> None: ...

    def delete(self, path: DocumentPath) -> None: ...

    def commit(self) -> None: ...


class DocumentStore(Protocol):
    """Key-path document database used by the services.

    ``update`` raises ``NotFoundError`` when the document is absent; ``delete``
    of a missing document is a no-op. ``batch().commit()`` applies every queued
    write or none of them.
    """

    def get(self, path: DocumentPath) -> Optional[Document]: ...

    def set(self, path: DocumentPath, data: dict, merge: bool = False) -> None: ...

    def update(self, path: DocumentPath, data: dict) -> None: ...

    def delete(self, path: DocumentPath) -> None: ...

    def add(self, collection: CollectionPath, data: dict) -> DocumentPath: ...

    def query(
        self,
        collection: CollectionPath,
        filters: Sequence[Filter] = (),
        order_by: Optional[OrderBy] = None,
    ) -> list[Document]: ...

    def batch(self) -> WriteBatch: ...


def check_filters(filters: Iterable[Filter]) -> list[Filter]:
    checked = []
    for field_name, op, value in filters:
        if op not in SUPPORTED_OPERATORS:
            raise ValueError(f"Operador nao suportado: {op}")
        checked.append((field_name, op, value))
    return checked


def check_order(order_by: Optional[OrderBy]) -> Optional[OrderBy]:
    if order_by is None:
        return None
    field_name, direction = order_by
    if direction not in {"asc", "desc"}:
        raise ValueError(f"Direcao de ordenacao invalida: {direction}")
    return field_name, direction
