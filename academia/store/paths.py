import re
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

PERIOD_PATTERN = re.compile(r"^(\d{2})[-/](\d{4})$")


@dataclass(frozen=True)
class PeriodKey:
    """Billing month. Stored as "MM-YYYY", displayed as "MM/YYYY"."""

    month: int
    year: int

    def __post_init__(self) -> None:
        if not isinstance(self.month, int) or not 1 <= self.month <= 12:
            raise ValueError(f"Mes invalido: {self.month!r}")
        if not isinstance(self.year, int) or not 1000 <= self.year <= 9999:
            raise ValueError(f"Ano invalido: {self.year!r}")

    @classmethod
    def parse(cls, value: str) -> "PeriodKey":
        match = PERIOD_PATTERN.match((value or "").strip())
        if not match:
            raise ValueError(f"Periodo invalido: {value!r} (use MM-AAAA ou MM/AAAA)")
        return cls(int(match.group(1)), int(match.group(2)))

    @classmethod
    def from_date(cls, value: date) -> "PeriodKey":
        return cls(value.month, value.year)

    @classmethod
    def current(cls) -> "PeriodKey":
        return cls.from_date(date.today())

    @classmethod
    def resolve(cls, value: Optional[Union[str, "PeriodKey"]]) -> "PeriodKey":
        if isinstance(value, PeriodKey):
            return value
        if not value:
            return cls.current()
        return cls.parse(value)

    @property
    def key(self) -> str:
        return f"{self.month:02d}-{self.year}"

    @property
    def display(self) -> str:
        return f"{self.month:02d}/{self.year}"

    def __str__(self) -> str:
        return self.key


def _check_segment(value: str) -> str:
    if not isinstance(value, str) or not value or "/" in value:
        raise ValueError(f"Identificador de documento invalido: {value!r}")
    return value


@dataclass(frozen=True)
class DocumentPath:
    segments: tuple

    @property
    def path(self) -> str:
        return "/".join(self.segments)

    @property
    def id(self) -> str:
        return self.segments[-1]

    @property
    def parent(self) -> "CollectionPath":
        return CollectionPath(self.segments[:-1])

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class CollectionPath:
    segments: tuple

    @property
    def path(self) -> str:
        return "/".join(self.segments)

    def doc(self, doc_id: str) -> DocumentPath:
        return DocumentPath(self.segments + (_check_segment(doc_id),))

    def __str__(self) -> str:
        return self.path


def _period_segment(period: PeriodKey) -> str:
    if not isinstance(period, PeriodKey):
        raise TypeError("period deve ser um PeriodKey")
    return period.key


def clients() -> CollectionPath:
    return CollectionPath(("clientes", "clientes", "clientes"))


def admin_clients() -> CollectionPath:
    return CollectionPath(("admin", "clientes", "clientes"))


def email_index() -> CollectionPath:
    return CollectionPath(("indices", "emails", "emails"))


def admin_email_index() -> CollectionPath:
    return CollectionPath(("admin", "indices", "emails"))


def plans() -> CollectionPath:
    return CollectionPath(("admin", "planos", "items"))


def subscriptions(period: PeriodKey) -> CollectionPath:
    return CollectionPath(("admin", "assinaturas", _period_segment(period)))


def receivables(period: PeriodKey) -> CollectionPath:
    return CollectionPath(("admin", "financas", "receita", _period_segment(period), "lancamentos"))


def expenses(period: PeriodKey) -> CollectionPath:
    return CollectionPath(("admin", "financas", "despesa", _period_segment(period), "lancamentos"))


def assessments(cpf: str) -> CollectionPath:
    return CollectionPath(("clientes", "avaliacoes", _check_segment(cpf)))


def studio_settings() -> DocumentPath:
    return DocumentPath(("admin", "configuracoes"))
