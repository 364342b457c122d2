import logging

from academia.core.clock import now_iso
from academia.core.errors import ConflictError, NotFoundError, ValidationError
from academia.finance.dates import parse_iso_date
from academia.store.base import DocumentStore
from academia.store.paths import DocumentPath

logger = logging.getLogger("academia.finance")


def mark_paid(store: DocumentStore, path: DocumentPath, payment_date: str, label: str) -> dict:
    """unpaid -> paid, exactly once. There is no way back to unpaid."""
    if not payment_date or parse_iso_date(payment_date) is None:
        raise ValidationError("Data de pagamento e obrigatoria (AAAA-MM-DD).")
    current = store.get(path)
    if current is None:
        raise NotFoundError(f"{label.capitalize()} nao encontrada.")
    if current.data.get("pago") is True:
        raise ConflictError(f"Esta {label} ja foi paga.")
    changes = {
        "pago": True,
        "dataPagamento": payment_date.strip(),
        "atualizadoEm": now_iso(),
    }
    store.update(path, changes)
    logger.info("%s paga path=%s data=%s", label, path, changes["dataPagamento"])
    return {"id": path.id, **current.data, **changes}
