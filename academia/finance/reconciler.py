import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from academia.core.clock import now_iso
from academia.finance.dates import due_in_period, next_due_date, plan_period, resolve_period
from academia.store import paths
from academia.store.base import DocumentStore
from academia.store.paths import PeriodKey

logger = logging.getLogger("academia.finance")

# Fields owned by the reconciliation run. Payment fields are never part of it.
RECEIVABLE_FIELDS = ("cpf", "nome", "plano", "valorPlano", "periodoPlano", "dataVencimento", "mesAno")


@dataclass
class ReconciliationResult:
    processados: int
    periodo: PeriodKey
    gravados: int = 0
    ignorados: int = 0

    @property
    def message(self) -> str:
        plural = "s" if self.processados != 1 else ""
        return f"{self.processados} cliente{plural} processado{plural} para o periodo {self.periodo.key}"

    def as_dict(self) -> dict:
        return {
            "processados": self.processados,
            "gravados": self.gravados,
            "ignorados": self.ignorados,
            "mesAno": self.periodo.key,
        }


def build_receivable(client: dict, cpf: str, due: date, period: PeriodKey) -> dict:
    plano = client.get("plano") or {}
    if not isinstance(plano, dict):
        plano = {}
    return {
        "cpf": cpf,
        "nome": client.get("nome") or "",
        "plano": plano.get("nome") or "",
        "valorPlano": plano.get("valor") or 0,
        "periodoPlano": plan_period(plano.get("periodo")),
        "dataVencimento": due.isoformat(),
        "mesAno": period.display,
    }


class FinanceReconciler:
    """Builds the receivables of a billing period from the active clients."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def run(self, period: Optional[Union[str, PeriodKey]] = None) -> ReconciliationResult:
        target = resolve_period(period)
        active = self.store.query(paths.admin_clients(), [("ativo", "==", True)])
        result = ReconciliationResult(processados=0, periodo=target)
        if not active:
            return result

        receivables = paths.receivables(target)
        existing = {doc.id: doc.data for doc in self.store.query(receivables)}
        batch = self.store.batch()
        stamp = now_iso()

        for doc in active:
            client = doc.data
            plano = client.get("plano") if isinstance(client.get("plano"), dict) else {}
            due = next_due_date(client.get("dataPagamento"), plano.get("periodo"))
            if due is None:
                result.ignorados += 1
                continue
            if not due_in_period(due, target):
                continue
            cpf = client.get("cpf") or doc.id
            payload = build_receivable(client, cpf, due, target)
            result.processados += 1

            current = existing.get(cpf)
            if current is not None and all(current.get(k) == payload[k] for k in RECEIVABLE_FIELDS):
                continue
            payload["atualizadoEm"] = stamp
            if current is None:
                payload.update({"pago": False, "dataPagamento": None, "criadoEm": stamp})
            batch.set(receivables.doc(cpf), payload, merge=True)
            result.gravados += 1

        if result.gravados:
            batch.commit()
        logger.info(
            "reconciliation period=%s processed=%s written=%s skipped=%s",
            target.key,
            result.processados,
            result.gravados,
            result.ignorados,
        )
        return result
