import logging
from typing import Optional, Union

from academia.core.clock import now_iso
from academia.core.errors import ConflictError, NotFoundError, ValidationError
from academia.finance.dates import resolve_period
from academia.store import paths
from academia.store.base import DocumentStore
from academia.store.paths import PeriodKey

logger = logging.getLogger("academia.subscriptions")

STATUSES = ("ativa", "pausada", "cancelada", "expirada")
REQUIRED_FIELDS = (
    "clienteId",
    "clienteNome",
    "planoId",
    "planoNome",
    "valorPlano",
    "periodoPlano",
    "dataInicio",
    "dataFim",
)
FIELDS = REQUIRED_FIELDS + ("clienteCpf", "status")


class SubscriptionService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def _active_ids(self, period: PeriodKey, client_id: str) -> list[str]:
        docs = self.store.query(
            paths.subscriptions(period),
            [("clienteId", "==", client_id), ("status", "==", "ativa")],
        )
        return [doc.id for doc in docs]

    def create(self, period: Optional[Union[str, PeriodKey]], data: dict) -> dict:
        if not period:
            raise ValidationError("O campo mesAno e obrigatorio.")
        target = resolve_period(period)
        if not data:
            raise ValidationError("Os dados da assinatura sao obrigatorios.")
        for name in REQUIRED_FIELDS:
            if not data.get(name):
                raise ValidationError(f"O campo {name} e obrigatorio.")
        status = data.get("status") or "ativa"
        if status not in STATUSES:
            raise ValidationError(f"Status invalido: {status}")

        # Read-then-write without a lock: two concurrent requests can both pass.
        if status == "ativa" and self._active_ids(target, data["clienteId"]):
            raise ConflictError("Cliente ja possui uma assinatura ativa neste mes.")

        stamp = now_iso()
        record = {name: data.get(name) for name in FIELDS if name in data}
        record.update({"status": status, "criadoEm": stamp, "atualizadoEm": stamp})
        record.setdefault("clienteCpf", "")
        path = self.store.add(paths.subscriptions(target), record)
        logger.info("assinatura criada id=%s periodo=%s cliente=%s", path.id, target.key, data["clienteId"])
        return {"id": path.id, "mesAno": target.key, **record}

    def list(self, period: Optional[Union[str, PeriodKey]] = None) -> list[dict]:
        target = resolve_period(period)
        docs = self.store.query(paths.subscriptions(target), order_by=("criadoEm", "desc"))
        items = []
        for doc in docs:
            data = doc.data
            if not (data.get("clienteNome") and data.get("planoNome")):
                continue
            items.append(
                {
                    "id": doc.id,
                    "clienteId": data.get("clienteId") or "",
                    "clienteNome": data["clienteNome"],
                    "clienteCpf": data.get("clienteCpf") or "",
                    "planoId": data.get("planoId") or "",
                    "planoNome": data["planoNome"],
                    "valorPlano": data.get("valorPlano") or 0,
                    "periodoPlano": data.get("periodoPlano") or 30,
                    "dataInicio": data.get("dataInicio") or "",
                    "dataFim": data.get("dataFim") or "",
                    "status": data.get("status") or "ativa",
                    "criadoEm": data.get("criadoEm"),
                    "atualizadoEm": data.get("atualizadoEm"),
                }
            )
        return items

    def update_status(self, period: Union[str, PeriodKey], subscription_id: str, status: str) -> dict:
        target = resolve_period(period)
        if status not in STATUSES:
            raise ValidationError(f"Status invalido: {status}")
        path = paths.subscriptions(target).doc(subscription_id)
        current = self.store.get(path)
        if current is None:
            raise NotFoundError("Assinatura nao encontrada.")
        if status == "ativa" and current.data.get("status") != "ativa":
            others = [i for i in self._active_ids(target, current.data.get("clienteId")) if i != subscription_id]
            if others:
                raise ConflictError("Cliente ja possui uma assinatura ativa neste mes.")
        changes = {"status": status, "atualizadoEm": now_iso()}
        self.store.update(path, changes)
        return {"id": subscription_id, **current.data, **changes}

    def delete(self, period: Union[str, PeriodKey], subscription_id: str) -> None:
        target = resolve_period(period)
        path = paths.subscriptions(target).doc(subscription_id)
        if self.store.get(path) is None:
            raise NotFoundError("Assinatura nao encontrada.")
        self.store.delete(path)
        logger.info("assinatura excluida id=%s periodo=%s", subscription_id, target.key)
