from academia.core.clock import now_iso
from academia.core.errors import NotFoundError, ValidationError
from academia.store import paths
from academia.store.base import DocumentStore


class PlanService:
    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def create(self, nome, valor, periodo) -> dict:
        if not nome or not isinstance(nome, str):
            raise ValidationError("Nome e obrigatorio.")
        try:
            periodo = int(periodo)
        except (TypeError, ValueError):
            periodo = 0
        if periodo <= 0:
            raise ValidationError("Periodo deve ser um numero inteiro positivo.")
        try:
            valor = float(valor)
        except (TypeError, ValueError):
            valor = 0.0
        if valor <= 0:
            raise ValidationError("Valor deve ser um numero positivo.")
        stamp = now_iso()
        record = {"nome": nome.strip(), "periodo": periodo, "valor": valor, "criadoEm": stamp, "atualizadoEm": stamp}
        path = self.store.add(paths.plans(), record)
        return {"id": path.id, **record}

    def list(self) -> list[dict]:
        docs = self.store.query(paths.plans(), order_by=("criadoEm", "desc"))
        return [
            {"id": doc.id, "nome": doc.data["nome"], "valor": doc.data.get("valor"), "periodo": doc.data.get("periodo")}
            for doc in docs
            if doc.data.get("nome")
        ]

    def delete(self, plan_id: str) -> None:
        path = paths.plans().doc(plan_id)
        if self.store.get(path) is None:
            raise NotFoundError("Plano nao encontrado.")
        self.store.delete(path)
