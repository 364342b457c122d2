import logging
from typing import Any, Optional, Union

from academia.core.clock import now_iso
from academia.core.errors import ConflictError, NotFoundError, ValidationError
from academia.finance.dates import parse_iso_date, plan_period, resolve_period
from academia.finance.payments import mark_paid
from academia.services.clients import clean_cpf
from academia.store import paths
from academia.store.base import DocumentStore
from academia.store.paths import PeriodKey

logger = logging.getLogger("academia.finance")

Period = Optional[Union[str, PeriodKey]]


def amount(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _require(data: dict, fields: list[str]) -> None:
    for name in fields:
        if not data.get(name):
            raise ValidationError(f"O campo {name} e obrigatorio.")


class Ledger:
    """Receivables (receita) and expenses (despesa) of each billing period."""

    def __init__(self, store: DocumentStore, default_plan_period: int = 30) -> None:
        self.store = store
        self.default_plan_period = default_plan_period

    # receita

    def add_receivable(self, data: dict) -> dict:
        _require(data, ["nome", "mesAno", "plano", "valorPlano", "dataVencimento"])
        try:
            period = PeriodKey.parse(str(data["mesAno"]))
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        cpf = clean_cpf(data["cpf"]) if data.get("cpf") else None
        stamp = now_iso()
        record = {
            "nome": data["nome"],
            "cpf": cpf,
            "plano": data["plano"],
            "valorPlano": data["valorPlano"],
            "periodoPlano": plan_period(data.get("periodoPlano")) or self.default_plan_period,
            "dataVencimento": data["dataVencimento"],
            "mesAno": period.display,
            "pago": False,
            "dataPagamento": None,
            "criadoEm": stamp,
            "atualizadoEm": stamp,
        }
        collection = paths.receivables(period)
        if cpf:
            path = collection.doc(cpf)
            # The stored receivable is only changed by marking it paid.
            if self.store.get(path) is not None:
                raise ConflictError("Ja existe uma receita para este CPF neste periodo.")
            self.store.set(path, record)
        else:
            path = self.store.add(collection, record)
        return {"id": path.id, **record}

    def list_receivables(self, period: Period = None) -> list[dict]:
        target = resolve_period(period)
        return [doc.to_dict() for doc in self.store.query(paths.receivables(target))]

    def mark_receivable_paid(self, period: Period, record_id: str, payment_date: str) -> dict:
        target = resolve_period(period)
        path = paths.receivables(target).doc(record_id)
        return mark_paid(self.store, path, payment_date, "receita")

    # despesa

    def add_expense(self, data: dict) -> dict:
        descricao = (data.get("descricao") or "").strip()
        if not descricao:
            raise ValidationError("Descricao (tipo de despesa) e obrigatoria.")
        valor = data.get("valor")
        if isinstance(valor, bool) or amount(valor) <= 0:
            raise ValidationError("Valor e obrigatorio e deve ser um numero valido.")
        if not data.get("dataVencimento"):
            raise ValidationError("Data de vencimento e obrigatoria.")
        due = parse_iso_date(data["dataVencimento"])
        if due is None:
            raise ValidationError("Data de vencimento invalida.")
        period = PeriodKey.from_date(due)
        stamp = now_iso()
        record = {
            "descricao": descricao,
            "valor": amount(valor),
            "dataVencimento": data["dataVencimento"],
            "categoria": (data.get("categoria") or "").strip() or "Geral",
            "mesAno": period.display,
            "pago": False,
            "dataPagamento": None,
            "criadoEm": stamp,
            "atualizadoEm": stamp,
        }
        path = self.store.add(paths.expenses(period), record)
        logger.info("despesa criada path=%s valor=%.2f", path, record["valor"])
        return {"id": path.id, **record}

    def list_expenses(self, period: Period = None) -> list[dict]:
        target = resolve_period(period)
        docs = self.store.query(paths.expenses(target), order_by=("dataVencimento", "asc"))
        items = [doc.to_dict() for doc in docs]
        items.sort(key=lambda item: (item.get("pago") is True, str(item.get("dataVencimento") or "")))
        return items

    def mark_expense_paid(self, period: Period, expense_id: str, payment_date: str) -> dict:
        target = resolve_period(period)
        path = paths.expenses(target).doc(expense_id)
        return mark_paid(self.store, path, payment_date, "despesa")

    def delete_expense(self, period: Period, expense_id: str) -> dict:
        target = resolve_period(period)
        path = paths.expenses(target).doc(expense_id)
        current = self.store.get(path)
        if current is None:
            raise NotFoundError("Despesa nao encontrada.")
        self.store.delete(path)
        return current.to_dict()

    # balanco

    def balance(self, period: Period = None) -> dict:
        target = resolve_period(period)
        receitas = self.list_receivables(target)
        despesas = self.list_expenses(target)
        recebido = sum(amount(r.get("valorPlano")) for r in receitas if r.get("pago") is True)
        a_receber = sum(amount(r.get("valorPlano")) for r in receitas if r.get("pago") is not True)
        pago = sum(amount(d.get("valor")) for d in despesas if d.get("pago") is True)
        a_pagar = sum(amount(d.get("valor")) for d in despesas if d.get("pago") is not True)
        return {
            "mesAno": target.display,
            "receitas": {"recebido": recebido, "pendente": a_receber, "total": recebido + a_receber},
            "despesas": {"pago": pago, "pendente": a_pagar, "total": pago + a_pagar},
            "saldo": recebido - pago,
            "saldoPrevisto": (recebido + a_receber) - (pago + a_pagar),
            "quantidade": {"receitas": len(receitas), "despesas": len(despesas)},
        }
