from fastapi import APIRouter, Depends, status
from fastapi.responses import Response
from pydantic import BaseModel

from academia.api.deps import get_ledger, get_reconciler
from academia.core.security import require_admin
from academia.finance.dates import resolve_period
from academia.finance.ledger import Ledger
from academia.finance.reconciler import FinanceReconciler
from academia.services.exporter import build_balance_export

router = APIRouter(prefix="/financas", tags=["Financas"])


class ProcessarRequest(BaseModel):
    mesAno: str | None = None


class ReceitaCreate(BaseModel):
    nome: str
    cpf: str | None = None
    mesAno: str
    plano: str
    valorPlano: float
    periodoPlano: int | None = None
    dataVencimento: str


class DespesaCreate(BaseModel):
    descricao: str
    valor: float
    dataVencimento: str
    categoria: str | None = None


class PagamentoRequest(BaseModel):
    dataPagamento: str


@router.post("/processar")
def run_reconciliation(
    payload: ProcessarRequest | None = None,
    current_admin: dict = Depends(require_admin),
    reconciler: FinanceReconciler = Depends(get_reconciler),
):
    result = reconciler.run(payload.mesAno if payload else None)
    return {"success": True, "message": result.message, "data": result.as_dict()}


@router.get("/receitas")
def list_receitas(
    mesAno: str | None = None,
    current_admin: dict = Depends(require_admin),
    ledger: Ledger = Depends(get_ledger),
):
    items = ledger.list_receivables(mesAno)
    return {"success": True, "message": f"{len(items)} receitas encontradas", "data": items}


@router.post("/receitas", status_code=status.HTTP_201_CREATED)
def create_receita(
    payload: ReceitaCreate,
    current_admin: dict = Depends(require_admin),
    ledger: Ledger = Depends(get_ledger),
):
    created = ledger.add_receivable(payload.model_dump(exclude_none=True))
    return {"success": True, "message": "Receita adicionada com sucesso", "data": created}


@router.post("/receitas/{mes_ano}/{receita_id}/pagamento")
def pay_receita(
    mes_ano: str,
    receita_id: str,
    payload: PagamentoRequest,
    current_admin: dict = Depends(require_admin),
    ledger: Ledger = Depends(get_ledger),
):
    updated = ledger.mark_receivable_paid(mes_ano, receita_id, payload.dataPagamento)
    return {"success": True, "message": "Receita marcada como paga", "data": updated}


@router.get("/despesas")
def list_despesas(
    mesAno: str | None = None,
    current_admin: dict = Depends(require_admin),
    ledger: Ledger = Depends(get_ledger),
):
    items = ledger.list_expenses(mesAno)
    return {"success": True, "message": f"{len(items)} despesas encontradas", "data": items}


@router.post("/despesas", status_code=status.HTTP_201_CREATED)
def create_despesa(
    payload: DespesaCreate,
    current_admin: dict = Depends(require_admin),
    ledger: Ledger = Depends(get_ledger),
):
    created = ledger.add_expense(payload.model_dump(exclude_none=True))
    return {"success": True, "message": "Despesa adicionada com sucesso", "data": created}


@router.post("/despesas/{mes_ano}/{despesa_id}/pagamento")
def pay_despesa(
    mes_ano: str,
    despesa_id: str,
    payload: PagamentoRequest,
    current_admin: dict = Depends(require_admin),
    ledger: Ledger = Depends(get_ledger),
):
    updated = ledger.mark_expense_paid(mes_ano, despesa_id, payload.dataPagamento)
    return {"success": True, "message": "Despesa marcada como paga", "data": updated}


@router.delete("/despesas/{mes_ano}/{despesa_id}")
def delete_despesa(
    mes_ano: str,
    despesa_id: str,
    current_admin: dict = Depends(require_admin),
    ledger: Ledger = Depends(get_ledger),
):
    removed = ledger.delete_expense(mes_ano, despesa_id)
    return {"success": True, "message": "Despesa removida com sucesso", "data": removed}


@router.get("/balanco")
def get_balanco(
    mesAno: str | None = None,
    current_admin: dict = Depends(require_admin),
    ledger: Ledger = Depends(get_ledger),
):
    summary = ledger.balance(mesAno)
    return {"success": True, "message": f"Balanco de {summary['mesAno']}", "data": summary}


@router.get("/balanco/export")
def export_balanco(
    mesAno: str | None = None,
    current_admin: dict = Depends(require_admin),
    ledger: Ledger = Depends(get_ledger),
):
    content, filename = build_balance_export(ledger, resolve_period(mesAno))
    return Response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
