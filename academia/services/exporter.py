from io import BytesIO
from typing import Tuple

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from academia.core.clock import now_iso
from academia.finance.ledger import Ledger
from academia.store.paths import PeriodKey

RECEITA_HEADERS = ["Cliente", "CPF", "Plano", "Valor", "Vencimento", "Pago", "Data de pagamento"]
DESPESA_HEADERS = ["Descricao", "Categoria", "Valor", "Vencimento", "Pago", "Data de pagamento"]


def _autosize(ws, columns: int) -> None:
    for idx in range(1, columns + 1):
        ws.column_dimensions[get_column_letter(idx)].width = 22


def build_balance_export(ledger: Ledger, period: PeriodKey) -> Tuple[bytes, str]:
    summary = ledger.balance(period)
    wb = Workbook()
    ws = wb.active
    ws.title = "BALANCO"
    ws.append(["Periodo", summary["mesAno"]])
    ws.append(["Receitas recebidas", summary["receitas"]["recebido"]])
    ws.append(["Receitas pendentes", summary["receitas"]["pendente"]])
    ws.append(["Despesas pagas", summary["despesas"]["pago"]])
    ws.append(["Despesas pendentes", summary["despesas"]["pendente"]])
    ws.append(["Saldo", summary["saldo"]])
    ws.append(["Saldo previsto", summary["saldoPrevisto"]])
    ws.append(["Gerado em", now_iso()])
    _autosize(ws, 2)

    receitas = wb.create_sheet("RECEITAS")
    receitas.append(RECEITA_HEADERS)
    for item in ledger.list_receivables(period):
        receitas.append(
            [
                item.get("nome"),
                item.get("cpf"),
                item.get("plano"),
                item.get("valorPlano"),
                item.get("dataVencimento"),
                "Sim" if item.get("pago") is True else "Nao",
                item.get("dataPagamento") or "-",
            ]
        )
    receitas.freeze_panes = "A2"
    _autosize(receitas, len(RECEITA_HEADERS))

    despesas = wb.create_sheet("DESPESAS")
    despesas.append(DESPESA_HEADERS)
    for item in ledger.list_expenses(period):
        despesas.append(
            [
                item.get("descricao"),
                item.get("categoria"),
                item.get("valor"),
                item.get("dataVencimento"),
                "Sim" if item.get("pago") is True else "Nao",
                item.get("dataPagamento") or "-",
            ]
        )
    despesas.freeze_panes = "A2"
    _autosize(despesas, len(DESPESA_HEADERS))

    out = BytesIO()
    wb.save(out)
    filename = f"balanco_{period.key}.xlsx"
    return out.getvalue(), filename
