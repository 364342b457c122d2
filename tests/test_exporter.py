from io import BytesIO

from openpyxl import load_workbook

from academia.finance.ledger import Ledger
from academia.services.exporter import build_balance_export
from academia.store.paths import PeriodKey


def test_balance_export_sheets(store):
    ledger = Ledger(store)
    ledger.add_receivable(
        {
            "nome": "Maria Souza",
            "cpf": "12345678901",
            "mesAno": "03-2025",
            "plano": "Mensal",
            "valorPlano": 90,
            "dataVencimento": "2025-03-10",
        }
    )
    ledger.add_expense({"descricao": "Luz", "valor": 60, "dataVencimento": "2025-03-01"})

    content, filename = build_balance_export(ledger, PeriodKey(3, 2025))

    assert filename == "balanco_03-2025.xlsx"
    wb = load_workbook(BytesIO(content))
    assert wb.sheetnames == ["BALANCO", "RECEITAS", "DESPESAS"]
    assert wb["BALANCO"]["B1"].value == "03/2025"
    assert wb["RECEITAS"]["A2"].value == "Maria Souza"
    assert wb["RECEITAS"]["F2"].value == "Nao"
    assert wb["DESPESAS"]["B2"].value == "Geral"
