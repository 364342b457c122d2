import pytest

from academia.core.errors import ConflictError, NotFoundError, ValidationError
from academia.finance.ledger import Ledger
from academia.store import paths
from academia.store.paths import PeriodKey

MARCH = PeriodKey(3, 2025)


@pytest.fixture()
def ledger(store):
    return Ledger(store)


def _receivable(ledger, **overrides):
    data = {
        "nome": "Maria Souza",
        "cpf": "12345678901",
        "mesAno": "03-2025",
        "plano": "Mensal",
        "valorPlano": 100,
        "dataVencimento": "2025-03-10",
    }
    data.update(overrides)
    return ledger.add_receivable(data)


def test_receivable_paid_only_once(ledger, store):
    created = _receivable(ledger)
    assert created["id"] == "12345678901"
    assert created["mesAno"] == "03/2025"
    assert created["periodoPlano"] == 30

    paid = ledger.mark_receivable_paid("03/2025", created["id"], "2025-03-11")
    assert paid["pago"] is True

    with pytest.raises(ConflictError):
        ledger.mark_receivable_paid(MARCH, created["id"], "2025-03-20")

    stored = store.get(paths.receivables(MARCH).doc(created["id"]))
    assert stored.data["dataPagamento"] == "2025-03-11"


def test_add_does_not_replace_a_paid_receivable(ledger, store):
    created = _receivable(ledger)
    ledger.mark_receivable_paid(MARCH, created["id"], "2025-03-11")

    with pytest.raises(ConflictError):
        _receivable(ledger, valorPlano=120)

    stored = store.get(paths.receivables(MARCH).doc(created["id"])).data
    assert stored["pago"] is True
    assert stored["dataPagamento"] == "2025-03-11"
    assert stored["valorPlano"] == 100


def test_receivable_cpf_is_normalized(ledger):
    created = _receivable(ledger, cpf="123.456.789-01")
    assert created["id"] == "12345678901"
    with pytest.raises(ValidationError):
        _receivable(ledger, cpf="123/456")


def test_receivable_without_cpf_gets_generated_id(ledger):
    created = _receivable(ledger, cpf=None)
    assert created["id"] != ""
    assert created["cpf"] is None


def test_mark_paid_requires_a_date(ledger):
    created = _receivable(ledger)
    with pytest.raises(ValidationError):
        ledger.mark_receivable_paid(MARCH, created["id"], "")


def test_mark_paid_missing_record(ledger):
    with pytest.raises(NotFoundError) as exc_info:
        ledger.mark_receivable_paid(MARCH, "nao-existe", "2025-03-11")
    assert exc_info.value.status_code == 404


def test_expense_period_comes_from_due_date(ledger, store):
    created = ledger.add_expense({"descricao": "Aluguel", "valor": 1500, "dataVencimento": "2025-03-05"})
    assert created["mesAno"] == "03/2025"
    assert created["categoria"] == "Geral"
    assert store.get(paths.expenses(MARCH).doc(created["id"])) is not None


def test_expense_validation(ledger):
    with pytest.raises(ValidationError):
        ledger.add_expense({"descricao": "Aluguel", "valor": 0, "dataVencimento": "2025-03-05"})
    with pytest.raises(ValidationError):
        ledger.add_expense({"descricao": "", "valor": 10, "dataVencimento": "2025-03-05"})
    with pytest.raises(ValidationError):
        ledger.add_expense({"descricao": "Luz", "valor": 10, "dataVencimento": "amanha"})


def test_expense_paid_once_and_listed_unpaid_first(ledger):
    luz = ledger.add_expense({"descricao": "Luz", "valor": 200, "dataVencimento": "2025-03-01"})
    ledger.add_expense({"descricao": "Agua", "valor": 80, "dataVencimento": "2025-03-15"})
    ledger.mark_expense_paid(MARCH, luz["id"], "2025-03-02")

    with pytest.raises(ConflictError):
        ledger.mark_expense_paid(MARCH, luz["id"], "2025-03-03")

    items = ledger.list_expenses(MARCH)
    assert [item["descricao"] for item in items] == ["Agua", "Luz"]
    assert items[1]["dataPagamento"] == "2025-03-02"


def test_delete_expense(ledger):
    created = ledger.add_expense({"descricao": "Luz", "valor": 200, "dataVencimento": "2025-03-01"})
    removed = ledger.delete_expense("03-2025", created["id"])
    assert removed["descricao"] == "Luz"
    with pytest.raises(NotFoundError):
        ledger.delete_expense("03-2025", created["id"])


def test_balance(ledger):
    paid = _receivable(ledger, cpf="11111111111", valorPlano=100)
    _receivable(ledger, cpf="22222222222", valorPlano=150)
    ledger.mark_receivable_paid(MARCH, paid["id"], "2025-03-10")
    luz = ledger.add_expense({"descricao": "Luz", "valor": 60, "dataVencimento": "2025-03-01"})
    ledger.add_expense({"descricao": "Agua", "valor": 40, "dataVencimento": "2025-03-15"})
    ledger.mark_expense_paid(MARCH, luz["id"], "2025-03-02")

    summary = ledger.balance(MARCH)

    assert summary["mesAno"] == "03/2025"
    assert summary["receitas"] == {"recebido": 100.0, "pendente": 150.0, "total": 250.0}
    assert summary["despesas"] == {"pago": 60.0, "pendente": 40.0, "total": 100.0}
    assert summary["saldo"] == 40.0
    assert summary["saldoPrevisto"] == 150.0
    assert summary["quantidade"] == {"receitas": 2, "despesas": 2}
