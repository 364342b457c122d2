import pytest

from academia.store import paths
from academia.store.paths import PeriodKey


def test_receivables_are_keyed_by_period():
    collection = paths.receivables(PeriodKey(2, 2025))
    assert collection.path == "admin/financas/receita/02-2025/lancamentos"
    assert collection.doc("12345678901").path == "admin/financas/receita/02-2025/lancamentos/12345678901"


def test_period_builders_require_a_period_key():
    with pytest.raises(TypeError):
        paths.subscriptions("02-2025")
    with pytest.raises(TypeError):
        paths.expenses(None)


def test_document_ids_cannot_contain_slashes():
    with pytest.raises(ValueError):
        paths.clients().doc("a/b")
    with pytest.raises(ValueError):
        paths.clients().doc("")


def test_document_path_parts():
    doc = paths.admin_email_index().doc("maria@example.com")
    assert doc.id == "maria@example.com"
    assert doc.parent.path == "admin/indices/emails"
    assert paths.studio_settings().path == "admin/configuracoes"
