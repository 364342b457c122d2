import pytest

from academia.core.errors import ConflictError, NotFoundError, ValidationError
from academia.services.subscriptions import SubscriptionService


def _payload(**overrides):
    data = {
        "clienteId": "12345678901",
        "clienteNome": "Maria Souza",
        "planoId": "plano-1",
        "planoNome": "Mensal",
        "valorPlano": 90,
        "periodoPlano": 1,
        "dataInicio": "2025-03-01",
        "dataFim": "2025-03-31",
    }
    data.update(overrides)
    return data


@pytest.fixture()
def service(store):
    return SubscriptionService(store)


def test_second_active_subscription_in_same_month_is_rejected(service):
    service.create("03-2025", _payload())
    with pytest.raises(ConflictError):
        service.create("03/2025", _payload(planoId="plano-2", planoNome="Trimestral"))
    assert len(service.list("03-2025")) == 1


def test_other_month_is_accepted(service):
    service.create("03-2025", _payload())
    created = service.create("04-2025", _payload())
    assert created["mesAno"] == "04-2025"
    assert created["status"] == "ativa"


def test_new_subscription_allowed_after_cancel(service):
    first = service.create("03-2025", _payload())
    service.update_status("03-2025", first["id"], "cancelada")
    second = service.create("03-2025", _payload())
    assert second["id"] != first["id"]


def test_reactivation_respects_the_guard(service):
    first = service.create("03-2025", _payload())
    service.update_status("03-2025", first["id"], "pausada")
    service.create("03-2025", _payload())
    with pytest.raises(ConflictError):
        service.update_status("03-2025", first["id"], "ativa")


def test_validation(service):
    with pytest.raises(ValidationError):
        service.create("", _payload())
    with pytest.raises(ValidationError):
        service.create("03-2025", _payload(planoNome=""))
    with pytest.raises(ValidationError):
        service.create("03-2025", _payload(status="vitalicia"))


def test_delete(service):
    created = service.create("03-2025", _payload())
    service.delete("03-2025", created["id"])
    assert service.list("03-2025") == []
    with pytest.raises(NotFoundError):
        service.delete("03-2025", created["id"])
