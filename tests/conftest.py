import pytest
from fastapi.testclient import TestClient

from academia.core.backends import get_identity, get_store
from academia.core.security import require_admin
from academia.main import app
from academia.services.identity import InMemoryIdentityProvider
from academia.store.memory import InMemoryDocumentStore

ADMIN = {"uid": "admin-uid", "email": "admin@academia.com", "role": "admin"}


@pytest.fixture()
def store():
    return InMemoryDocumentStore()


@pytest.fixture()
def identity():
    return InMemoryIdentityProvider()


@pytest.fixture()
def api(store, identity):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_identity] = lambda: identity
    app.dependency_overrides[require_admin] = lambda: ADMIN
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture()
def client_payload():
    def build(**overrides):
        data = {
            "nome": "Maria Souza",
            "email": "maria@example.com",
            "cpf": "123.456.789-01",
            "celular": "11999990000",
            "dataNascimento": "1990-05-10",
            "dataPagamento": "2024-11-20",
            "plano": {"nome": "Trimestral", "valor": 240, "periodo": 3},
        }
        data.update(overrides)
        return data

    return build
