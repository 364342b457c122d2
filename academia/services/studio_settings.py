import re

from academia.core.clock import now_iso
from academia.core.errors import ValidationError
from academia.store import paths
from academia.store.base import DocumentStore

FIELDS = ("nomeEstabelecimento", "cnpj", "email", "telefone", "endereco", "cidade", "estado", "cep", "descricao")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def load_settings(store: DocumentStore) -> tuple[dict, bool]:
    doc = store.get(paths.studio_settings())
    if doc is None:
        return {name: "" for name in FIELDS}, False
    return doc.data, True


def save_settings(store: DocumentStore, data: dict) -> dict:
    if not data.get("nomeEstabelecimento"):
        raise ValidationError("Nome do estabelecimento e obrigatorio.")
    if not data.get("email"):
        raise ValidationError("Email e obrigatorio.")
    if not EMAIL_PATTERN.match(data["email"]):
        raise ValidationError("Email invalido.")
    payload = {name: data[name] for name in FIELDS if data.get(name) is not None}
    payload["atualizadoEm"] = now_iso()
    store.set(paths.studio_settings(), payload, merge=True)
    return payload
