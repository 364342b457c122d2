from fastapi import APIRouter, Depends
from pydantic import BaseModel

from academia.core.backends import get_store
from academia.core.security import require_admin
from academia.services.studio_settings import load_settings, save_settings
from academia.store.base import DocumentStore

router = APIRouter(tags=["Configuracoes"])


class ConfiguracoesPayload(BaseModel):
    nomeEstabelecimento: str = ""
    cnpj: str | None = None
    email: str = ""
    telefone: str | None = None
    endereco: str | None = None
    cidade: str | None = None
    estado: str | None = None
    cep: str | None = None
    descricao: str | None = None


@router.get("/configuracoes")
def get_configuracoes(
    current_admin: dict = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    data, exists = load_settings(store)
    message = "Configuracoes carregadas" if exists else "Nenhuma configuracao encontrada"
    return {"success": True, "message": message, "data": data}


@router.put("/configuracoes")
def put_configuracoes(
    payload: ConfiguracoesPayload,
    current_admin: dict = Depends(require_admin),
    store: DocumentStore = Depends(get_store),
):
    saved = save_settings(store, payload.model_dump())
    return {"success": True, "message": "Configuracoes salvas com sucesso", "data": saved}
