from typing import Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from academia.api.deps import get_assessment_service, get_client_service
from academia.core.security import require_admin
from academia.services.assessments import AssessmentService
from academia.services.clients import ClientService

router = APIRouter(tags=["Clientes"])


class ClienteCreate(BaseModel):
    nome: str = ""
    email: str = ""
    cpf: str = ""
    celular: str = ""
    dataNascimento: str = ""
    dataPagamento: str | None = None
    plano: dict[str, Any] | None = None


class ClienteUpdate(BaseModel):
    tipo: str
    ativo: bool | None = None
    nome: str | None = None
    email: str | None = None
    celular: str | None = None
    dataNascimento: str | None = None
    dataPagamento: str | None = None
    plano: dict[str, Any] | None = None


class AvaliacaoCreate(BaseModel):
    peso: float
    altura: float
    sexo: str
    idade: int | None = None
    dobras: dict[str, float]
    medidas: dict[str, float | None] = {}
    resultados: dict[str, float] | None = None
    observacoes: str | None = None


@router.get("/clientes")
def list_clients(
    current_admin: dict = Depends(require_admin),
    service: ClientService = Depends(get_client_service),
):
    clientes = service.list()
    plural = "s" if len(clientes) != 1 else ""
    return {
        "success": True,
        "message": f"{len(clientes)} cliente{plural} encontrado{plural}",
        "data": clientes,
    }


@router.post("/clientes", status_code=status.HTTP_201_CREATED)
def create_client(
    payload: ClienteCreate,
    current_admin: dict = Depends(require_admin),
    service: ClientService = Depends(get_client_service),
):
    created, report = service.create(payload.model_dump())
    return {
        "success": True,
        "message": "Cliente cadastrado com sucesso!",
        "data": {**created, "etapas": report.as_dict()["etapas"]},
    }


@router.get("/clientes/{cpf}")
def get_client(
    cpf: str,
    current_admin: dict = Depends(require_admin),
    service: ClientService = Depends(get_client_service),
):
    return {"success": True, "message": "Cliente encontrado.", "data": service.get(cpf)}


@router.put("/clientes/{cpf}")
def update_client(
    cpf: str,
    payload: ClienteUpdate,
    current_admin: dict = Depends(require_admin),
    service: ClientService = Depends(get_client_service),
):
    changes = payload.model_dump(exclude={"tipo"}, exclude_none=True)
    updated, report = service.update(cpf, payload.tipo, changes)
    if payload.tipo == "completa":
        message = "Cliente editado com sucesso!"
    else:
        message = f"Cliente {'ativado' if payload.ativo else 'desativado'} com sucesso!"
    return {"success": True, "message": message, "data": {**updated, "etapas": report.as_dict()["etapas"]}}


@router.delete("/clientes/{cpf}")
def delete_client(
    cpf: str,
    current_admin: dict = Depends(require_admin),
    service: ClientService = Depends(get_client_service),
):
    removed, report = service.delete(cpf)
    return {
        "success": True,
        "message": f'Cliente "{removed["nome"]}" foi excluido com sucesso.',
        "data": {**removed, "etapas": report.as_dict()["etapas"]},
    }


@router.get("/clientes/{cpf}/avaliacoes")
def list_assessments(
    cpf: str,
    current_admin: dict = Depends(require_admin),
    service: AssessmentService = Depends(get_assessment_service),
):
    data = service.list(cpf)
    return {"success": True, "message": f"{data['total']} avaliacoes encontradas", "data": data}


@router.post("/clientes/{cpf}/avaliacoes", status_code=status.HTTP_201_CREATED)
def create_assessment(
    cpf: str,
    payload: AvaliacaoCreate,
    current_admin: dict = Depends(require_admin),
    service: AssessmentService = Depends(get_assessment_service),
):
    created = service.create(cpf, payload.model_dump(exclude_none=True))
    return {"success": True, "message": "Avaliacao criada com sucesso", "data": created}


@router.delete("/clientes/{cpf}/avaliacoes/{avaliacao_id}")
def delete_assessment(
    cpf: str,
    avaliacao_id: str,
    current_admin: dict = Depends(require_admin),
    service: AssessmentService = Depends(get_assessment_service),
):
    removed = service.delete(cpf, avaliacao_id)
    return {"success": True, "message": "Avaliacao deletada com sucesso", "data": removed}
