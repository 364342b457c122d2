from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from academia.api.deps import get_plan_service
from academia.core.security import require_admin
from academia.services.plans import PlanService

router = APIRouter(tags=["Planos"])


class PlanoCreate(BaseModel):
    nome: str
    valor: float
    periodo: int


@router.get("/planos")
def list_plans(
    current_admin: dict = Depends(require_admin),
    service: PlanService = Depends(get_plan_service),
):
    planos = service.list()
    return {"success": True, "message": f"{len(planos)} planos encontrados", "data": planos}


@router.post("/planos", status_code=status.HTTP_201_CREATED)
def create_plan(
    payload: PlanoCreate,
    current_admin: dict = Depends(require_admin),
    service: PlanService = Depends(get_plan_service),
):
    plano = service.create(payload.nome, payload.valor, payload.periodo)
    return {"success": True, "message": "Plano adicionado com sucesso", "data": plano}


@router.delete("/planos/{plano_id}")
def delete_plan(
    plano_id: str,
    current_admin: dict = Depends(require_admin),
    service: PlanService = Depends(get_plan_service),
):
    service.delete(plano_id)
    return {"success": True, "message": "Plano removido com sucesso", "data": {"id": plano_id}}
