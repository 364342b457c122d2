from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from academia.api.deps import get_subscription_service
from academia.core.security import require_admin
from academia.services.subscriptions import SubscriptionService

router = APIRouter(tags=["Assinaturas"])


class AssinaturaCreate(BaseModel):
    mesAno: str
    clienteId: str
    clienteNome: str
    clienteCpf: str | None = None
    planoId: str
    planoNome: str
    valorPlano: float
    periodoPlano: int
    dataInicio: str
    dataFim: str
    status: str | None = None


class StatusUpdate(BaseModel):
    status: str


@router.get("/assinaturas")
def list_subscriptions(
    mesAno: str | None = None,
    current_admin: dict = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
):
    items = service.list(mesAno)
    return {"success": True, "message": f"{len(items)} assinaturas encontradas", "data": items}


@router.post("/assinaturas", status_code=status.HTTP_201_CREATED)
def create_subscription(
    payload: AssinaturaCreate,
    current_admin: dict = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
):
    data = payload.model_dump(exclude={"mesAno"}, exclude_none=True)
    created = service.create(payload.mesAno, data)
    return {"success": True, "message": "Assinatura criada com sucesso", "data": created}


@router.patch("/assinaturas/{mes_ano}/{assinatura_id}")
def update_subscription_status(
    mes_ano: str,
    assinatura_id: str,
    payload: StatusUpdate,
    current_admin: dict = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
):
    updated = service.update_status(mes_ano, assinatura_id, payload.status)
    return {"success": True, "message": "Status da assinatura atualizado", "data": updated}


@router.delete("/assinaturas/{mes_ano}/{assinatura_id}")
def delete_subscription(
    mes_ano: str,
    assinatura_id: str,
    current_admin: dict = Depends(require_admin),
    service: SubscriptionService = Depends(get_subscription_service),
):
    service.delete(mes_ano, assinatura_id)
    return {"success": True, "message": "Assinatura removida com sucesso", "data": {"id": assinatura_id}}
