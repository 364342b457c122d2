import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from academia.core.backends import get_identity
from academia.core.security import require_admin
from academia.services.identity import IdentityProvider

router = APIRouter(tags=["Auth"])

logger = logging.getLogger("academia.auth")


class VerifyTokenRequest(BaseModel):
    token: str


class AdminRoleRequest(BaseModel):
    uid: str


@router.post("/auth/verify-token", summary="Valida um ID token do Firebase")
def verify_token(payload: VerifyTokenRequest, identity: IdentityProvider = Depends(get_identity)):
    if not payload.token.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token ausente")
    try:
        decoded = identity.verify_token(payload.token.strip())
    except Exception:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token invalido")
    return {"success": True, "message": "Token valido", "data": {"uid": decoded.get("uid")}}


@router.post("/auth/roles/admin", summary="Concede a permissao de administrador")
def grant_admin(
    payload: AdminRoleRequest,
    current_admin: dict = Depends(require_admin),
    identity: IdentityProvider = Depends(get_identity),
):
    identity.set_claims(payload.uid, {"admin": True})
    logger.info("permissao admin concedida uid=%s por=%s", payload.uid, current_admin.get("uid"))
    return {"success": True, "message": "Admin role atribuido com sucesso!", "data": {"uid": payload.uid}}
