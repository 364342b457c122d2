from fastapi import Depends, HTTPException, Request, status

from academia.core.backends import get_identity
from academia.services.identity import IdentityProvider


def _extract_bearer_token(request: Request) -> str:
    auth_header = request.headers.get("authorization", "")
    if not auth_header.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token ausente")
    return auth_header.split(" ", 1)[1].strip()


def get_current_account(
    request: Request,
    identity: IdentityProvider = Depends(get_identity),
) -> dict:
    token = _extract_bearer_token(request)
    try:
        decoded = identity.verify_token(token)
    except Exception:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token invalido")
    return decoded


def require_admin(account: dict = Depends(get_current_account)) -> dict:
    if account.get("admin") is not True:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Sem permissao")
    return {"uid": account.get("uid"), "email": account.get("email"), "role": "admin"}
