import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Optional, Protocol

from firebase_admin import auth, exceptions as firebase_exceptions

from academia.core.errors import BackendError, ConflictError, NotFoundError, ValidationError

logger = logging.getLogger("academia.identity")


class AccountExistsError(ConflictError):
    default_message = "E-mail ja esta em uso."


class AccountNotFoundError(NotFoundError):
    pass


@dataclass
class Account:
    uid: str
    email: str
    display_name: Optional[str] = None
    claims: dict = field(default_factory=dict)
    disabled: bool = False


class IdentityProvider(Protocol):
    def create_account(self, email: str, password: str, display_name: str) -> str: ...

    def delete_account(self, uid: str) -> None: ...

    def set_claims(self, uid: str, claims: dict) -> None: ...

    def get_account_by_email(self, email: str) -> Optional[Account]: ...

    def update_account(self, uid: str, *, email: Optional[str] = None, display_name: Optional[str] = None) -> None: ...

    def verify_token(self, token: str) -> dict: ...


_FIREBASE_CODES = {
    "PERMISSION_DENIED": "permission-denied",
    "UNAVAILABLE": "unavailable",
    "DEADLINE_EXCEEDED": "unavailable",
    "NOT_FOUND": "not-found",
}


@contextmanager
def _translate(action: str):
    try:
        yield
    except auth.EmailAlreadyExistsError as exc:
        raise AccountExistsError(detail=action) from exc
    except auth.UserNotFoundError as exc:
        raise AccountNotFoundError("Conta nao encontrada.", detail=action) from exc
    except ValueError as exc:
        # firebase_admin validates email/password/uid locally and raises ValueError.
        raise ValidationError(str(exc), detail=action) from exc
    except firebase_exceptions.FirebaseError as exc:
        kind = _FIREBASE_CODES.get(exc.code, "internal")
        logger.error("identity %s failed: %s", action, exc)
        raise BackendError(kind, str(exc) if kind == "internal" else None, detail=action) from exc


class FirebaseIdentityProvider:
    def __init__(self, app) -> None:
        self._app = app

    def create_account(self, email: str, password: str, display_name: str) -> str:
        with _translate("create_account"):
            record = auth.create_user(
                email=email,
                password=password,
                display_name=display_name,
                disabled=False,
                app=self._app,
            )
        return record.uid

    def delete_account(self, uid: str) -> None:
        with _translate("delete_account"):
            auth.delete_user(uid, app=self._app)

    def set_claims(self, uid: str, claims: dict) -> None:
        with _translate("set_claims"):
            auth.set_custom_user_claims(uid, claims, app=self._app)

    def get_account_by_email(self, email: str) -> Optional[Account]:
        try:
            with _translate("get_account_by_email"):
                record = auth.get_user_by_email(email, app=self._app)
        except AccountNotFoundError:
            return None
        return Account(
            uid=record.uid,
            email=record.email,
            display_name=record.display_name,
            claims=dict(record.custom_claims or {}),
            disabled=record.disabled,
        )

    def update_account(self, uid: str, *, email: Optional[str] = None, display_name: Optional[str] = None) -> None:
        changes = {}
        if email is not None:
            changes["email"] = email
        if display_name is not None:
            changes["display_name"] = display_name
        if not changes:
            return
        with _translate("update_account"):
            auth.update_user(uid, app=self._app, **changes)

    def verify_token(self, token: str) -> dict:
        return auth.verify_id_token(token, app=self._app)


class InMemoryIdentityProvider:
    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        self._tokens: dict[str, str] = {}
        self._lock = threading.Lock()

    def create_account(self, email: str, password: str, display_name: str) -> str:
        if "@" not in (email or ""):
            raise ValidationError("E-mail invalido.")
        if len(password or "") < 6:
            raise ValidationError("Senha invalida.")
        with self._lock:
            if any(acc.email == email for acc in self._accounts.values()):
                raise AccountExistsError()
            uid = uuid.uuid4().hex[:28]
            self._accounts[uid] = Account(uid=uid, email=email, display_name=display_name)
        return uid

    def delete_account(self, uid: str) -> None:
        with self._lock:
            if self._accounts.pop(uid, None) is None:
                raise AccountNotFoundError("Conta nao encontrada.")

    def set_claims(self, uid: str, claims: dict) -> None:
        with self._lock:
            account = self._accounts.get(uid)
            if account is None:
                raise AccountNotFoundError("Conta nao encontrada.")
            account.claims = dict(claims or {})

    def get_account_by_email(self, email: str) -> Optional[Account]:
        with self._lock:
            for account in self._accounts.values():
                if account.email == email:
                    return account
        return None

    def get_account(self, uid: str) -> Optional[Account]:
        return self._accounts.get(uid)

    def update_account(self, uid: str, *, email: Optional[str] = None, display_name: Optional[str] = None) -> None:
        with self._lock:
            account = self._accounts.get(uid)
            if account is None:
                raise AccountNotFoundError("Conta nao encontrada.")
            if email is not None:
                account.email = email
            if display_name is not None:
                account.display_name = display_name

    def issue_token(self, uid: str) -> str:
        token = uuid.uuid4().hex
        self._tokens[token] = uid
        return token

    def verify_token(self, token: str) -> dict:
        uid = self._tokens.get(token)
        account = self._accounts.get(uid) if uid else None
        if account is None:
            raise ValueError("Token invalido")
        return {"uid": account.uid, "email": account.email, **account.claims}
