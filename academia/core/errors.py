from typing import Any, Optional


class AcademiaError(Exception):
    status_code = 500
    code = "internal"
    default_message = "Erro interno do servidor."

    def __init__(self, message: Optional[str] = None, *, detail: Any = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(AcademiaError):
    status_code = 400
    code = "validation"
    default_message = "Dados invalidos."


class ConflictError(AcademiaError):
    status_code = 409
    code = "conflict"
    default_message = "Operacao em conflito com o estado atual."


BACKEND_KINDS = {
    "permission-denied": (403, "Permissao negada para acessar os dados."),
    "unavailable": (503, "Servico temporariamente indisponivel."),
    "not-found": (404, "Registro nao encontrado."),
    "internal": (500, "Erro interno do servidor."),
}


class BackendError(AcademiaError):
    def __init__(self, kind: str = "internal", message: Optional[str] = None, *, detail: Any = None) -> None:
        if kind not in BACKEND_KINDS:
            kind = "internal"
        self.kind = kind
        self.code = kind
        self.status_code, fallback = BACKEND_KINDS[kind]
        super().__init__(message or fallback, detail=detail)


class NotFoundError(BackendError):
    def __init__(self, message: Optional[str] = None, *, detail: Any = None) -> None:
        super().__init__("not-found", message, detail=detail)


def error_payload(exc: AcademiaError) -> dict:
    payload = {"success": False, "message": exc.message, "error": exc.code}
    if exc.detail is not None:
        payload["detail"] = exc.detail
    return payload
