import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from academia.api.v1.assinaturas import router as assinaturas_router
from academia.api.v1.auth import router as auth_router
from academia.api.v1.clientes import router as clientes_router
from academia.api.v1.configuracoes import router as configuracoes_router
from academia.api.v1.financas import router as financas_router
from academia.api.v1.planos import router as planos_router
from academia.core.config import settings
from academia.core.errors import AcademiaError, error_payload

if not logging.getLogger().handlers:
    logging.basicConfig(level=logging.INFO)

logger = logging.getLogger("academia")

app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    description="Academia - Gestao de clientes, assinaturas e financas",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup() -> None:
    if not settings.LOCAL_BACKENDS and settings.ENV.lower() == "production" and not settings.FIREBASE_PROJECT_ID:
        logger.warning("FIREBASE_PROJECT_ID nao definido em producao.")


@app.exception_handler(AcademiaError)
async def handle_academia_error(request: Request, exc: AcademiaError):
    if exc.status_code >= 500:
        logger.error("erro interno path=%s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_payload(exc))


app.include_router(auth_router, prefix="/api")
app.include_router(clientes_router, prefix="/api")
app.include_router(planos_router, prefix="/api")
app.include_router(assinaturas_router, prefix="/api")
app.include_router(financas_router, prefix="/api")
app.include_router(configuracoes_router, prefix="/api")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "request method=%s path=%s status=%s duration_ms=%.2f",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


@app.get("/api/health")
def health():
    return {"status": "ok"}
