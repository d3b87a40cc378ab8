import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from informes.config import settings
from informes.database import init_db
from informes.dependencies import close_backend
from informes.migrations.seed_data import load_seed
from informes.routers import events_router, reports_router, informes_router, dashboard_router
from informes.services.backend import BackendError, NotFound
from informes.services.booth_session import ENTRY_POINT, NotCheckedIn
from informes.utils.logging_setup import setup_logging

setup_logging(settings.LOG_LEVEL, settings.LOG_DIR)
logger = logging.getLogger("informes.main")


def get_db_path():
    """Caminho do arquivo SQLite, ou None para outros bancos"""
    if "sqlite" in settings.DATABASE_URL:
        return settings.DATABASE_URL.split(":///")[-1]
    return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    # cria a pasta do SQLite, as tabelas e a carga inicial
    db_path = get_db_path()
    if db_path and os.path.dirname(db_path):
        os.makedirs(os.path.dirname(db_path), exist_ok=True)
    await init_db()
    if settings.SEED_FILE:
        await load_seed(settings.SEED_FILE)
    logger.info("Backend: %s", settings.BACKEND_API_URL or "banco local")
    yield
    await close_backend()

app = FastAPI(
    title="Informes de Estande",
    description="Check-in da equipe, informes por estande e dashboard de atividades do evento",
    version="1.0.0",
    lifespan=lifespan
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# rotas
app.include_router(events_router)
app.include_router(reports_router)
app.include_router(informes_router)
app.include_router(dashboard_router)


@app.exception_handler(NotCheckedIn)
async def not_checked_in_handler(request: Request, exc: NotCheckedIn):
    return JSONResponse(status_code=401, content={"detail": str(exc), "redirect": ENTRY_POINT})


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError):
    logger.error("Backend error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Erro interno do servidor."})


@app.get("/")
async def root():
    return {"message": "Informes de Estande API", "version": "1.0.0"}

@app.get("/health")
async def health():
    return {"status": "ok"}
