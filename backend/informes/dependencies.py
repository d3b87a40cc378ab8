"""Dependências compartilhadas pelos routers"""
from typing import Optional

from fastapi import Depends, Header

from informes.config import settings
from informes.services.api_client import HttpBackend
from informes.services.backend import BackendApi
from informes.services.booth_session import BoothSession, SessionStore, resume_session
from informes.services.db_backend import DatabaseBackend

SESSION_HEADER = "X-Session-Id"

database_backend = DatabaseBackend()
session_store = SessionStore(idle_seconds=settings.SESSION_IDLE_MINUTES * 60)
_remote_backend: Optional[HttpBackend] = None


def get_database_backend() -> DatabaseBackend:
    """Backend do banco local; atende a API de dados deste serviço"""
    return database_backend


def get_backend() -> BackendApi:
    """Backend usado pelos fluxos: remoto se BACKEND_API_URL estiver configurado"""
    global _remote_backend
    if not settings.BACKEND_API_URL:
        return database_backend
    if _remote_backend is None:
        _remote_backend = HttpBackend(settings.BACKEND_API_URL, timeout=settings.BACKEND_TIMEOUT)
    return _remote_backend


async def close_backend():
    global _remote_backend
    if _remote_backend is not None:
        await _remote_backend.aclose()
        _remote_backend = None


def get_session_store() -> SessionStore:
    return session_store


def get_booth_session(
    x_session_id: Optional[str] = Header(default=None),
    store: SessionStore = Depends(get_session_store),
) -> BoothSession:
    """Sessão do check-in; NotCheckedIn vira 401 no handler da aplicação"""
    return resume_session(store, x_session_id)
