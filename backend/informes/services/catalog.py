"""Catálogo de ações de informe por estande"""
import logging
from typing import List, Optional

from informes.schemas import ReportButtonConfig
from informes.services.backend import BackendApi, BackendError

logger = logging.getLogger(__name__)

CATALOG_ERROR_MESSAGE = "Falha ao carregar as ações."


class CatalogUnavailable(Exception):
    """Não foi possível carregar as ações do estande"""
    pass


async def load_booth_actions(backend: BackendApi, booth_code: str) -> List[ReportButtonConfig]:
    """Busca as ações configuradas para o evento do estande, na ordem do backend"""
    if not booth_code:
        raise ValueError("booth_code é obrigatório")
    try:
        return await backend.get_report_buttons_for_booth(booth_code)
    except BackendError as e:
        logger.error("Failed to load report buttons for booth %s: %s", booth_code, e)
        raise CatalogUnavailable(CATALOG_ERROR_MESSAGE) from e


def visible_buttons(buttons: List[ReportButtonConfig], department_id: Optional[str]) -> List[ReportButtonConfig]:
    """Ações do departamento do membro da equipe ou gerais (sem departamento)"""
    return [b for b in buttons if not b.department_id or b.department_id == department_id]
