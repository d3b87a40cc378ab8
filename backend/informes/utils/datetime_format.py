"""
Formatação de data/hora dos relatórios exportados.

Formato pt-BR usado em toda a interface:
- "dd/mm/aaaa, HH:MM:SS" (ex.: "19/10/2026, 14:05:09")
"""

from datetime import datetime

from informes.models.report import BRASILIA_TZ


def format_timestamp(value: datetime) -> str:
    """
    Formata data/hora no padrão pt-BR.

    Datetimes sem fuso já estão no horário de Brasília (é assim que o banco
    grava); com fuso, são convertidos para o horário de Brasília antes.

    Args:
        value: Data/hora a formatar

    Returns:
        Texto formatado, ex. "19/10/2026, 14:05:09"
    """
    if value.tzinfo is not None:
        value = value.astimezone(BRASILIA_TZ)
    return value.strftime("%d/%m/%Y, %H:%M:%S")
