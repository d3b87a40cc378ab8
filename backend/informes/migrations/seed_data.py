"""
Carga inicial: organizadoras, eventos, equipe, empresas e ações de informe
a partir de um arquivo JSON (ver seed/demo_event.json).

Só roda com o banco vazio (sem eventos); nas demais vezes não faz nada.
"""
import asyncio
import json
import logging
import sys

from sqlalchemy import func, select

from informes import models
from informes.database import async_session, init_db
from informes.schemas import ReportButtonConfig

logger = logging.getLogger(__name__)


def read_seed_file(path: str) -> dict:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


async def load_seed(path: str) -> int:
    """Carrega o arquivo; retorna quantos registros foram criados"""
    data = read_seed_file(path)
    logger.info("[Seed] File: %s", path)

    async with async_session() as db:
        existing = await db.scalar(select(func.count()).select_from(models.Event))
        if existing:
            logger.info("[Seed] Database already has %d event(s), skipping.", existing)
            return 0

        records = []
        for item in data.get("organizers", []):
            records.append(models.OrganizerCompany(**item))
        for item in data.get("events", []):
            records.append(models.Event(**item))
        for item in data.get("staff", []):
            records.append(models.Staff(**item))
        for item in data.get("companies", []):
            records.append(models.ParticipantCompany(**item))
        for i, item in enumerate(data.get("report_buttons", [])):
            # valida o tipo da ação antes de gravar
            config = ReportButtonConfig.model_validate({"id": "", **item})
            button = models.ReportButton(
                event_id=item["event_id"],
                label=config.label,
                question=config.question,
                department_id=config.department_id,
                kind=config.kind.model_dump(),
                sort_order=item.get("sort_order", i),
            )
            if item.get("id"):
                button.id = item["id"]
            records.append(button)

        db.add_all(records)
        await db.commit()

    logger.info("[Seed] Completed: %d record(s) created.", len(records))
    return len(records)


async def main(path: str):
    await init_db()
    await load_seed(path)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "seed/demo_event.json"))
