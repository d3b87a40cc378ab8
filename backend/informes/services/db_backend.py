"""Backend sobre o banco de dados local (SQLAlchemy assíncrono)"""
import logging
from contextlib import asynccontextmanager
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from informes import models, schemas
from informes.database import async_session
from informes.services.backend import BackendError, CheckinRejected, NotFound

logger = logging.getLogger(__name__)


class DatabaseBackend:
    def __init__(self, session_factory=async_session):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self):
        # uma sessão por chamada: o dashboard faz chamadas concorrentes
        try:
            async with self._session_factory() as db:
                yield db
        except SQLAlchemyError as e:
            logger.error("Database error: %s", e)
            raise BackendError("Falha de acesso ao banco de dados.") from e

    async def get_events(self) -> List[schemas.Event]:
        async with self._session() as db:
            result = await db.execute(select(models.Event).order_by(models.Event.name))
            return [schemas.Event.model_validate(e) for e in result.scalars().all()]

    async def get_organizer_company(self, organizer_id: str) -> schemas.OrganizerCompany:
        async with self._session() as db:
            organizer = await db.get(models.OrganizerCompany, organizer_id)
            if not organizer:
                raise NotFound(f"Organizadora não encontrada: {organizer_id}")
            return schemas.OrganizerCompany.model_validate(organizer)

    async def get_staff_by_organizer(self, organizer_id: str) -> List[schemas.Staff]:
        async with self._session() as db:
            result = await db.execute(
                select(models.Staff)
                .where(models.Staff.organizer_company_id == organizer_id)
                .order_by(models.Staff.name)
            )
            return [schemas.Staff.model_validate(s) for s in result.scalars().all()]

    async def get_staff_activity(self, staff_id: str) -> List[schemas.StaffActivity]:
        async with self._session() as db:
            result = await db.execute(
                select(models.StaffActivity)
                .where(models.StaffActivity.staff_id == staff_id)
                .order_by(models.StaffActivity.timestamp.desc())
            )
            return [schemas.StaffActivity.model_validate(a) for a in result.scalars().all()]

    async def get_participant_companies_by_event(self, event_id: str) -> List[schemas.ParticipantCompany]:
        async with self._session() as db:
            result = await db.execute(
                select(models.ParticipantCompany)
                .where(models.ParticipantCompany.event_id == event_id)
                .order_by(models.ParticipantCompany.name)
            )
            return [schemas.ParticipantCompany.model_validate(c) for c in result.scalars().all()]

    async def get_reports_by_event(self, event_id: str) -> List[schemas.ReportSubmission]:
        async with self._session() as db:
            result = await db.execute(
                select(models.ReportSubmission)
                .where(models.ReportSubmission.event_id == event_id)
                .order_by(models.ReportSubmission.timestamp)
            )
            return [schemas.ReportSubmission.model_validate(r) for r in result.scalars().all()]

    async def get_report_buttons_for_booth(self, booth_code: str) -> List[schemas.ReportButtonConfig]:
        async with self._session() as db:
            result = await db.execute(
                select(models.ParticipantCompany).where(models.ParticipantCompany.booth_code == booth_code)
            )
            company = result.scalar_one_or_none()
            if not company:
                return []

            result = await db.execute(
                select(models.ReportButton)
                .where(models.ReportButton.event_id == company.event_id)
                .order_by(models.ReportButton.sort_order, models.ReportButton.label)
            )
            return [schemas.ReportButtonConfig.model_validate(b) for b in result.scalars().all()]

    async def submit_report(self, payload: schemas.ReportSubmissionCreate) -> None:
        if not payload.response.strip():
            raise BackendError("Resposta vazia.")

        async with self._session() as db:
            event = await db.get(models.Event, payload.event_id)
            if not event:
                raise NotFound(f"Evento não encontrado: {payload.event_id}")

            db.add(models.ReportSubmission(**payload.model_dump()))

            # registra a atividade para o membro da equipe, se encontrado
            result = await db.execute(
                select(models.Staff).where(
                    models.Staff.name == payload.staff_name,
                    models.Staff.organizer_company_id == event.organizer_company_id,
                )
            )
            member = result.scalars().first()
            if member:
                db.add(models.StaffActivity(
                    staff_id=member.id,
                    description=f'Informe "{payload.report_label}" enviado no estande {payload.booth_code}',
                ))

            await db.commit()
            logger.info(
                "Report submitted | event=%s booth=%s label=%s",
                payload.event_id, payload.booth_code, payload.report_label,
            )

    async def validate_checkin(self, booth_code: str, personal_code: str) -> schemas.CheckinValidation:
        booth_code = booth_code.strip().upper()
        personal_code = personal_code.strip().upper()

        async with self._session() as db:
            result = await db.execute(
                select(models.ParticipantCompany).where(models.ParticipantCompany.booth_code == booth_code)
            )
            company = result.scalar_one_or_none()
            if not company:
                raise CheckinRejected("Código de estande inválido.")

            result = await db.execute(
                select(models.Staff).where(models.Staff.personal_code == personal_code)
            )
            member = result.scalar_one_or_none()
            if not member:
                raise CheckinRejected("Código pessoal inválido.")

            event = await db.get(models.Event, company.event_id)
            if member.organizer_company_id != event.organizer_company_id:
                raise CheckinRejected("Você não faz parte da equipe deste evento.")

            return schemas.CheckinValidation(
                staff=schemas.Staff.model_validate(member),
                event=schemas.Event.model_validate(event),
                company=schemas.ParticipantCompany.model_validate(company),
            )
