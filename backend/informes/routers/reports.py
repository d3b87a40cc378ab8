from fastapi import APIRouter, Depends, HTTPException
from typing import List
from informes.dependencies import get_database_backend
from informes.schemas import (
    CheckinRequest, CheckinValidation, ReportButtonConfig, ReportSubmission, ReportSubmissionCreate
)
from informes.services.backend import CheckinRejected
from informes.services.db_backend import DatabaseBackend

router = APIRouter(prefix="/api", tags=["reports"])


@router.get("/booths/{booth_code}/buttons", response_model=List[ReportButtonConfig])
async def list_booth_buttons(booth_code: str, backend: DatabaseBackend = Depends(get_database_backend)):
    """Ações de informe do evento do estande"""
    return await backend.get_report_buttons_for_booth(booth_code)


@router.get("/events/{event_id}/reports", response_model=List[ReportSubmission])
async def list_event_reports(event_id: str, backend: DatabaseBackend = Depends(get_database_backend)):
    """Informes enviados no evento"""
    return await backend.get_reports_by_event(event_id)


@router.post("/reports", status_code=201)
async def create_report(payload: ReportSubmissionCreate, backend: DatabaseBackend = Depends(get_database_backend)):
    """Registra um informe"""
    if not payload.response.strip():
        raise HTTPException(status_code=422, detail="Resposta vazia.")
    await backend.submit_report(payload)
    return {"message": "Informe registrado"}


@router.post("/checkin/validate", response_model=CheckinValidation)
async def validate_checkin(data: CheckinRequest, backend: DatabaseBackend = Depends(get_database_backend)):
    """Confirma que o membro da equipe pode atuar no estande"""
    try:
        return await backend.validate_checkin(data.booth_code, data.personal_code)
    except CheckinRejected as e:
        raise HTTPException(status_code=400, detail=str(e))
