from fastapi import APIRouter, Depends
from typing import List
from informes.dependencies import get_database_backend
from informes.schemas import Event, OrganizerCompany, ParticipantCompany, Staff, StaffActivity
from informes.services.db_backend import DatabaseBackend

router = APIRouter(prefix="/api", tags=["events"])


@router.get("/events", response_model=List[Event])
async def list_events(backend: DatabaseBackend = Depends(get_database_backend)):
    """Lista os eventos"""
    return await backend.get_events()


@router.get("/organizers/{organizer_id}", response_model=OrganizerCompany)
async def get_organizer(organizer_id: str, backend: DatabaseBackend = Depends(get_database_backend)):
    """Empresa organizadora"""
    return await backend.get_organizer_company(organizer_id)


@router.get("/organizers/{organizer_id}/staff", response_model=List[Staff])
async def list_staff(organizer_id: str, backend: DatabaseBackend = Depends(get_database_backend)):
    """Equipe da organizadora"""
    return await backend.get_staff_by_organizer(organizer_id)


@router.get("/staff/{staff_id}/activity", response_model=List[StaffActivity])
async def list_staff_activity(staff_id: str, backend: DatabaseBackend = Depends(get_database_backend)):
    """Atividades de um membro da equipe, mais recentes primeiro"""
    return await backend.get_staff_activity(staff_id)


@router.get("/events/{event_id}/companies", response_model=List[ParticipantCompany])
async def list_companies(event_id: str, backend: DatabaseBackend = Depends(get_database_backend)):
    """Empresas expositoras do evento"""
    return await backend.get_participant_companies_by_event(event_id)
