from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from urllib.parse import quote
from informes.dependencies import get_backend
from informes.schemas import DashboardResponse
from informes.services.backend import BackendApi
from informes.services.dashboard import (
    ViewMode, company_cards, load_dashboard, reports_for_booth, staff_cards
)
from informes.services.exporter import ExportedDocument, export_company_report, export_staff_report, get_renderer

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

EXPORT_FORMAT_PATTERN = "^(pdf|docx)$"


def _download(document: ExportedDocument) -> Response:
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(document.filename)}"},
    )


@router.get("/{event_id}", response_model=DashboardResponse)
async def get_dashboard(
    event_id: str,
    view: ViewMode = ViewMode.STAFF,
    q: str = "",
    backend: BackendApi = Depends(get_backend),
):
    """Dashboard de atividades, por equipe ou por empresa"""
    data = await load_dashboard(backend, event_id)
    response = DashboardResponse(event=data.event, organizer=data.organizer, view=view.value, search=q)
    if view == ViewMode.STAFF:
        response.staff = staff_cards(data, q)
    else:
        response.companies = company_cards(data, q)
    return response


@router.get("/{event_id}/staff/{staff_id}/export")
async def export_staff(
    event_id: str,
    staff_id: str,
    fmt: str = Query("pdf", alias="format", pattern=EXPORT_FORMAT_PATTERN),
    backend: BackendApi = Depends(get_backend),
):
    """Baixa o relatório de atividades de um membro da equipe"""
    data = await load_dashboard(backend, event_id)
    member = next((s for s in data.staff if s.id == staff_id), None)
    if not member:
        raise HTTPException(status_code=404, detail="Membro da equipe não encontrado")

    document = export_staff_report(member, data.activities.get(member.id, []), data.event, get_renderer(fmt))
    return _download(document)


@router.get("/{event_id}/companies/{company_id}/export")
async def export_company(
    event_id: str,
    company_id: str,
    fmt: str = Query("pdf", alias="format", pattern=EXPORT_FORMAT_PATTERN),
    backend: BackendApi = Depends(get_backend),
):
    """Baixa o relatório de informes de uma empresa"""
    data = await load_dashboard(backend, event_id)
    company = next((c for c in data.companies if c.id == company_id), None)
    if not company:
        raise HTTPException(status_code=404, detail="Empresa não encontrada")

    reports = reports_for_booth(data.reports, company.booth_code)
    document = export_company_report(company, reports, data.event, get_renderer(fmt))
    return _download(document)
