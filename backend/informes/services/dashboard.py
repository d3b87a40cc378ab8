"""
Dashboard de atividades do evento.

Carregamento: evento -> organizadora -> (equipe, empresas, informes) em
paralelo -> atividades de cada membro da equipe em paralelo. Uma falha no
meio do caminho é registrada no log e o dashboard segue com o que já foi
carregado.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from informes.schemas import (
    CompanyCard,
    Event,
    OrganizerCompany,
    ParticipantCompany,
    ReportSubmission,
    Staff,
    StaffActivity,
    StaffCard,
)
from informes.services.backend import BackendApi, BackendError

logger = logging.getLogger(__name__)


class ViewMode(str, Enum):
    STAFF = "staff"
    COMPANY = "company"


@dataclass
class DashboardData:
    event_id: str
    event: Optional[Event] = None
    organizer: Optional[OrganizerCompany] = None
    staff: List[Staff] = field(default_factory=list)
    companies: List[ParticipantCompany] = field(default_factory=list)
    reports: List[ReportSubmission] = field(default_factory=list)
    activities: Dict[str, List[StaffActivity]] = field(default_factory=dict)


def sort_reports_newest_first(reports: List[ReportSubmission]) -> List[ReportSubmission]:
    # sorted() é estável: empates mantêm a ordem recebida
    return sorted(reports, key=lambda r: r.timestamp, reverse=True)


def matches_search(term: str, *values: str) -> bool:
    term = (term or "").lower()
    return any(term in (value or "").lower() for value in values)


def reports_for_booth(reports: List[ReportSubmission], booth_code: str) -> List[ReportSubmission]:
    return [r for r in reports if r.booth_code == booth_code]


async def load_dashboard(backend: BackendApi, event_id: str) -> DashboardData:
    data = DashboardData(event_id=event_id)
    try:
        events = await backend.get_events()
        data.event = next((e for e in events if e.id == event_id), None)
        if data.event is None:
            logger.warning("Dashboard event not found: %s", event_id)
            return data

        organizer_id = data.event.organizer_company_id
        data.organizer = await backend.get_organizer_company(organizer_id)

        staff, companies, reports = await asyncio.gather(
            backend.get_staff_by_organizer(organizer_id),
            backend.get_participant_companies_by_event(event_id),
            backend.get_reports_by_event(event_id),
        )
        data.staff = staff
        data.companies = companies
        data.reports = sort_reports_newest_first(reports)

        if staff:
            activities = await asyncio.gather(*(backend.get_staff_activity(s.id) for s in staff))
            data.activities = {member.id: items for member, items in zip(staff, activities)}
    except BackendError as e:
        logger.error("Failed to fetch dashboard data for event %s: %s", event_id, e)
    return data


def staff_cards(data: DashboardData, search: str = "") -> List[StaffCard]:
    return [
        StaffCard(staff=member, activities=data.activities.get(member.id, []))
        for member in data.staff
        if matches_search(search, member.name, member.personal_code)
    ]


def company_cards(data: DashboardData, search: str = "") -> List[CompanyCard]:
    return [
        CompanyCard(company=company, reports=reports_for_booth(data.reports, company.booth_code))
        for company in data.companies
        if matches_search(search, company.name, company.booth_code)
    ]
