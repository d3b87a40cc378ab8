"""
Interface do backend consumida pelos fluxos de informes e pelo dashboard.

Duas implementações: DatabaseBackend (banco local, db_backend.py) e
HttpBackend (API remota, api_client.py).
"""
from typing import List, Protocol

from informes.schemas import (
    CheckinValidation,
    Event,
    OrganizerCompany,
    ParticipantCompany,
    ReportButtonConfig,
    ReportSubmission,
    ReportSubmissionCreate,
    Staff,
    StaffActivity,
)


class BackendError(Exception):
    """Falha genérica ao falar com o backend"""
    pass


class NotFound(BackendError):
    """Registro inexistente no backend"""
    pass


class CheckinRejected(BackendError):
    """Check-in recusado; a mensagem é exibida ao usuário como está"""
    pass


class BackendApi(Protocol):
    async def get_events(self) -> List[Event]: ...

    async def get_organizer_company(self, organizer_id: str) -> OrganizerCompany: ...

    async def get_staff_by_organizer(self, organizer_id: str) -> List[Staff]: ...

    async def get_staff_activity(self, staff_id: str) -> List[StaffActivity]: ...

    async def get_participant_companies_by_event(self, event_id: str) -> List[ParticipantCompany]: ...

    async def get_reports_by_event(self, event_id: str) -> List[ReportSubmission]: ...

    async def get_report_buttons_for_booth(self, booth_code: str) -> List[ReportButtonConfig]: ...

    async def submit_report(self, payload: ReportSubmissionCreate) -> None: ...

    async def validate_checkin(self, booth_code: str, personal_code: str) -> CheckinValidation: ...
