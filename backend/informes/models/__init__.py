from informes.models.report import ReportButton, ReportSubmission
from informes.models.event import OrganizerCompany, Event, ParticipantCompany
from informes.models.staff import Staff, StaffActivity

__all__ = [
    "ReportButton", "ReportSubmission",
    "OrganizerCompany", "Event", "ParticipantCompany",
    "Staff", "StaffActivity",
]
