from pydantic import BaseModel, Field
from typing import Annotated, Literal, Optional, List, Union
from datetime import datetime

# Rótulos fixos das ações de Sim/Não
YES_NO_OPTIONS = ("Sim", "Não")

# ========== Tipos de informe ==========

class ReportOption(BaseModel):
    id: str
    label: str

class OpenText(BaseModel):
    type: Literal["OPEN_TEXT"] = "OPEN_TEXT"

class MultipleChoice(BaseModel):
    type: Literal["MULTIPLE_CHOICE"] = "MULTIPLE_CHOICE"
    options: List[ReportOption]

    def labels(self) -> List[str]:
        return [option.label for option in self.options]

FollowUpKind = Annotated[Union[OpenText, MultipleChoice], Field(discriminator="type")]

class FollowUp(BaseModel):
    """Pergunta de acompanhamento de uma ação Sim/Não"""
    question: str
    kind: FollowUpKind = Field(default_factory=OpenText)

class YesNo(BaseModel):
    type: Literal["YES_NO"] = "YES_NO"
    trigger_value: str = "Sim"  # resposta que abre o acompanhamento
    follow_up: Optional[FollowUp] = None

ReportKind = Annotated[Union[OpenText, MultipleChoice, YesNo], Field(discriminator="type")]

class ReportButtonConfig(BaseModel):
    id: str
    label: str
    question: str
    department_id: Optional[str] = None  # None = visível para todos
    kind: ReportKind

    class Config:
        from_attributes = True

# ========== Cadastro (somente leitura) ==========

class OrganizerCompany(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True

class Event(BaseModel):
    id: str
    name: str
    organizer_company_id: str

    class Config:
        from_attributes = True

class Staff(BaseModel):
    id: str
    name: str
    personal_code: str
    department_id: Optional[str] = None
    photo_url: Optional[str] = None

    class Config:
        from_attributes = True

class ParticipantCompany(BaseModel):
    id: str
    name: str
    booth_code: str

    class Config:
        from_attributes = True

class StaffActivity(BaseModel):
    id: str
    description: str
    timestamp: datetime

    class Config:
        from_attributes = True

# ========== Informes enviados ==========

class ReportSubmissionCreate(BaseModel):
    event_id: str
    booth_code: str
    staff_name: str
    report_label: str
    response: str = Field(min_length=1)

class ReportSubmission(ReportSubmissionCreate):
    id: str
    timestamp: datetime

    class Config:
        from_attributes = True

# ========== Check-in ==========

class CheckinRequest(BaseModel):
    booth_code: str
    personal_code: str

class CheckinValidation(BaseModel):
    staff: Staff
    event: Event
    company: ParticipantCompany

class CheckinInfo(BaseModel):
    """Identidade do membro da equipe durante a sessão"""
    staff_name: str
    personal_code: str
    event_id: str
    department_id: Optional[str] = None
    company_name: str
    booth_code: str

class CheckinResponse(BaseModel):
    session_id: str
    checkin: CheckinInfo
    redirect: str

class SwitchBoothRequest(BaseModel):
    booth_code: str

class SwitchBoothResponse(BaseModel):
    checkin: CheckinInfo
    redirect: str

# ========== Página de informes ==========

class BoothActionsResponse(BaseModel):
    booth_code: str
    checkin: CheckinInfo
    buttons: List[ReportButtonConfig]

class FormAnswers(BaseModel):
    primary: Optional[str] = None
    follow_up: Optional[str] = None

class ReportFormView(BaseModel):
    state: str  # idle | composing | submitting | submitted
    button: Optional[ReportButtonConfig] = None
    primary: str = ""
    follow_up: str = ""
    follow_up_visible: bool = False
    submission_success: Optional[bool] = None

# ========== Dashboard ==========

class StaffCard(BaseModel):
    staff: Staff
    activities: List[StaffActivity]

class CompanyCard(BaseModel):
    company: ParticipantCompany
    reports: List[ReportSubmission]

class DashboardResponse(BaseModel):
    event: Optional[Event] = None
    organizer: Optional[OrganizerCompany] = None
    view: Literal["staff", "company"]
    search: str = ""
    staff: List[StaffCard] = []
    companies: List[CompanyCard] = []
