"""
Fixtures compartilhadas.

As variáveis de ambiente precisam estar definidas antes de importar
informes (config e engine são criados na importação).
"""
import os
import tempfile
from datetime import datetime

import pytest

TEST_DIR = tempfile.mkdtemp(prefix="informes-test-")
DB_FILE = os.path.join(TEST_DIR, "test.db")
SEED_FILE = os.path.join(os.path.dirname(__file__), "..", "seed", "demo_event.json")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_FILE}"
os.environ["SEED_FILE"] = SEED_FILE
os.environ["BACKEND_API_URL"] = ""
os.environ["LOG_DIR"] = ""

from informes.schemas import (  # noqa: E402
    CheckinInfo,
    CheckinValidation,
    Event,
    OrganizerCompany,
    ParticipantCompany,
    ReportButtonConfig,
    ReportSubmission,
    Staff,
)
from informes.services.backend import BackendError, CheckinRejected, NotFound  # noqa: E402


class FakeBackend:
    """Backend em memória; `fail` lista os métodos que devem falhar"""

    def __init__(self):
        self.events = []
        self.organizers = {}
        self.staff = {}
        self.activities = {}
        self.companies = {}
        self.reports = {}
        self.buttons = {}
        self.checkins = {}
        self.submitted = []
        self.fail = set()
        self.calls = []

    def _call(self, name):
        self.calls.append(name)
        if name in self.fail:
            raise BackendError(f"{name} failed")

    async def get_events(self):
        self._call("get_events")
        return list(self.events)

    async def get_organizer_company(self, organizer_id):
        self._call("get_organizer_company")
        if organizer_id not in self.organizers:
            raise NotFound(organizer_id)
        return self.organizers[organizer_id]

    async def get_staff_by_organizer(self, organizer_id):
        self._call("get_staff_by_organizer")
        return list(self.staff.get(organizer_id, []))

    async def get_staff_activity(self, staff_id):
        self._call("get_staff_activity")
        return list(self.activities.get(staff_id, []))

    async def get_participant_companies_by_event(self, event_id):
        self._call("get_participant_companies_by_event")
        return list(self.companies.get(event_id, []))

    async def get_reports_by_event(self, event_id):
        self._call("get_reports_by_event")
        return list(self.reports.get(event_id, []))

    async def get_report_buttons_for_booth(self, booth_code):
        self._call("get_report_buttons_for_booth")
        return list(self.buttons.get(booth_code, []))

    async def submit_report(self, payload):
        self._call("submit_report")
        self.submitted.append(payload)

    async def validate_checkin(self, booth_code, personal_code):
        self._call("validate_checkin")
        key = (booth_code, personal_code)
        if key not in self.checkins:
            raise CheckinRejected("Código de estande inválido.")
        return self.checkins[key]


def make_button(id, label, kind, question="Pergunta?", department_id=None) -> ReportButtonConfig:
    return ReportButtonConfig.model_validate({
        "id": id,
        "label": label,
        "question": question,
        "department_id": department_id,
        "kind": kind,
    })


def make_report(id, booth_code, timestamp, label="Feedback", response="ok", staff_name="Ana") -> ReportSubmission:
    return ReportSubmission(
        id=id,
        event_id="E1",
        booth_code=booth_code,
        staff_name=staff_name,
        report_label=label,
        response=response,
        timestamp=timestamp,
    )


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def ana_checkin():
    return CheckinInfo(
        staff_name="Ana",
        personal_code="A1",
        event_id="E1",
        department_id="D1",
        company_name="Acme",
        booth_code="B1",
    )


@pytest.fixture
def checkin_backend(fake_backend):
    """Ana pode atuar nos estandes B1 e B2 do evento E1"""
    event = Event(id="E1", name="Feira", organizer_company_id="O1")
    ana = Staff(id="S1", name="Ana", personal_code="A1", department_id="D1")
    fake_backend.events = [event]
    fake_backend.organizers = {"O1": OrganizerCompany(id="O1", name="Expo")}
    for booth, name in (("B1", "Acme"), ("B2", "Nuvem")):
        company = ParticipantCompany(id=f"C-{booth}", name=name, booth_code=booth)
        fake_backend.checkins[(booth, "A1")] = CheckinValidation(staff=ana, event=event, company=company)
    return fake_backend


@pytest.fixture
def client():
    """TestClient com banco novo, carregado a partir do seed de demonstração"""
    from fastapi.testclient import TestClient
    from informes.main import app

    if os.path.exists(DB_FILE):
        os.remove(DB_FILE)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def now():
    return datetime(2026, 10, 19, 14, 30, 0)
