"""
Testes do HttpBackend com transporte simulado (httpx.MockTransport).
"""
import asyncio
import json

import httpx
import pytest

from informes.schemas import ReportSubmissionCreate
from informes.services.api_client import HttpBackend
from informes.services.backend import BackendError, CheckinRejected, NotFound
from informes.services.dashboard import load_dashboard

VALIDATION = {
    "staff": {"id": "S1", "name": "Ana", "personal_code": "A1", "department_id": "D1"},
    "event": {"id": "E1", "name": "Feira", "organizer_company_id": "O1"},
    "company": {"id": "C1", "name": "Acme", "booth_code": "B1"},
}


def run_with(handler, call):
    """Executa `call(backend)` com um HttpBackend ligado ao handler"""
    async def scenario():
        backend = HttpBackend("http://backend.test/", transport=httpx.MockTransport(handler))
        try:
            return await call(backend)
        finally:
            await backend.aclose()
    return asyncio.run(scenario())


class TestReads:
    def test_get_events(self):
        def handler(request):
            assert request.url.path == "/api/events"
            return httpx.Response(200, json=[{"id": "E1", "name": "Feira", "organizer_company_id": "O1"}])

        events = run_with(handler, lambda b: b.get_events())
        assert events[0].name == "Feira"

    def test_path_segments_are_quoted(self):
        seen = []

        def handler(request):
            seen.append(request.url.raw_path)
            return httpx.Response(200, json=[])

        run_with(handler, lambda b: b.get_report_buttons_for_booth("B 1/x"))
        assert seen == [b"/api/booths/B%201%2Fx/buttons"]

    def test_not_found(self):
        def handler(request):
            return httpx.Response(404, json={"detail": "x"})

        with pytest.raises(NotFound):
            run_with(handler, lambda b: b.get_organizer_company("O9"))

    def test_server_error(self):
        def handler(request):
            return httpx.Response(500)

        with pytest.raises(BackendError):
            run_with(handler, lambda b: b.get_reports_by_event("E1"))

    def test_invalid_payload(self):
        def handler(request):
            return httpx.Response(200, json=[{"id": "E1"}])

        with pytest.raises(BackendError):
            run_with(handler, lambda b: b.get_events())

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        with pytest.raises(BackendError):
            run_with(handler, lambda b: b.get_events())


class TestWrites:
    def test_submit_report(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(201, json={"message": "ok"})

        payload = ReportSubmissionCreate(
            event_id="E1", booth_code="B1", staff_name="Ana", report_label="Feedback", response="Tudo ótimo"
        )
        run_with(handler, lambda b: b.submit_report(payload))
        assert bodies[0]["response"] == "Tudo ótimo"
        assert bodies[0]["booth_code"] == "B1"

    def test_submit_report_failure(self):
        def handler(request):
            return httpx.Response(503)

        payload = ReportSubmissionCreate(
            event_id="E1", booth_code="B1", staff_name="Ana", report_label="Feedback", response="x"
        )
        with pytest.raises(BackendError):
            run_with(handler, lambda b: b.submit_report(payload))


class TestValidateCheckin:
    def test_accepted(self):
        def handler(request):
            assert json.loads(request.content) == {"booth_code": "B1", "personal_code": "A1"}
            return httpx.Response(200, json=VALIDATION)

        validation = run_with(handler, lambda b: b.validate_checkin("B1", "A1"))
        assert validation.company.name == "Acme"

    def test_rejected_with_message(self):
        def handler(request):
            return httpx.Response(400, json={"detail": "Código pessoal inválido."})

        with pytest.raises(CheckinRejected) as exc_info:
            run_with(handler, lambda b: b.validate_checkin("B1", "ZZ"))
        assert str(exc_info.value) == "Código pessoal inválido."

    def test_rejected_without_message(self):
        def handler(request):
            return httpx.Response(400, text="bad request")

        with pytest.raises(CheckinRejected) as exc_info:
            run_with(handler, lambda b: b.validate_checkin("B1", "ZZ"))
        assert str(exc_info.value) == "Ocorreu um erro desconhecido."


class TestInvalidBodies:
    """Corpo fora do formato esperado vira BackendError"""

    def test_html_body(self):
        """Página HTML de proxy com status 200"""
        def handler(request):
            return httpx.Response(200, text="<html>proxy error</html>")

        with pytest.raises(BackendError):
            run_with(handler, lambda b: b.get_staff_activity("S1"))

    def test_null_body(self):
        def handler(request):
            return httpx.Response(200, content=b"null", headers={"content-type": "application/json"})

        with pytest.raises(BackendError):
            run_with(handler, lambda b: b.get_reports_by_event("E1"))

    def test_checkin_html_body(self):
        def handler(request):
            return httpx.Response(200, text="<html>ok</html>")

        with pytest.raises(BackendError):
            run_with(handler, lambda b: b.validate_checkin("B1", "A1"))

    def test_dashboard_keeps_loaded_event(self):
        """Dashboard segue com o evento já carregado"""
        def handler(request):
            if request.url.path == "/api/events":
                return httpx.Response(200, json=[{"id": "E1", "name": "Feira", "organizer_company_id": "O1"}])
            return httpx.Response(200, text="<html>proxy error</html>")

        data = run_with(handler, lambda b: load_dashboard(b, "E1"))
        assert data.event.id == "E1"
        assert data.organizer is None
        assert data.staff == []
        assert data.reports == []
