"""
Testes da sessão do estande: check-in, troca de estande e saída.
"""
import asyncio

import pytest

from conftest import make_button
from informes.services.backend import CheckinRejected
from informes.services.booth_session import (
    EMPTY_BOOTH_CODE_MESSAGE,
    UNKNOWN_ERROR_MESSAGE,
    NotCheckedIn,
    SessionStore,
    SwitchRejected,
    WrongBooth,
    booth_path,
    check_in,
    normalize_booth_code,
    resume_session,
)
from informes.services.report_form import FormState, ReportForm


class TestBoothCode:
    def test_normalize(self):
        assert normalize_booth_code(" b 2 ") == "B2"
        assert normalize_booth_code("") == ""

    def test_path(self):
        assert booth_path("B2") == "/informes/B2"


class TestSessionStore:
    """Persistência da identidade por token"""

    def test_save_and_load(self, ana_checkin):
        store = SessionStore()
        token = store.new_token()
        store.save(token, ana_checkin)
        assert store.load(token) == ana_checkin

    def test_missing_token(self):
        store = SessionStore()
        assert store.load(None) is None
        assert store.load("nao-existe") is None

    def test_corrupt_record_means_not_checked_in(self):
        store = SessionStore()
        store._records["t"] = '{"staff_name": "Ana"}'
        assert store.load("t") is None
        with pytest.raises(NotCheckedIn):
            resume_session(store, "t")

    def test_tokens_are_unique(self):
        store = SessionStore()
        assert store.new_token() != store.new_token()


class TestCheckIn:
    def test_check_in_success(self, checkin_backend):
        """Códigos normalizados e identidade gravada"""
        store = SessionStore()
        session = asyncio.run(check_in(store, checkin_backend, " b1", "a1 "))
        assert session.checkin.booth_code == "B1"
        assert session.checkin.personal_code == "A1"
        assert session.checkin.company_name == "Acme"
        assert session.checkin.department_id == "D1"
        assert resume_session(store, session.token).checkin == session.checkin

    def test_check_in_rejected(self, checkin_backend):
        store = SessionStore()
        with pytest.raises(CheckinRejected):
            asyncio.run(check_in(store, checkin_backend, "B9", "A1"))
        assert store._records == {}

    def test_empty_booth_code(self, checkin_backend):
        with pytest.raises(CheckinRejected) as exc_info:
            asyncio.run(check_in(SessionStore(), checkin_backend, "  ", "A1"))
        assert str(exc_info.value) == EMPTY_BOOTH_CODE_MESSAGE
        assert checkin_backend.calls == []


class TestSwitchBooth:
    """Troca de estande dentro da sessão"""

    def _session(self, backend):
        store = SessionStore()
        return store, asyncio.run(check_in(store, backend, "B1", "A1"))

    def test_switch_replaces_identity(self, checkin_backend):
        """Troca substitui a identidade inteira"""
        store, session = self._session(checkin_backend)
        info = asyncio.run(session.switch_booth(checkin_backend, "b2"))
        assert info.booth_code == "B2"
        assert info.company_name == "Nuvem"
        assert session.checkin == info
        assert store.load(session.token) == info

    def test_invalid_switch_keeps_identity(self, checkin_backend):
        """Troca recusada mostra a mensagem e mantém a sessão"""
        store, session = self._session(checkin_backend)
        before = session.checkin
        with pytest.raises(SwitchRejected) as exc_info:
            asyncio.run(session.switch_booth(checkin_backend, "B9"))
        assert str(exc_info.value) == "Código de estande inválido."
        assert session.checkin == before
        assert store.load(session.token) == before

    def test_empty_switch_code(self, checkin_backend):
        _, session = self._session(checkin_backend)
        with pytest.raises(SwitchRejected) as exc_info:
            asyncio.run(session.switch_booth(checkin_backend, " "))
        assert str(exc_info.value) == EMPTY_BOOTH_CODE_MESSAGE

    def test_backend_failure_is_unknown_error(self, checkin_backend):
        """Erro do backend vira mensagem genérica"""
        _, session = self._session(checkin_backend)
        checkin_backend.fail.add("validate_checkin")
        with pytest.raises(SwitchRejected) as exc_info:
            asyncio.run(session.switch_booth(checkin_backend, "B2"))
        assert str(exc_info.value) == UNKNOWN_ERROR_MESSAGE
        assert session.checkin.booth_code == "B1"

    def test_switch_discards_open_form(self, checkin_backend):
        _, session = self._session(checkin_backend)
        session.open_form(make_button("1", "Feedback", {"type": "OPEN_TEXT"}))
        asyncio.run(session.switch_booth(checkin_backend, "B2"))
        assert session.form is None


class TestFormAndExit:
    def test_open_and_close_form(self, checkin_backend):
        store = SessionStore()
        session = asyncio.run(check_in(store, checkin_backend, "B1", "A1"))
        form = session.open_form(make_button("1", "Feedback", {"type": "OPEN_TEXT"}))
        assert form.state == FormState.COMPOSING
        assert resume_session(store, session.token).form is form
        session.close_form()
        assert session.form is None

    def test_exit_requires_new_checkin(self, checkin_backend):
        """Depois de sair é preciso novo check-in"""
        store = SessionStore()
        session = asyncio.run(check_in(store, checkin_backend, "B1", "A1"))
        session.exit()
        assert store.load(session.token) is None
        with pytest.raises(NotCheckedIn):
            resume_session(store, session.token)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestIdleExpiry:
    """Sessões abandonadas são descartadas"""

    def test_use_keeps_session_alive(self, ana_checkin):
        clock = FakeClock()
        store = SessionStore(idle_seconds=60, clock=clock)
        store.save("t", ana_checkin)
        clock.now = 50
        assert store.load("t") == ana_checkin
        clock.now = 100
        assert store.load("t") == ana_checkin

    def test_idle_session_expires(self, ana_checkin):
        """Sem uso além do limite: registro e formulário somem"""
        clock = FakeClock()
        store = SessionStore(idle_seconds=60, clock=clock)
        store.save("t", ana_checkin)
        store.set_form("t", ReportForm(make_button("1", "Feedback", {"type": "OPEN_TEXT"})))
        clock.now = 61
        assert store.load("t") is None
        assert store.get_form("t") is None
        assert len(store) == 0
        with pytest.raises(NotCheckedIn):
            resume_session(store, "t")

    def test_new_checkin_purges_abandoned(self, ana_checkin):
        clock = FakeClock()
        store = SessionStore(idle_seconds=60, clock=clock)
        store.save("antigo", ana_checkin)
        clock.now = 120
        store.save("novo", ana_checkin)
        assert len(store) == 1
        assert store.load("novo") == ana_checkin


class TestRequireBooth:
    def test_current_booth(self, checkin_backend):
        session = asyncio.run(check_in(SessionStore(), checkin_backend, "B1", "A1"))
        assert session.require_booth(" b1") == "B1"

    def test_other_booth_needs_switch(self, checkin_backend):
        """Outro estande só depois da troca validada"""
        session = asyncio.run(check_in(SessionStore(), checkin_backend, "B1", "A1"))
        with pytest.raises(WrongBooth):
            session.require_booth("B2")
        asyncio.run(session.switch_booth(checkin_backend, "B2"))
        assert session.require_booth("B2") == "B2"
