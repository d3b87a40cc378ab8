"""
Sessão do estande.

A identidade do check-in (CheckinInfo) fica no SessionStore, serializada em
JSON por token de sessão. Cada requisição recupera um BoothSession, que é
passado explicitamente para os fluxos de informe, troca de estande e saída.
A identidade é sempre substituída por inteiro, nunca alterada em partes.
"""
import logging
import re
import secrets
import time
from typing import Dict, Optional

from pydantic import ValidationError

from informes.schemas import CheckinInfo, CheckinValidation, ReportButtonConfig
from informes.services.backend import BackendApi, BackendError, CheckinRejected
from informes.services.report_form import DEFAULT_SUCCESS_DISPLAY_SECONDS, FormState, FormStateError, ReportForm

logger = logging.getLogger(__name__)

ENTRY_POINT = "/"
EMPTY_BOOTH_CODE_MESSAGE = "Por favor, insira o código do estande."
UNKNOWN_ERROR_MESSAGE = "Ocorreu um erro desconhecido."
DEFAULT_IDLE_SECONDS = 12 * 60 * 60


class NotCheckedIn(Exception):
    """Sem check-in válido: o cliente deve voltar ao ponto de entrada"""
    pass


class SwitchRejected(Exception):
    """Troca de estande recusada; a sessão atual continua valendo"""
    pass


class WrongBooth(Exception):
    """Requisição para um estande diferente do check-in atual"""
    pass


def normalize_booth_code(value: str) -> str:
    return re.sub(r"\s", "", value or "").upper()


def booth_path(booth_code: str) -> str:
    return f"/informes/{booth_code}"


class SessionStore:
    """
    Identidades por token, só em memória: somem quando o processo reinicia.

    Sessões sem uso por mais de idle_seconds são descartadas na próxima
    leitura ou gravação; o tablet abandonado precisa de novo check-in.
    """

    def __init__(self, idle_seconds: float = DEFAULT_IDLE_SECONDS, clock=time.monotonic):
        self.idle_seconds = idle_seconds
        self._clock = clock
        self._records: Dict[str, str] = {}
        self._forms: Dict[str, ReportForm] = {}
        self._last_seen: Dict[str, float] = {}

    def new_token(self) -> str:
        return secrets.token_urlsafe(24)

    def __len__(self):
        return len(self._records)

    def purge_expired(self) -> int:
        now = self._clock()
        expired = [token for token, seen in self._last_seen.items() if now - seen > self.idle_seconds]
        for token in expired:
            self.clear(token)
        if expired:
            logger.info("Expired %d idle session(s)", len(expired))
        return len(expired)

    def save(self, token: str, info: CheckinInfo):
        self.purge_expired()
        self._records[token] = info.model_dump_json()
        self._last_seen[token] = self._clock()

    def load(self, token: Optional[str]) -> Optional[CheckinInfo]:
        self.purge_expired()
        raw = self._records.get(token) if token else None
        if raw is None:
            return None
        try:
            info = CheckinInfo.model_validate_json(raw)
        except ValidationError as e:
            logger.error("Failed to parse stored checkin info: %s", e)
            return None
        self._last_seen[token] = self._clock()
        return info

    def clear(self, token: str):
        self._records.pop(token, None)
        self._forms.pop(token, None)
        self._last_seen.pop(token, None)

    def get_form(self, token: str) -> Optional[ReportForm]:
        return self._forms.get(token)

    def set_form(self, token: str, form: ReportForm):
        self._forms[token] = form

    def drop_form(self, token: str):
        self._forms.pop(token, None)


def checkin_from_validation(validation: CheckinValidation, booth_code: str, personal_code: str) -> CheckinInfo:
    return CheckinInfo(
        staff_name=validation.staff.name,
        personal_code=personal_code,
        event_id=validation.event.id,
        department_id=validation.staff.department_id,
        company_name=validation.company.name,
        booth_code=booth_code,
    )


class BoothSession:
    def __init__(self, store: SessionStore, token: str, checkin: CheckinInfo):
        self.store = store
        self.token = token
        self.checkin = checkin

    @property
    def form(self) -> Optional[ReportForm]:
        return self.store.get_form(self.token)

    def require_booth(self, booth_code: str) -> str:
        """Só o estande do check-in atual; outro estande exige a troca"""
        code = normalize_booth_code(booth_code)
        if code != self.checkin.booth_code:
            raise WrongBooth(
                f"Você está no estande {self.checkin.booth_code}. Troque de estande para registrar em {code}."
            )
        return code

    def open_form(self, button: ReportButtonConfig, success_display_seconds: float = DEFAULT_SUCCESS_DISPLAY_SECONDS) -> ReportForm:
        """Abre o modal de uma ação; um modal aberto antes é descartado"""
        current = self.form
        if current is not None and current.state == FormState.SUBMITTING:
            raise FormStateError("Aguarde o envio do informe em andamento.")
        form = ReportForm(button, success_display_seconds)
        form.open()
        self.store.set_form(self.token, form)
        return form

    def close_form(self):
        form = self.form
        if form is not None:
            form.close()
            self.store.drop_form(self.token)

    async def switch_booth(self, backend: BackendApi, booth_code: str) -> CheckinInfo:
        code = normalize_booth_code(booth_code)
        if not code:
            raise SwitchRejected(EMPTY_BOOTH_CODE_MESSAGE)
        try:
            validation = await backend.validate_checkin(code, self.checkin.personal_code)
        except CheckinRejected as e:
            raise SwitchRejected(str(e)) from e
        except BackendError as e:
            logger.error("Booth switch failed | booth=%s: %s", code, e)
            raise SwitchRejected(UNKNOWN_ERROR_MESSAGE) from e

        info = checkin_from_validation(validation, code, self.checkin.personal_code)
        self.store.save(self.token, info)
        self.store.drop_form(self.token)
        self.checkin = info
        logger.info("Booth switched | staff=%s booth=%s", info.staff_name, code)
        return info

    def exit(self):
        """Encerra a sessão; é preciso novo check-in para continuar"""
        self.store.clear(self.token)
        logger.info("Session closed | staff=%s", self.checkin.staff_name)


def resume_session(store: SessionStore, token: Optional[str]) -> BoothSession:
    checkin = store.load(token)
    if checkin is None:
        raise NotCheckedIn("Faça o check-in para continuar.")
    return BoothSession(store, token, checkin)


async def check_in(store: SessionStore, backend: BackendApi, booth_code: str, personal_code: str) -> BoothSession:
    """Valida estande + código pessoal e abre uma sessão nova; CheckinRejected se recusado"""
    code = normalize_booth_code(booth_code)
    if not code:
        raise CheckinRejected(EMPTY_BOOTH_CODE_MESSAGE)
    personal = personal_code.strip().upper()
    validation = await backend.validate_checkin(code, personal)

    token = store.new_token()
    info = checkin_from_validation(validation, code, personal)
    store.save(token, info)
    logger.info("Checked in | staff=%s booth=%s", info.staff_name, code)
    return BoothSession(store, token, info)
