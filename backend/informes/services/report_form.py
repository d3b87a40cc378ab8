"""
Formulário de envio de informe (o modal aberto por uma ação do estande).

Estados:
    idle -> composing           open()
    composing -> submitting     submit()
    submitting -> submitted     envio aceito; volta a idle após success_display_seconds
    submitting -> composing     envio falhou; respostas mantidas para reenvio
    composing/submitted -> idle close()

As regras de preenchimento dependem do tipo da ação (OpenText, MultipleChoice,
YesNo) e são decididas pela classe do tipo, nunca pelo texto do rótulo.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from informes.schemas import (
    YES_NO_OPTIONS,
    CheckinInfo,
    MultipleChoice,
    OpenText,
    ReportButtonConfig,
    ReportFormView,
    ReportSubmissionCreate,
    YesNo,
)
from informes.services.backend import BackendApi, BackendError

logger = logging.getLogger(__name__)

SUBMIT_ERROR_MESSAGE = "Falha ao enviar o informe."
FOLLOW_UP_SEPARATOR = " - "
DEFAULT_SUCCESS_DISPLAY_SECONDS = 1.5


class FormState(str, Enum):
    IDLE = "idle"
    COMPOSING = "composing"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class ReportValidationError(ValueError):
    """Resposta ausente ou fora das opções da ação"""
    pass


class FormStateError(Exception):
    """Operação não permitida no estado atual do formulário"""
    pass


@dataclass
class ComposedAnswer:
    primary: str
    follow_up_question: Optional[str] = None
    follow_up_answer: Optional[str] = None

    @property
    def response(self) -> str:
        """Texto enviado ao backend: "<principal> - <pergunta>: <resposta>" quando há acompanhamento"""
        if self.follow_up_question is not None and self.follow_up_answer:
            return f"{self.primary}{FOLLOW_UP_SEPARATOR}{self.follow_up_question}: {self.follow_up_answer}"
        return self.primary


def primary_choices(button: ReportButtonConfig) -> Optional[List[str]]:
    """Opções válidas da resposta principal; None para texto livre"""
    kind = button.kind
    if isinstance(kind, OpenText):
        return None
    if isinstance(kind, MultipleChoice):
        return kind.labels()
    if isinstance(kind, YesNo):
        return list(YES_NO_OPTIONS)
    raise TypeError(f"Tipo de informe desconhecido: {type(kind).__name__}")


def follow_up_active(button: ReportButtonConfig, primary: str) -> bool:
    kind = button.kind
    return isinstance(kind, YesNo) and kind.follow_up is not None and primary == kind.trigger_value


def compose_answer(button: ReportButtonConfig, primary: str, follow_up: str = "") -> ComposedAnswer:
    kind = button.kind
    if isinstance(kind, OpenText):
        if not primary.strip():
            raise ReportValidationError("Preencha a resposta.")
        return ComposedAnswer(primary)

    if isinstance(kind, MultipleChoice):
        if primary not in kind.labels():
            raise ReportValidationError("Selecione uma das opções.")
        return ComposedAnswer(primary)

    if isinstance(kind, YesNo):
        if primary not in YES_NO_OPTIONS:
            raise ReportValidationError('Responda "Sim" ou "Não".')
        if not follow_up_active(button, primary):
            return ComposedAnswer(primary)

        follow_up_kind = kind.follow_up.kind
        if isinstance(follow_up_kind, MultipleChoice):
            if follow_up not in follow_up_kind.labels():
                raise ReportValidationError("Selecione uma das opções da pergunta de acompanhamento.")
        elif not follow_up.strip():
            raise ReportValidationError("Responda a pergunta de acompanhamento.")
        return ComposedAnswer(primary, kind.follow_up.question, follow_up)

    raise TypeError(f"Tipo de informe desconhecido: {type(kind).__name__}")


class ReportForm:
    def __init__(self, button: ReportButtonConfig, success_display_seconds: float = DEFAULT_SUCCESS_DISPLAY_SECONDS):
        self.button = button
        self.success_display_seconds = success_display_seconds
        self.state = FormState.IDLE
        self.primary = ""
        self.follow_up = ""
        self.submission_success: Optional[bool] = None
        self._close_handle: Optional[asyncio.TimerHandle] = None

    @property
    def follow_up_visible(self) -> bool:
        return follow_up_active(self.button, self.primary)

    def _require(self, *states: FormState):
        if self.state not in states:
            raise FormStateError(f"Operação inválida no estado {self.state.value}")

    def _cancel_timer(self):
        if self._close_handle is not None:
            self._close_handle.cancel()
            self._close_handle = None

    def _reset(self):
        self.state = FormState.IDLE
        self.primary = ""
        self.follow_up = ""
        self.submission_success = None

    def open(self):
        self._require(FormState.IDLE, FormState.COMPOSING, FormState.SUBMITTED)
        self._cancel_timer()
        self._reset()
        self.state = FormState.COMPOSING

    def close(self):
        """Fecha o modal descartando as respostas"""
        self._require(FormState.IDLE, FormState.COMPOSING, FormState.SUBMITTED)
        self._cancel_timer()
        self._reset()

    def set_primary(self, value: str):
        self._require(FormState.COMPOSING)
        choices = primary_choices(self.button)
        if choices is not None and value not in choices:
            raise ReportValidationError(f"Opção inválida: {value}")
        self.primary = value
        if not self.follow_up_visible:
            self.follow_up = ""

    def set_follow_up(self, value: str):
        self._require(FormState.COMPOSING)
        if not self.follow_up_visible:
            raise ReportValidationError("A pergunta de acompanhamento não está disponível.")
        follow_up_kind = self.button.kind.follow_up.kind
        if isinstance(follow_up_kind, MultipleChoice) and value not in follow_up_kind.labels():
            raise ReportValidationError(f"Opção inválida: {value}")
        self.follow_up = value

    async def submit(self, backend: BackendApi, checkin: CheckinInfo, booth_code: str) -> bool:
        """Envia o informe; retorna False se o backend recusar (formulário volta a composing)"""
        self._require(FormState.COMPOSING)
        answer = compose_answer(self.button, self.primary, self.follow_up)
        payload = ReportSubmissionCreate(
            event_id=checkin.event_id,
            booth_code=booth_code,
            staff_name=checkin.staff_name,
            report_label=self.button.label,
            response=answer.response,
        )

        self.state = FormState.SUBMITTING
        self.submission_success = None
        try:
            await backend.submit_report(payload)
        except BackendError as e:
            logger.warning("Report submission failed | booth=%s label=%s: %s", booth_code, self.button.label, e)
            self.state = FormState.COMPOSING
            self.submission_success = False
            return False

        self.state = FormState.SUBMITTED
        self.submission_success = True
        self._close_handle = asyncio.get_running_loop().call_later(self.success_display_seconds, self._auto_close)
        return True

    def _auto_close(self):
        self._close_handle = None
        if self.state == FormState.SUBMITTED:
            self._reset()

    def view(self) -> ReportFormView:
        if self.state == FormState.IDLE:
            return ReportFormView(state=self.state.value)
        return ReportFormView(
            state=self.state.value,
            button=self.button,
            primary=self.primary,
            follow_up=self.follow_up,
            follow_up_visible=self.follow_up_visible,
            submission_success=self.submission_success,
        )
