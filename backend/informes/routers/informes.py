"""Página de informes do estande: check-in, ações, envio, troca de estande e saída"""
from fastapi import APIRouter, Depends, HTTPException

from informes.config import settings
from informes.dependencies import get_backend, get_booth_session, get_session_store
from informes.schemas import (
    BoothActionsResponse,
    CheckinRequest,
    CheckinResponse,
    FormAnswers,
    ReportFormView,
    SwitchBoothRequest,
    SwitchBoothResponse,
)
from informes.services.backend import BackendApi, CheckinRejected
from informes.services.booth_session import (
    ENTRY_POINT,
    BoothSession,
    SessionStore,
    SwitchRejected,
    WrongBooth,
    booth_path,
    check_in,
)
from informes.services.catalog import CatalogUnavailable, load_booth_actions, visible_buttons
from informes.services.report_form import (
    SUBMIT_ERROR_MESSAGE,
    FormState,
    FormStateError,
    ReportForm,
    ReportValidationError,
)

router = APIRouter(prefix="/api/informes", tags=["informes"])


def _same_booth(session: BoothSession, booth_code: str) -> str:
    try:
        return session.require_booth(booth_code)
    except WrongBooth as e:
        raise HTTPException(status_code=409, detail=str(e))


def _active_form(session: BoothSession) -> ReportForm:
    form = session.form
    if form is None or form.state == FormState.IDLE:
        raise HTTPException(status_code=409, detail="Nenhum informe aberto.")
    return form


# ========== Sessão ==========

@router.post("/checkin", response_model=CheckinResponse)
async def checkin(
    data: CheckinRequest,
    backend: BackendApi = Depends(get_backend),
    store: SessionStore = Depends(get_session_store),
):
    """Check-in no estande; devolve o token da sessão"""
    try:
        session = await check_in(store, backend, data.booth_code, data.personal_code)
    except CheckinRejected as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CheckinResponse(
        session_id=session.token,
        checkin=session.checkin,
        redirect=booth_path(session.checkin.booth_code),
    )


@router.post("/switch", response_model=SwitchBoothResponse)
async def switch_booth(
    data: SwitchBoothRequest,
    session: BoothSession = Depends(get_booth_session),
    backend: BackendApi = Depends(get_backend),
):
    """Troca de estande mantendo o mesmo código pessoal"""
    try:
        info = await session.switch_booth(backend, data.booth_code)
    except SwitchRejected as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SwitchBoothResponse(checkin=info, redirect=booth_path(info.booth_code))


@router.post("/exit")
async def exit_session(session: BoothSession = Depends(get_booth_session)):
    """Sai da sessão"""
    session.exit()
    return {"redirect": ENTRY_POINT}


# ========== Ações do estande ==========

@router.get("/{booth_code}", response_model=BoothActionsResponse)
async def booth_actions(
    booth_code: str,
    session: BoothSession = Depends(get_booth_session),
    backend: BackendApi = Depends(get_backend),
):
    """Ações disponíveis para o membro da equipe neste estande"""
    booth_code = _same_booth(session, booth_code)
    try:
        buttons = await load_booth_actions(backend, booth_code)
    except CatalogUnavailable as e:
        raise HTTPException(status_code=502, detail=str(e))
    return BoothActionsResponse(
        booth_code=booth_code,
        checkin=session.checkin,
        buttons=visible_buttons(buttons, session.checkin.department_id),
    )


@router.post("/{booth_code}/actions/{button_id}", response_model=ReportFormView)
async def open_action(
    booth_code: str,
    button_id: str,
    session: BoothSession = Depends(get_booth_session),
    backend: BackendApi = Depends(get_backend),
):
    """Abre o formulário de uma ação"""
    booth_code = _same_booth(session, booth_code)
    try:
        buttons = await load_booth_actions(backend, booth_code)
    except CatalogUnavailable as e:
        raise HTTPException(status_code=502, detail=str(e))

    button = next((b for b in visible_buttons(buttons, session.checkin.department_id) if b.id == button_id), None)
    if not button:
        raise HTTPException(status_code=404, detail="Ação não encontrada")

    try:
        form = session.open_form(button, settings.SUCCESS_DISPLAY_SECONDS)
    except FormStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return form.view()


@router.get("/{booth_code}/form", response_model=ReportFormView)
async def get_form(booth_code: str, session: BoothSession = Depends(get_booth_session)):
    """Estado do formulário aberto"""
    _same_booth(session, booth_code)
    form = session.form
    if form is None:
        return ReportFormView(state=FormState.IDLE.value)
    return form.view()


@router.put("/{booth_code}/form", response_model=ReportFormView)
async def update_form(booth_code: str, answers: FormAnswers, session: BoothSession = Depends(get_booth_session)):
    """Preenche a resposta principal e/ou a de acompanhamento"""
    _same_booth(session, booth_code)
    form = _active_form(session)
    try:
        if answers.primary is not None:
            form.set_primary(answers.primary)
        if answers.follow_up is not None:
            form.set_follow_up(answers.follow_up)
    except ReportValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except FormStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return form.view()


@router.post("/{booth_code}/form/submit", response_model=ReportFormView)
async def submit_form(
    booth_code: str,
    session: BoothSession = Depends(get_booth_session),
    backend: BackendApi = Depends(get_backend),
):
    """Envia o informe do formulário aberto"""
    booth_code = _same_booth(session, booth_code)
    form = _active_form(session)
    try:
        sent = await form.submit(backend, session.checkin, booth_code)
    except ReportValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except FormStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not sent:
        raise HTTPException(status_code=502, detail=SUBMIT_ERROR_MESSAGE)
    return form.view()


@router.delete("/{booth_code}/form", response_model=ReportFormView)
async def cancel_form(booth_code: str, session: BoothSession = Depends(get_booth_session)):
    """Fecha o formulário descartando as respostas"""
    _same_booth(session, booth_code)
    try:
        session.close_form()
    except FormStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return ReportFormView(state=FormState.IDLE.value)
