"""Backend remoto: mesma interface de DatabaseBackend, via HTTP"""
import logging
from typing import List
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from informes import schemas
from informes.services.backend import BackendError, CheckinRejected, NotFound

logger = logging.getLogger(__name__)


class HttpBackend:
    def __init__(self, base_url: str, timeout=None, transport: httpx.AsyncBaseTransport = None):
        self.base = base_url.rstrip("/")
        # sem timeout próprio: vale o do transporte/servidor
        self.client = httpx.AsyncClient(base_url=self.base, timeout=timeout, transport=transport)

    async def aclose(self):
        await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return await self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error("Backend request failed: %s %s: %s", method, path, e)
            raise BackendError(f"Falha de comunicação com o backend: {type(e).__name__}") from e

    async def _get(self, path: str):
        r = await self._request("GET", path)
        if r.status_code == 404:
            raise NotFound(f"Não encontrado: {path}")
        if r.is_error:
            raise BackendError(f"Backend respondeu {r.status_code} em {path}")
        try:
            return r.json()
        except ValueError as e:
            # página HTML de proxy, corpo vazio etc.
            logger.error("Backend returned non-JSON body on %s", path)
            raise BackendError(f"Resposta inválida do backend em {path}") from e

    async def _get_list(self, path: str, model) -> list:
        data = await self._get(path)
        if not isinstance(data, list):
            raise BackendError(f"Resposta inválida do backend em {path}")
        try:
            return [model.model_validate(item) for item in data]
        except ValidationError as e:
            raise BackendError(f"Resposta inválida do backend em {path}") from e

    async def get_events(self) -> List[schemas.Event]:
        return await self._get_list("/api/events", schemas.Event)

    async def get_organizer_company(self, organizer_id: str) -> schemas.OrganizerCompany:
        data = await self._get(f"/api/organizers/{quote(organizer_id, safe='')}")
        try:
            return schemas.OrganizerCompany.model_validate(data)
        except ValidationError as e:
            raise BackendError("Resposta inválida do backend") from e

    async def get_staff_by_organizer(self, organizer_id: str) -> List[schemas.Staff]:
        return await self._get_list(f"/api/organizers/{quote(organizer_id, safe='')}/staff", schemas.Staff)

    async def get_staff_activity(self, staff_id: str) -> List[schemas.StaffActivity]:
        return await self._get_list(f"/api/staff/{quote(staff_id, safe='')}/activity", schemas.StaffActivity)

    async def get_participant_companies_by_event(self, event_id: str) -> List[schemas.ParticipantCompany]:
        return await self._get_list(f"/api/events/{quote(event_id, safe='')}/companies", schemas.ParticipantCompany)

    async def get_reports_by_event(self, event_id: str) -> List[schemas.ReportSubmission]:
        return await self._get_list(f"/api/events/{quote(event_id, safe='')}/reports", schemas.ReportSubmission)

    async def get_report_buttons_for_booth(self, booth_code: str) -> List[schemas.ReportButtonConfig]:
        return await self._get_list(f"/api/booths/{quote(booth_code, safe='')}/buttons", schemas.ReportButtonConfig)

    async def submit_report(self, payload: schemas.ReportSubmissionCreate) -> None:
        r = await self._request("POST", "/api/reports", json=payload.model_dump())
        if r.is_error:
            raise BackendError(f"Backend respondeu {r.status_code} ao enviar o informe")

    async def validate_checkin(self, booth_code: str, personal_code: str) -> schemas.CheckinValidation:
        r = await self._request(
            "POST",
            "/api/checkin/validate",
            json={"booth_code": booth_code, "personal_code": personal_code},
        )
        if r.status_code == 400:
            try:
                body = r.json()
            except ValueError:
                body = None
            detail = body.get("detail") if isinstance(body, dict) else None
            raise CheckinRejected(detail if isinstance(detail, str) else "Ocorreu um erro desconhecido.")
        if r.is_error:
            raise BackendError(f"Backend respondeu {r.status_code} ao validar o check-in")
        try:
            return schemas.CheckinValidation.model_validate(r.json())
        except ValueError as e:
            raise BackendError("Resposta inválida do backend") from e
