"""Thin REST gateway to the camp agenda service.

- One request per call
- No retries, no caching
- Errors surface the server message verbatim
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from camp_agenda.agenda.errors import GatewayError
from camp_agenda.agenda.types import AgendaDay, AgendaItem, Camp, Clinician, Location, StaffMember, parse_agenda_days
from camp_agenda.config.settings import settings


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        for key in ("error", "detail", "message"):
            value = payload.get(key)
            if isinstance(value, str) and value:
                return value
    text = response.text.strip()
    return text or f"{response.status_code} {response.reason_phrase}"


class AgendaGateway:
    """Async client for the camp-scoped agenda endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: Service base URL. Defaults to settings.api_base_url.
            client: Pre-configured AsyncClient (tests, shared pools). The
                gateway does not close an injected client.
            timeout: Request timeout in seconds. Defaults to settings.request_timeout_seconds.
        """
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            timeout=timeout if timeout is not None else settings.request_timeout_seconds,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AgendaGateway:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        logger.debug(f"[GATEWAY] {method} {path}")
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.RequestError as e:
            logger.warning(f"[GATEWAY] {method} {path} failed without a response: {e}")
            raise GatewayError(str(e) or "Network error") from e

        if response.is_error:
            message = _error_message(response)
            logger.warning(f"[GATEWAY] {method} {path} -> {response.status_code}: {message}")
            raise GatewayError(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"[GATEWAY] {method} {path} -> {response.status_code}: body is not JSON")
            raise GatewayError(
                f"Invalid JSON in response from {method} {path}", status_code=response.status_code
            ) from e

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def fetch_camp(self, camp_id: int) -> Camp:
        payload = await self._request("GET", f"/api/camps/{camp_id}")
        return Camp.model_validate(payload["data"])

    async def fetch_agenda(self, camp_id: int) -> list[AgendaDay]:
        payload = await self._request("GET", f"/api/camps/{camp_id}/agenda")
        return parse_agenda_days((payload or {}).get("data"))

    async def fetch_clinicians(self, camp_id: int) -> list[Clinician]:
        payload = await self._request("GET", f"/api/camps/{camp_id}/clinicians")
        return [Clinician.model_validate(raw) for raw in (payload or {}).get("data") or [] if raw]

    async def fetch_locations(self, camp_id: int) -> list[Location]:
        payload = await self._request("GET", f"/api/camps/{camp_id}/locations")
        return [Location.model_validate(raw) for raw in (payload or {}).get("data") or [] if raw]

    async def fetch_staff(self) -> list[StaffMember]:
        payload = await self._request("GET", "/api/staff")
        return [StaffMember.model_validate(raw) for raw in (payload or {}).get("data") or [] if raw]

    async def fetch_export(self, camp_id: int) -> list[AgendaDay]:
        payload = await self._request("GET", f"/api/camps/{camp_id}/agenda/export")
        return parse_agenda_days((payload or {}).get("data"))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def add_session(self, camp_id: int, item: AgendaItem) -> AgendaItem:
        """POST a new session. Not idempotent: repeated calls create duplicates."""
        payload = await self._request("POST", f"/api/camps/{camp_id}/agenda", json=item.to_payload())
        return AgendaItem.model_validate(payload)

    async def update_session(self, camp_id: int, session_id: int, item: AgendaItem) -> AgendaItem:
        payload = await self._request("PUT", f"/api/camps/{camp_id}/agenda/{session_id}", json=item.to_payload())
        return AgendaItem.model_validate(payload)

    async def delete_session(self, camp_id: int, session_id: int) -> dict[str, Any]:
        return await self._request("DELETE", f"/api/camps/{camp_id}/agenda/{session_id}") or {}

    async def copy_session(self, camp_id: int, session_id: int, days: list[int]) -> list[AgendaItem]:
        payload = await self._request("POST", f"/api/camps/{camp_id}/agenda/{session_id}/copy", json={"days": days})
        return [AgendaItem.model_validate(raw) for raw in (payload or {}).get("data") or [] if raw]
