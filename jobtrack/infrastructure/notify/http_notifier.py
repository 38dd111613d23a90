from __future__ import annotations

import logging

import httpx

from jobtrack.application.exceptions import NotifierError
from jobtrack.application.ports.notifier import NotifierPort


class HttpReminderNotifier(NotifierPort):
    """Posts payment reminders to a webhook that fans out to email/SMS/push."""

    def __init__(
        self,
        endpoint: str,
        token: str | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._token = token
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    async def send_payment_reminder(self, request_id: str) -> None:
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        payload = {"type": "payment_reminder", "request_id": request_id}
        try:
            resp = await self._client.post(self._endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error("Reminder request failed", extra={"request_id": request_id, "error": str(e)})
            raise NotifierError(str(e)) from e

        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = None
            error_message = (body.get("error") if isinstance(body, dict) else None) or resp.text
            self._logger.error(
                "Reminder rejected",
                extra={
                    "request_id": request_id,
                    "status": resp.status_code,
                    "error": error_message,
                },
            )
            raise NotifierError(f"Reminder endpoint returned {resp.status_code}")

    async def aclose(self) -> None:
        await self._client.aclose()
