from __future__ import annotations

import logging

from jobtrack.application.ports.notifier import NotifierPort


class MockNotifier(NotifierPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.sent: list[str] = []

    async def send_payment_reminder(self, request_id: str) -> None:
        self.sent.append(request_id)
        self._logger.info("Mock payment reminder", extra={"request_id": request_id})
