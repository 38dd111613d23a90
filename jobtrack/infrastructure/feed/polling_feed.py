from __future__ import annotations

import asyncio
import inspect
import logging

from jobtrack.application.ports.service_request_store import ServiceRequestStorePort
from jobtrack.application.ports.status_feed import ChangeCallback, StatusFeedPort, Unsubscribe


class PollingStatusFeed(StatusFeedPort):
    """Fixed-interval polling behind the subscription interface.

    Missed or repeated reads are tolerated; a read error is logged and the next
    tick tries again.
    """

    def __init__(self, store: ServiceRequestStorePort, interval_seconds: float = 3.0) -> None:
        self._store = store
        self._interval = interval_seconds
        self._logger = logging.getLogger(__name__)

    async def subscribe(self, request_id: str, on_change: ChangeCallback) -> Unsubscribe:
        task = asyncio.create_task(self._poll(request_id, on_change))

        def unsubscribe() -> None:
            if not task.done():
                task.cancel()

        return unsubscribe

    async def _poll(self, request_id: str, on_change: ChangeCallback) -> None:
        last_seen: tuple[str, str] | None = None
        while True:
            try:
                request = await self._store.get_request(request_id)
            except Exception as e:
                self._logger.warning("Status poll failed", extra={"request_id": request_id, "error": str(e)})
            else:
                key = (request.job_status, request.payment_status)
                if key != last_seen:
                    last_seen = key
                    try:
                        result = on_change(request)
                        if inspect.isawaitable(result):
                            await result
                    except Exception as e:
                        self._logger.exception(
                            "Status subscriber failed",
                            extra={"request_id": request_id, "error": str(e)},
                        )
            await asyncio.sleep(self._interval)
