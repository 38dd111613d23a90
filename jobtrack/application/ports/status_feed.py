from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Awaitable, Callable

from jobtrack.domain.entities.service_request import ServiceRequest

ChangeCallback = Callable[[ServiceRequest], Awaitable[None] | None]
Unsubscribe = Callable[[], None]


class StatusFeedPort(ABC):
    @abstractmethod
    async def subscribe(self, request_id: str, on_change: ChangeCallback) -> Unsubscribe:
        """
        Observe status changes on a request without a push channel being required.

        ``on_change`` is called with the latest record whenever the job or payment
        status differs from the last one observed (and once for the first read).
        The returned callable stops delivery; calling it twice is harmless.
        """
        raise NotImplementedError
