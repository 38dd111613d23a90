from __future__ import annotations

from abc import ABC, abstractmethod

from jobtrack.domain.entities.cancellation import CancellationRecord
from jobtrack.domain.entities.history import StatusHistoryEntry
from jobtrack.domain.entities.service_request import ServiceRequest


class ServiceRequestStorePort(ABC):
    @abstractmethod
    async def get_request(self, request_id: str) -> ServiceRequest:
        """Return the request. Raises RequestNotFoundError for unknown ids."""
        raise NotImplementedError

    @abstractmethod
    async def create_request(
        self,
        request_id: str,
        customer_id: str | None = None,
        mechanic_id: str | None = None,
    ) -> ServiceRequest:
        """Create an empty request. Raises RequestExistsError if the id is taken."""
        raise NotImplementedError

    @abstractmethod
    async def update_job_status(self, request_id: str, entry: StatusHistoryEntry) -> None:
        """
        Persist a new job status and append ``entry`` to the status history.

        The two writes are independent; no atomicity is promised between them.
        """
        raise NotImplementedError

    @abstractmethod
    async def update_payment_status(self, request_id: str, entry: StatusHistoryEntry) -> None:
        """Persist a new payment status and append ``entry`` to the payment history."""
        raise NotImplementedError

    @abstractmethod
    async def cancel_job(self, request_id: str, record: CancellationRecord) -> None:
        """Store the cancellation record and move the job to ``cancelled``."""
        raise NotImplementedError
