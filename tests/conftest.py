from __future__ import annotations

import asyncio

import pytest

from jobtrack.application.ports.custom_status_store import CustomStatusStorePort
from jobtrack.application.ports.notifier import NotifierPort
from jobtrack.application.ports.service_request_store import ServiceRequestStorePort
from jobtrack.domain.entities.cancellation import CancellationRecord
from jobtrack.domain.entities.history import StatusHistoryEntry
from jobtrack.domain.entities.service_request import ServiceRequest
from jobtrack.domain.entities.status_definition import StatusDefinition


class FakeStore(ServiceRequestStorePort, CustomStatusStorePort):
    """Records every call; raises when ``fail`` is set."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []
        self.fail = False
        self.release: asyncio.Event | None = None
        self.customs: dict[str, list[StatusDefinition]] = {}

    async def _maybe_fail(self) -> None:
        if self.release is not None:
            await self.release.wait()
        if self.fail:
            raise RuntimeError("backend unavailable")

    async def get_request(self, request_id: str) -> ServiceRequest:
        return ServiceRequest(id=request_id)

    async def create_request(self, request_id, customer_id=None, mechanic_id=None) -> ServiceRequest:
        return ServiceRequest(id=request_id, customer_id=customer_id, mechanic_id=mechanic_id)

    async def update_job_status(self, request_id: str, entry: StatusHistoryEntry) -> None:
        self.calls.append(("job", entry))
        await self._maybe_fail()

    async def update_payment_status(self, request_id: str, entry: StatusHistoryEntry) -> None:
        self.calls.append(("payment", entry))
        await self._maybe_fail()

    async def cancel_job(self, request_id: str, record: CancellationRecord) -> None:
        self.calls.append(("cancel", record))
        await self._maybe_fail()

    async def list_custom_statuses(self, owner_id: str) -> list[StatusDefinition]:
        return list(self.customs.get(owner_id, []))

    async def add_custom_status(self, owner_id: str, definition: StatusDefinition) -> None:
        self.calls.append(("custom", definition))
        await self._maybe_fail()
        self.customs.setdefault(owner_id, []).append(definition)


class FakeNotifier(NotifierPort):
    def __init__(self) -> None:
        self.sent: list[str] = []
        self.fail = False

    async def send_payment_reminder(self, request_id: str) -> None:
        if self.fail:
            raise RuntimeError("smtp down")
        self.sent.append(request_id)


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_notifier() -> FakeNotifier:
    return FakeNotifier()
