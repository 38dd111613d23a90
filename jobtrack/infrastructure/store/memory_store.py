from __future__ import annotations

import uuid
from dataclasses import replace

from jobtrack.application.exceptions import RequestExistsError, RequestNotFoundError
from jobtrack.application.ports.custom_status_store import CustomStatusStorePort
from jobtrack.application.ports.notes_store import NotesStorePort
from jobtrack.application.ports.photo_store import PhotoStorePort
from jobtrack.application.ports.service_request_store import ServiceRequestStorePort
from jobtrack.domain.entities.cancellation import CancellationRecord
from jobtrack.domain.entities.history import StatusHistoryEntry
from jobtrack.domain.entities.note import MechanicNote
from jobtrack.domain.entities.photo import JobPhoto
from jobtrack.domain.entities.service_request import ServiceRequest
from jobtrack.domain.entities.status_definition import StatusDefinition


class MemoryServiceRequestStore(
    ServiceRequestStorePort,
    CustomStatusStorePort,
    NotesStorePort,
    PhotoStorePort,
):
    def __init__(self) -> None:
        self._requests: dict[str, ServiceRequest] = {}
        self._custom_statuses: dict[str, list[StatusDefinition]] = {}

    def _get(self, request_id: str) -> ServiceRequest:
        try:
            return self._requests[request_id]
        except KeyError:
            raise RequestNotFoundError(request_id) from None

    async def get_request(self, request_id: str) -> ServiceRequest:
        return self._get(request_id)

    async def create_request(
        self,
        request_id: str,
        customer_id: str | None = None,
        mechanic_id: str | None = None,
    ) -> ServiceRequest:
        if request_id in self._requests:
            raise RequestExistsError(request_id)
        request = ServiceRequest(id=request_id, customer_id=customer_id, mechanic_id=mechanic_id)
        self._requests[request_id] = request
        return request

    async def update_job_status(self, request_id: str, entry: StatusHistoryEntry) -> None:
        self._requests[request_id] = replace(self._get(request_id), job_status=entry.status)
        # history append is a separate write
        current = self._get(request_id)
        self._requests[request_id] = replace(current, status_history=current.status_history + (entry,))

    async def update_payment_status(self, request_id: str, entry: StatusHistoryEntry) -> None:
        self._requests[request_id] = replace(self._get(request_id), payment_status=entry.status)
        current = self._get(request_id)
        self._requests[request_id] = replace(current, payment_history=current.payment_history + (entry,))

    async def cancel_job(self, request_id: str, record: CancellationRecord) -> None:
        current = self._get(request_id)
        self._requests[request_id] = replace(current, cancellation=record)
        await self.update_job_status(
            request_id,
            StatusHistoryEntry(
                status="cancelled",
                timestamp=record.cancelled_at,
                actor_role=record.cancelled_by,
                note=record.reason_text,
            ),
        )

    async def list_custom_statuses(self, owner_id: str) -> list[StatusDefinition]:
        return list(self._custom_statuses.get(owner_id, []))

    async def add_custom_status(self, owner_id: str, definition: StatusDefinition) -> None:
        self._custom_statuses.setdefault(owner_id, []).append(definition)

    async def list_notes(self, request_id: str) -> list[MechanicNote]:
        return list(self._get(request_id).notes)

    async def add_note(self, request_id: str, text: str, created_at: str) -> MechanicNote:
        current = self._get(request_id)
        note = MechanicNote(id=uuid.uuid4().hex, text=text, created_at=created_at)
        self._requests[request_id] = replace(current, notes=current.notes + (note,))
        return note

    async def delete_note(self, request_id: str, note_id: str) -> bool:
        current = self._get(request_id)
        remaining = tuple(n for n in current.notes if n.id != note_id)
        if len(remaining) == len(current.notes):
            return False
        self._requests[request_id] = replace(current, notes=remaining)
        return True

    async def list_photos(self, request_id: str) -> list[JobPhoto]:
        return list(self._get(request_id).photos)

    async def add_photo(
        self,
        request_id: str,
        uri: str,
        category: str,
        caption: str | None,
        timestamp: str,
    ) -> JobPhoto:
        current = self._get(request_id)
        photo = JobPhoto(id=uuid.uuid4().hex, uri=uri, category=category, caption=caption, timestamp=timestamp)
        self._requests[request_id] = replace(current, photos=current.photos + (photo,))
        return photo

    async def delete_photo(self, request_id: str, photo_id: str) -> bool:
        current = self._get(request_id)
        remaining = tuple(p for p in current.photos if p.id != photo_id)
        if len(remaining) == len(current.photos):
            return False
        self._requests[request_id] = replace(current, photos=remaining)
        return True
