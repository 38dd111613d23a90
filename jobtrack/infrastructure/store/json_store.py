from __future__ import annotations

import json
import logging
import re
import threading
import uuid
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from jobtrack.application.exceptions import RequestExistsError, RequestNotFoundError, StoreError
from jobtrack.application.ports.custom_status_store import CustomStatusStorePort
from jobtrack.application.ports.notes_store import NotesStorePort
from jobtrack.application.ports.photo_store import PhotoStorePort
from jobtrack.application.ports.service_request_store import ServiceRequestStorePort
from jobtrack.domain.entities.actor import ActorRole
from jobtrack.domain.entities.cancellation import CancellationRecord
from jobtrack.domain.entities.history import StatusHistoryEntry
from jobtrack.domain.entities.note import MechanicNote
from jobtrack.domain.entities.photo import JobPhoto
from jobtrack.domain.entities.service_request import ServiceRequest
from jobtrack.domain.entities.status_definition import StatusDefinition

_SAFE_ID = re.compile(r"^[A-Za-z0-9_.-]+$")
CUSTOM_STATUS_FILE = "_custom_statuses.json"


class JsonServiceRequestStore(
    ServiceRequestStorePort,
    CustomStatusStorePort,
    NotesStorePort,
    PhotoStorePort,
):
    """One JSON document per service request, written atomically."""

    def __init__(self, data_dir: str = "./data/requests") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # guards the locks dict
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, key: str) -> threading.Lock:
        with self._lock_lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def _get_file_path(self, request_id: str) -> Path:
        if not _SAFE_ID.match(request_id or "") or request_id.startswith("."):
            raise RequestNotFoundError(request_id)
        return self._data_dir / f"{request_id}.json"

    def _read_json(self, file_path: Path) -> dict[str, Any] | None:
        if not file_path.exists():
            return None
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise StoreError(f"Unreadable record {file_path.name}: {e}") from e

    def _write_json(self, file_path: Path, data: dict[str, Any]) -> None:
        temp_path = file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(file_path)
        except OSError as e:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    self._logger.warning("Could not remove temp file", extra={"error": str(temp_path)})
            raise StoreError(f"Could not write {file_path.name}: {e}") from e

    def _load(self, request_id: str) -> dict[str, Any]:
        data = self._read_json(self._get_file_path(request_id))
        if data is None:
            raise RequestNotFoundError(request_id)
        data.setdefault("status_history", [])
        data.setdefault("payment_history", [])
        data.setdefault("notes", [])
        data.setdefault("photos", [])
        data.setdefault("version", 1)
        return data

    def _save(self, request_id: str, data: dict[str, Any]) -> None:
        self._write_json(self._get_file_path(request_id), data)

    async def get_request(self, request_id: str) -> ServiceRequest:
        with self._get_lock(request_id):
            data = self._load(request_id)
        return _deserialize_request(data)

    async def create_request(
        self,
        request_id: str,
        customer_id: str | None = None,
        mechanic_id: str | None = None,
    ) -> ServiceRequest:
        if not _SAFE_ID.match(request_id or "") or request_id.startswith("."):
            raise ValueError(f"Invalid request id: {request_id!r}")
        request = ServiceRequest(id=request_id, customer_id=customer_id, mechanic_id=mechanic_id)
        with self._get_lock(request_id):
            if self._get_file_path(request_id).exists():
                raise RequestExistsError(request_id)
            self._save(request_id, _serialize_request(request))
        return request

    async def update_job_status(self, request_id: str, entry: StatusHistoryEntry) -> None:
        with self._get_lock(request_id):
            data = self._load(request_id)
            data["job_status"] = entry.status
            self._save(request_id, data)
        # history append is a separate write
        with self._get_lock(request_id):
            data = self._load(request_id)
            data["status_history"] = data["status_history"] + [_serialize_entry(entry)]
            self._save(request_id, data)

    async def update_payment_status(self, request_id: str, entry: StatusHistoryEntry) -> None:
        with self._get_lock(request_id):
            data = self._load(request_id)
            data["payment_status"] = entry.status
            self._save(request_id, data)
        with self._get_lock(request_id):
            data = self._load(request_id)
            data["payment_history"] = data["payment_history"] + [_serialize_entry(entry)]
            self._save(request_id, data)

    async def cancel_job(self, request_id: str, record: CancellationRecord) -> None:
        with self._get_lock(request_id):
            data = self._load(request_id)
            data["cancellation"] = {
                "reason_id": record.reason_id,
                "reason_text": record.reason_text,
                "cancelled_by": record.cancelled_by.value,
                "cancelled_at": record.cancelled_at,
            }
            self._save(request_id, data)
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
        with self._get_lock(CUSTOM_STATUS_FILE):
            data = self._read_json(self._data_dir / CUSTOM_STATUS_FILE) or {}
        return [_deserialize_definition(d) for d in data.get(owner_id, [])]

    async def add_custom_status(self, owner_id: str, definition: StatusDefinition) -> None:
        file_path = self._data_dir / CUSTOM_STATUS_FILE
        with self._get_lock(CUSTOM_STATUS_FILE):
            data = self._read_json(file_path) or {}
            data.setdefault(owner_id, []).append(
                {
                    "id": definition.id,
                    "label": definition.label,
                    "color": definition.color,
                    "description": definition.description,
                }
            )
            self._write_json(file_path, data)

    async def list_notes(self, request_id: str) -> list[MechanicNote]:
        with self._get_lock(request_id):
            data = self._load(request_id)
        return [MechanicNote(**n) for n in data["notes"]]

    async def add_note(self, request_id: str, text: str, created_at: str) -> MechanicNote:
        note = MechanicNote(id=uuid.uuid4().hex, text=text, created_at=created_at)
        with self._get_lock(request_id):
            data = self._load(request_id)
            data["notes"].append({"id": note.id, "text": note.text, "created_at": note.created_at})
            self._save(request_id, data)
        return note

    async def delete_note(self, request_id: str, note_id: str) -> bool:
        with self._get_lock(request_id):
            data = self._load(request_id)
            remaining = [n for n in data["notes"] if n.get("id") != note_id]
            if len(remaining) == len(data["notes"]):
                return False
            data["notes"] = remaining
            self._save(request_id, data)
        return True

    async def list_photos(self, request_id: str) -> list[JobPhoto]:
        with self._get_lock(request_id):
            data = self._load(request_id)
        return [JobPhoto(**p) for p in data["photos"]]

    async def add_photo(
        self,
        request_id: str,
        uri: str,
        category: str,
        caption: str | None,
        timestamp: str,
    ) -> JobPhoto:
        photo = JobPhoto(id=uuid.uuid4().hex, uri=uri, category=category, caption=caption, timestamp=timestamp)
        with self._get_lock(request_id):
            data = self._load(request_id)
            data["photos"].append(
                {
                    "id": photo.id,
                    "uri": photo.uri,
                    "category": photo.category,
                    "caption": photo.caption,
                    "timestamp": photo.timestamp,
                }
            )
            self._save(request_id, data)
        return photo

    async def delete_photo(self, request_id: str, photo_id: str) -> bool:
        with self._get_lock(request_id):
            data = self._load(request_id)
            remaining = [p for p in data["photos"] if p.get("id") != photo_id]
            if len(remaining) == len(data["photos"]):
                return False
            data["photos"] = remaining
            self._save(request_id, data)
        return True


def _actor(value: Any) -> ActorRole:
    try:
        return ActorRole(value or ActorRole.customer.value)
    except ValueError:
        return ActorRole.customer


def _serialize_entry(entry: StatusHistoryEntry) -> dict[str, Any]:
    return {
        "status": entry.status,
        "date": entry.timestamp,
        "updated_by": entry.actor_role.value,
        "note": entry.note,
        # Decimal kept as string so cents survive the round trip
        "amount": str(entry.amount) if entry.amount is not None else None,
    }


def _deserialize_entry(data: dict[str, Any]) -> StatusHistoryEntry:
    amount = None
    if data.get("amount") not in (None, ""):
        try:
            amount = Decimal(str(data["amount"]))
        except InvalidOperation:
            amount = None
    return StatusHistoryEntry(
        status=str(data.get("status", "")),
        timestamp=str(data.get("date", "")),
        actor_role=_actor(data.get("updated_by")),
        note=data.get("note"),
        amount=amount,
    )


def _deserialize_definition(data: dict[str, Any]) -> StatusDefinition:
    return StatusDefinition(
        id=data["id"],
        label=data.get("label", data["id"]),
        color=data.get("color", ""),
        description=data.get("description"),
        is_custom=True,
    )


def _serialize_request(request: ServiceRequest) -> dict[str, Any]:
    return {
        "id": request.id,
        "job_status": request.job_status,
        "payment_status": request.payment_status,
        "customer_id": request.customer_id,
        "mechanic_id": request.mechanic_id,
        "status_history": [_serialize_entry(e) for e in request.status_history],
        "payment_history": [_serialize_entry(e) for e in request.payment_history],
        "cancellation": None,
        "notes": [],
        "photos": [],
        "version": 1,
    }


def _deserialize_request(data: dict[str, Any]) -> ServiceRequest:
    cancellation = None
    raw_cancel = data.get("cancellation")
    if raw_cancel:
        cancellation = CancellationRecord(
            reason_id=raw_cancel.get("reason_id", ""),
            reason_text=raw_cancel.get("reason_text", ""),
            cancelled_by=_actor(raw_cancel.get("cancelled_by")),
            cancelled_at=raw_cancel.get("cancelled_at", ""),
        )
    return ServiceRequest(
        id=data["id"],
        job_status=data.get("job_status", "pending"),
        payment_status=data.get("payment_status", "unpaid"),
        customer_id=data.get("customer_id"),
        mechanic_id=data.get("mechanic_id"),
        status_history=tuple(_deserialize_entry(e) for e in data.get("status_history", [])),
        payment_history=tuple(_deserialize_entry(e) for e in data.get("payment_history", [])),
        cancellation=cancellation,
        notes=tuple(MechanicNote(**n) for n in data.get("notes", [])),
        photos=tuple(JobPhoto(**p) for p in data.get("photos", [])),
    )
