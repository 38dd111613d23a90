from __future__ import annotations

from dataclasses import dataclass, field

from jobtrack.domain.entities.cancellation import CancellationRecord
from jobtrack.domain.entities.history import StatusHistoryEntry
from jobtrack.domain.entities.note import MechanicNote
from jobtrack.domain.entities.photo import JobPhoto


@dataclass(frozen=True)
class ServiceRequest:
    id: str
    job_status: str = "pending"
    payment_status: str = "unpaid"
    customer_id: str | None = None
    mechanic_id: str | None = None
    status_history: tuple[StatusHistoryEntry, ...] = ()
    payment_history: tuple[StatusHistoryEntry, ...] = ()
    cancellation: CancellationRecord | None = None
    notes: tuple[MechanicNote, ...] = field(default_factory=tuple)
    photos: tuple[JobPhoto, ...] = field(default_factory=tuple)
