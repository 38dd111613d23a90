from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from jobtrack.domain.entities.actor import ActorRole


@dataclass(frozen=True)
class StatusHistoryEntry:
    status: str
    timestamp: str  # ISO-8601
    actor_role: ActorRole
    note: str | None = None
    amount: Decimal | None = None  # payment history only
