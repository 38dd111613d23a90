from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Iterable, Sequence
from zoneinfo import ZoneInfo

from jobtrack.domain.entities.history import StatusHistoryEntry
from jobtrack.domain.entities.status_catalog import StatusCatalog
from jobtrack.domain.entities.status_definition import StatusDefinition

DEFAULT_PREVIEW_LENGTH = 100


@dataclass(frozen=True)
class HistoryRow:
    status: StatusDefinition
    when: str
    actor: str
    note: str | None = None
    amount: str | None = None


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def safe_timezone(name: str | None) -> ZoneInfo:
    try:
        return ZoneInfo(name or "UTC")
    except Exception:
        return ZoneInfo("UTC")


def format_timestamp(value: str, tz: ZoneInfo | None = None) -> str:
    """Locale date and locale time joined by a single space.

    Unparseable input is returned unchanged so a bad record never breaks a render.
    """
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, AttributeError, TypeError):
        return str(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    local = parsed.astimezone(tz or ZoneInfo("UTC"))
    return local.strftime("%x") + " " + local.strftime("%X")


def format_amount(amount: Decimal | str | float | None) -> str | None:
    if amount is None or amount == "":
        return None
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        return None
    return f"${value.quantize(Decimal('0.01'))}"


def render_history(
    entries: Sequence[StatusHistoryEntry],
    catalog: StatusCatalog,
    tz: ZoneInfo | None = None,
) -> list[HistoryRow]:
    # caller order is kept; history is never re-sorted by timestamp
    rows: list[HistoryRow] = []
    for entry in entries:
        rows.append(
            HistoryRow(
                status=catalog.resolve(entry.status, fallback="synthesize"),
                when=format_timestamp(entry.timestamp, tz),
                actor=entry.actor_role.display_name,
                note=entry.note or None,
                amount=format_amount(entry.amount),
            )
        )
    return rows


def truncate_text(text: str, expanded: bool = False, limit: int = DEFAULT_PREVIEW_LENGTH) -> str:
    if expanded or len(text) <= limit:
        return text
    return text[:limit] + "..."


def needs_expansion(text: str, limit: int = DEFAULT_PREVIEW_LENGTH) -> bool:
    return len(text) > limit


class ExpansionState:
    """At most one item expanded at a time, keyed by item id."""

    def __init__(self) -> None:
        self._expanded_id: str | None = None

    @property
    def expanded_id(self) -> str | None:
        return self._expanded_id

    def toggle(self, item_id: str) -> None:
        self._expanded_id = None if self._expanded_id == item_id else item_id

    def is_expanded(self, item_id: str) -> bool:
        return self._expanded_id == item_id

    def forget(self, item_ids: Iterable[str]) -> None:
        if self._expanded_id is not None and self._expanded_id not in set(item_ids):
            self._expanded_id = None
