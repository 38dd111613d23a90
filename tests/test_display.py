from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from jobtrack.application.utils.display import (
    ExpansionState,
    format_amount,
    format_timestamp,
    render_history,
    truncate_text,
)
from jobtrack.domain.catalogs import job_catalog
from jobtrack.domain.entities.actor import ActorRole
from jobtrack.domain.entities.history import StatusHistoryEntry


def test_format_timestamp_joins_locale_date_and_time():
    tz = ZoneInfo("America/Los_Angeles")
    expected_dt = datetime(2024, 1, 26, 17, 30, tzinfo=ZoneInfo("UTC")).astimezone(tz)

    formatted = format_timestamp("2024-01-26T17:30:00Z", tz)

    assert formatted == expected_dt.strftime("%x") + " " + expected_dt.strftime("%X")


def test_format_timestamp_passes_through_garbage():
    assert format_timestamp("not a date") == "not a date"


def test_format_amount():
    assert format_amount(Decimal("12.5")) == "$12.50"
    assert format_amount("80") == "$80.00"
    assert format_amount(None) is None
    assert format_amount("abc") is None


def test_render_history_keeps_caller_order():
    entries = [
        StatusHistoryEntry("completed", "2024-01-03T00:00:00+00:00", ActorRole.mechanic),
        StatusHistoryEntry("pending", "2024-01-01T00:00:00+00:00", ActorRole.customer),
        StatusHistoryEntry("in_progress", "2024-01-02T00:00:00+00:00", ActorRole.mechanic),
    ]

    rows = render_history(entries, job_catalog())

    assert [r.status.id for r in rows] == ["completed", "pending", "in_progress"]
    assert [r.actor for r in rows] == ["Mechanic", "Customer", "Mechanic"]


def test_truncate_text():
    long_text = "a" * 101

    assert truncate_text("short") == "short"
    assert truncate_text("a" * 100) == "a" * 100
    assert truncate_text(long_text) == "a" * 100 + "..."
    assert truncate_text(long_text, expanded=True) == long_text


def test_expansion_state_single_item():
    state = ExpansionState()

    state.toggle("n1")
    assert state.is_expanded("n1")
    state.toggle("n2")
    assert state.is_expanded("n2") and not state.is_expanded("n1")
    state.toggle("n2")
    assert state.expanded_id is None
