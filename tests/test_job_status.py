"""
Tests for job status transitions and custom status creation.
"""

from __future__ import annotations

import asyncio

from jobtrack.application.use_cases.job_status import JobStatusController, custom_status_id
from jobtrack.domain.catalogs import job_catalog
from jobtrack.domain.entities.action_result import Outcome
from jobtrack.domain.entities.actor import ActorRole
from jobtrack.domain.entities.history import StatusHistoryEntry


def _controller(store, current="pending", actor=ActorRole.mechanic, **kwargs) -> JobStatusController:
    return JobStatusController(
        request_id="req-1",
        store=store,
        catalog=job_catalog(),
        current_status=current,
        actor=actor,
        **kwargs,
    )


def test_same_status_is_noop(fake_store):
    """Requesting the active status issues no call and never goes busy."""
    controller = _controller(fake_store, current="pending")

    result = asyncio.run(controller.request_status_change("pending"))

    assert result.outcome is Outcome.noop
    assert fake_store.calls == []
    assert controller.busy is False
    assert controller.current_status == "pending"


def test_successful_update_advances_status(fake_store):
    controller = _controller(fake_store, current="pending")

    result = asyncio.run(controller.request_status_change("quoted", note="  quote sent  "))

    assert result.ok
    assert controller.current_status == "quoted"
    assert controller.pending_status is None
    assert controller.busy is False
    kind, entry = fake_store.calls[0]
    assert kind == "job"
    assert entry.status == "quoted"
    assert entry.actor_role is ActorRole.mechanic
    assert entry.note == "quote sent"


def test_failed_update_keeps_status_and_alerts(fake_store):
    fake_store.fail = True
    controller = _controller(fake_store, current="accepted")

    result = asyncio.run(controller.request_status_change("in_progress"))

    assert result.outcome is Outcome.failed
    assert result.alert.message == "Failed to update job status"
    assert controller.current_status == "accepted"
    assert controller.pending_status is None
    assert controller.busy is False


def test_busy_while_update_in_flight(fake_store):
    async def scenario():
        fake_store.release = asyncio.Event()
        controller = _controller(fake_store, current="pending")
        task = asyncio.create_task(controller.request_status_change("quoted"))
        await asyncio.sleep(0)
        seen_busy = controller.busy
        seen_pending = controller.pending_status
        shown = controller.status().id
        second = await controller.request_status_change("accepted")
        fake_store.release.set()
        first = await task
        return controller, seen_busy, seen_pending, shown, first, second

    controller, seen_busy, seen_pending, shown, first, second = asyncio.run(scenario())

    assert seen_busy is True
    assert seen_pending == "quoted"
    # the badge keeps showing the confirmed status while the call is pending
    assert shown == "pending"
    assert second.outcome is Outcome.blocked
    assert first.ok
    assert controller.current_status == "quoted"
    assert len(fake_store.calls) == 1


def test_cancelled_goes_through_cancellation_flow(fake_store):
    controller = _controller(fake_store)

    result = asyncio.run(controller.request_status_change("cancelled"))

    assert result.outcome is Outcome.blocked
    assert fake_store.calls == []
    assert "cancelled" not in [s.id for s in controller.options()]


def test_customer_cannot_change_status(fake_store):
    controller = _controller(fake_store, actor=ActorRole.customer)

    result = asyncio.run(controller.request_status_change("quoted"))

    assert result.outcome is Outcome.blocked
    assert controller.options() == []
    assert fake_store.calls == []


def test_unknown_status_is_rejected(fake_store):
    controller = _controller(fake_store)

    result = asyncio.run(controller.request_status_change("teleported"))

    assert result.outcome is Outcome.blocked
    assert fake_store.calls == []


def test_history_toggle_and_order(fake_store):
    history = [
        StatusHistoryEntry("quoted", "2024-03-02T10:00:00+00:00", ActorRole.mechanic),
        StatusHistoryEntry("pending", "2024-03-01T10:00:00+00:00", ActorRole.customer, note="booked"),
    ]
    controller = _controller(fake_store, current="quoted", history=history)

    assert controller.has_history
    assert controller.history() == []
    controller.toggle_history()
    rows = controller.history()

    assert [r.status.id for r in rows] == ["quoted", "pending"]
    assert rows[1].actor == "Customer"
    assert rows[1].note == "booked"
    controller.toggle_history()
    assert controller.history() == []


def test_custom_status_id_generation():
    assert custom_status_id("Waiting On  Parts") == "waiting_on_parts"
    assert custom_status_id("  Road test ") == "road_test"


def test_add_custom_status_persists_and_extends_catalog(fake_store):
    controller = _controller(fake_store, custom_store=fake_store, owner_id="mech-7")

    result = asyncio.run(controller.add_custom_status("Road Test", "Test drive after repair", "#009688"))

    assert result.ok
    assert result.value.id == "road_test"
    assert result.value.is_custom is True
    assert controller.catalog.find("road_test") is not None
    assert [d.id for d in fake_store.customs["mech-7"]] == ["road_test"]
    assert "road_test" in [s.id for s in controller.options()]


def test_add_custom_status_validation(fake_store):
    controller = _controller(fake_store, custom_store=fake_store, owner_id="mech-7")

    empty = asyncio.run(controller.add_custom_status("   "))
    too_long = asyncio.run(controller.add_custom_status("x" * 21))
    bad_color = asyncio.run(controller.add_custom_status("Towing", color="#123456"))

    assert empty.outcome is Outcome.blocked
    assert empty.alert.message == "Status label is required"
    assert too_long.outcome is Outcome.blocked
    assert bad_color.outcome is Outcome.blocked
    assert fake_store.calls == []


def test_add_custom_status_failure_leaves_catalog(fake_store):
    fake_store.fail = True
    controller = _controller(fake_store, custom_store=fake_store, owner_id="mech-7")

    result = asyncio.run(controller.add_custom_status("Towing"))

    assert result.outcome is Outcome.failed
    assert result.alert.message == "Failed to add custom status"
    assert controller.catalog.find("towing") is None
