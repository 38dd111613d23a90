"""
Tests for the cancellation state machine and its controller.
"""

from __future__ import annotations

import asyncio

import pytest

from jobtrack.application.use_cases.cancel_job import CUSTOMER_NOTICE, MECHANIC_NOTICE, CancelJobController
from jobtrack.domain.catalogs import CANCEL_REASONS
from jobtrack.domain.entities import cancellation as flow
from jobtrack.domain.entities.action_result import Outcome
from jobtrack.domain.entities.actor import ActorRole
from jobtrack.domain.entities.cancellation import CancellationPhase

REASON_IDS = [r.id for r in CANCEL_REASONS]


def test_submission_gate():
    """Blocked with no reason, open for a fixed reason, blocked for 'other' until text is given."""
    form = flow.open_form()
    assert form.phase is CancellationPhase.reason_selection
    assert not flow.can_submit(form)

    form = flow.select_reason(form, "cost_concerns", REASON_IDS)
    assert flow.can_submit(form)

    form = flow.select_reason(form, "other", REASON_IDS)
    assert form.phase is CancellationPhase.other_reason_entry
    assert not flow.can_submit(form)

    form = flow.edit_other_text(form, "   ")
    assert not flow.can_submit(form)

    form = flow.edit_other_text(form, "moved away")
    assert flow.can_submit(form)


def test_unknown_reason_raises():
    with pytest.raises(ValueError):
        flow.select_reason(flow.open_form(), "aliens", REASON_IDS)


def test_confirming_cannot_resubmit():
    form = flow.select_reason(flow.open_form(), "vehicle_fixed", REASON_IDS)
    confirming = flow.begin_submit(form)

    assert confirming.phase is CancellationPhase.confirming
    assert not flow.can_submit(confirming)
    assert flow.submit_failed(confirming) == form


def _controller(store, actor=ActorRole.customer) -> CancelJobController:
    return CancelJobController(request_id="req-3", store=store, reasons=CANCEL_REASONS, actor=actor)


def test_customer_other_with_empty_text_stays_blocked(fake_store):
    controller = _controller(fake_store)
    controller.open()
    controller.select_reason("other")

    result = asyncio.run(controller.submit())

    assert not controller.can_submit()
    assert result.outcome is Outcome.blocked
    assert result.alert.message == "Please provide details for your cancellation reason"
    assert fake_store.calls == []
    assert controller.is_open


def test_no_reason_alert(fake_store):
    controller = _controller(fake_store)
    controller.open()

    result = asyncio.run(controller.submit())

    assert result.alert.message == "Please select a cancellation reason"


def test_success_resets_and_closes(fake_store):
    controller = _controller(fake_store, actor=ActorRole.mechanic)
    controller.open()
    controller.select_reason("other")
    controller.set_other_text("  customer unreachable ")

    result = asyncio.run(controller.submit())

    assert result.ok
    record = fake_store.calls[0][1]
    assert record.reason_id == "other"
    assert record.reason_text == "customer unreachable"
    assert record.cancelled_by is ActorRole.mechanic
    assert record.cancelled_at
    assert controller.phase is CancellationPhase.idle
    assert controller.form.reason_id is None
    assert controller.form.other_text == ""


def test_fixed_reason_uses_label(fake_store):
    controller = _controller(fake_store)
    controller.open()
    controller.select_reason("found_another_mechanic")

    asyncio.run(controller.submit())

    assert fake_store.calls[0][1].reason_text == "Found Another Mechanic"
    assert fake_store.calls[0][1].cancelled_by is ActorRole.customer


def test_failure_preserves_fields(fake_store):
    fake_store.fail = True
    controller = _controller(fake_store)
    controller.open()
    controller.select_reason("other")
    controller.set_other_text("too expensive overall")

    result = asyncio.run(controller.submit())

    assert result.outcome is Outcome.failed
    assert result.alert.message == "Failed to cancel job. Please try again."
    assert controller.is_open
    assert controller.phase is CancellationPhase.other_reason_entry
    assert controller.form.reason_id == "other"
    assert controller.form.other_text == "too expensive overall"


def test_close_discards_without_prompt(fake_store):
    controller = _controller(fake_store)
    controller.open()
    controller.select_reason("schedule_conflict")

    controller.close()

    assert controller.phase is CancellationPhase.idle
    assert controller.form.reason_id is None


def test_notice_depends_on_role(fake_store):
    assert _controller(fake_store).notice() == CUSTOMER_NOTICE
    assert _controller(fake_store, actor=ActorRole.mechanic).notice() == MECHANIC_NOTICE
