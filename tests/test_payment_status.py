"""
Tests for the payment status tracker.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal

from jobtrack.application.use_cases.payment_status import PaymentStatusController
from jobtrack.domain.catalogs import payment_catalog
from jobtrack.domain.entities.action_result import Outcome
from jobtrack.domain.entities.actor import ActorRole
from jobtrack.domain.entities.history import StatusHistoryEntry


def _controller(store, notifier, current="unpaid", actor=ActorRole.mechanic, history=()) -> PaymentStatusController:
    return PaymentStatusController(
        request_id="req-9",
        store=store,
        notifier=notifier,
        catalog=payment_catalog(),
        current_status=current,
        history=history,
        actor=actor,
    )


def test_unpaid_to_paid(fake_store, fake_notifier):
    controller = _controller(fake_store, fake_notifier)

    result = asyncio.run(controller.request_status_change("paid", amount=Decimal("120.5")))

    assert result.ok
    assert controller.current_status == "paid"
    assert controller.busy is False
    kind, entry = fake_store.calls[0]
    assert kind == "payment"
    assert entry.amount == Decimal("120.5")


def test_failure_does_not_desync_selected_status(fake_store, fake_notifier):
    """The selected chip follows the confirmed status, even after a failed update."""
    fake_store.fail = True
    controller = _controller(fake_store, fake_notifier, current="unpaid")

    result = asyncio.run(controller.request_status_change("paid"))

    assert result.outcome is Outcome.failed
    assert result.alert.message == "Failed to update payment status"
    assert controller.current_status == "unpaid"
    assert controller.selected_status == "unpaid"
    assert controller.status().id == "unpaid"


def test_same_payment_status_is_noop(fake_store, fake_notifier):
    controller = _controller(fake_store, fake_notifier, current="partial")

    result = asyncio.run(controller.request_status_change("partial"))

    assert result.outcome is Outcome.noop
    assert fake_store.calls == []


def test_negative_amount_blocked(fake_store, fake_notifier):
    controller = _controller(fake_store, fake_notifier)

    result = asyncio.run(controller.request_status_change("partial", amount=Decimal("-1")))

    assert result.outcome is Outcome.blocked
    assert fake_store.calls == []


def test_reminder_only_for_unpaid_or_partial(fake_store, fake_notifier):
    assert _controller(fake_store, fake_notifier, current="unpaid").can_send_reminder()
    assert _controller(fake_store, fake_notifier, current="partial").can_send_reminder()
    assert not _controller(fake_store, fake_notifier, current="paid").can_send_reminder()
    assert not _controller(fake_store, fake_notifier, actor=ActorRole.customer).can_send_reminder()

    blocked = asyncio.run(_controller(fake_store, fake_notifier, current="refunded").send_reminder())
    assert blocked.outcome is Outcome.blocked
    assert fake_notifier.sent == []


def test_send_reminder(fake_store, fake_notifier):
    controller = _controller(fake_store, fake_notifier, current="partial")

    result = asyncio.run(controller.send_reminder())

    assert result.ok
    assert result.alert.message == "Payment reminder sent to customer"
    assert fake_notifier.sent == ["req-9"]
    assert controller.busy is False


def test_send_reminder_failure(fake_store, fake_notifier):
    fake_notifier.fail = True
    controller = _controller(fake_store, fake_notifier)

    result = asyncio.run(controller.send_reminder())

    assert result.outcome is Outcome.failed
    assert result.alert.message == "Failed to send payment reminder"
    assert controller.busy is False


def test_payment_history_amounts(fake_store, fake_notifier):
    history = [
        StatusHistoryEntry("partial", "2024-05-01T12:00:00+00:00", ActorRole.mechanic, amount=Decimal("50")),
        StatusHistoryEntry("mystery", "2024-05-02T12:00:00+00:00", ActorRole.mechanic),
    ]
    controller = _controller(fake_store, fake_notifier, current="partial", history=history)
    controller.toggle_history()

    rows = controller.history()

    assert rows[0].amount == "$50.00"
    assert rows[0].status.label == "Partially Paid"
    assert rows[1].amount is None
    assert rows[1].status.label == "Mystery"
