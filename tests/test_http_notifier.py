from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from jobtrack.application.exceptions import NotifierError
from jobtrack.infrastructure.notify.http_notifier import HttpReminderNotifier


def _notifier(handler) -> HttpReminderNotifier:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return HttpReminderNotifier(endpoint="https://hooks.example.test/reminders", token="s3cret", client=client)


def test_posts_reminder_with_bearer_token():
    captured: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(202, json={"queued": True})

    asyncio.run(_notifier(handler).send_payment_reminder("req-42"))

    assert captured[0].headers["Authorization"] == "Bearer s3cret"
    assert json.loads(captured[0].content) == {"type": "payment_reminder", "request_id": "req-42"}


def test_error_status_raises_notifier_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"error": "queue full"})

    with pytest.raises(NotifierError):
        asyncio.run(_notifier(handler).send_payment_reminder("req-42"))


def test_transport_error_raises_notifier_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(NotifierError):
        asyncio.run(_notifier(handler).send_payment_reminder("req-42"))


def test_non_object_error_body_raises_notifier_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json=["queue", "full"])

    with pytest.raises(NotifierError):
        asyncio.run(_notifier(handler).send_payment_reminder("req-42"))
