from __future__ import annotations

from decimal import Decimal
from typing import Sequence
from zoneinfo import ZoneInfo

from jobtrack.application.ports.notifier import NotifierPort
from jobtrack.application.ports.service_request_store import ServiceRequestStorePort
from jobtrack.application.use_cases.status_tracking import StatusTracker
from jobtrack.domain.catalogs import REMINDER_PAYMENT_STATUSES
from jobtrack.domain.entities.action_result import ActionResult, Alert
from jobtrack.domain.entities.actor import ActorRole
from jobtrack.domain.entities.history import StatusHistoryEntry
from jobtrack.domain.entities.service_request import ServiceRequest
from jobtrack.domain.entities.status_catalog import StatusCatalog


class PaymentStatusController(StatusTracker):
    """Payment badge, selector, history and reminder action for one request.

    Unlike the job selector there is no custom status support; the payment
    catalog is fixed. The selected chip is always the confirmed status, so a
    failed update leaves both badge and selector where they were.
    """

    kind = "payment status"
    failure_message = "Failed to update payment status"

    def __init__(
        self,
        request_id: str,
        store: ServiceRequestStorePort,
        notifier: NotifierPort,
        catalog: StatusCatalog,
        current_status: str = "unpaid",
        history: Sequence[StatusHistoryEntry] = (),
        actor: ActorRole = ActorRole.customer,
        timezone: ZoneInfo | None = None,
    ) -> None:
        super().__init__(
            request_id=request_id,
            catalog=catalog,
            current_status=current_status,
            history=history,
            actor=actor,
            timezone=timezone,
        )
        self._store = store
        self._notifier = notifier

    @property
    def selected_status(self) -> str:
        return self.current_status

    async def request_status_change(
        self,
        new_status: str,
        amount: Decimal | None = None,
        note: str | None = None,
    ) -> ActionResult:
        if amount is not None and amount < 0:
            return ActionResult.blocked_with("Amount cannot be negative")
        note_text = (note or "").strip() or None

        def entry(timestamp: str) -> StatusHistoryEntry:
            return StatusHistoryEntry(
                status=new_status,
                timestamp=timestamp,
                actor_role=self.actor,
                note=note_text,
                amount=amount,
            )

        return await self._change(
            new_status,
            entry,
            lambda e: self._store.update_payment_status(self.request_id, e),
        )

    def apply_remote(self, request: ServiceRequest) -> None:
        self.adopt(request.payment_status, request.payment_history)

    def can_send_reminder(self) -> bool:
        return self.actor is ActorRole.mechanic and self.current_status in REMINDER_PAYMENT_STATUSES

    async def send_reminder(self) -> ActionResult:
        if not self.can_send_reminder():
            return ActionResult.blocked_with("A payment reminder cannot be sent for this job")
        if self.busy:
            return ActionResult.blocked_with("An update is already in progress")

        async with self._gate.hold():
            try:
                await self._notifier.send_payment_reminder(self.request_id)
            except Exception as e:
                self._logger.exception(
                    "Error sending payment reminder",
                    extra={"request_id": self.request_id, "error": str(e)},
                )
                return ActionResult.failed_with("Failed to send payment reminder")

        return ActionResult.success(alert=Alert(title="Success", message="Payment reminder sent to customer"))
