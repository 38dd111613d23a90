from __future__ import annotations

import logging
from typing import Sequence

from jobtrack.application.ports.service_request_store import ServiceRequestStorePort
from jobtrack.application.utils.display import utc_now_iso
from jobtrack.domain.entities import cancellation as flow
from jobtrack.domain.entities.action_result import ActionResult
from jobtrack.domain.entities.actor import ActorRole
from jobtrack.domain.entities.cancellation import (
    OTHER_REASON_ID,
    CancellationForm,
    CancellationPhase,
    CancellationReason,
    CancellationRecord,
)

CUSTOMER_NOTICE = "Cancelling a job may affect your ability to quickly reschedule."
MECHANIC_NOTICE = "Please ensure the customer is notified about this cancellation."


class CancelJobController:
    def __init__(
        self,
        request_id: str,
        store: ServiceRequestStorePort,
        reasons: Sequence[CancellationReason],
        actor: ActorRole = ActorRole.customer,
    ) -> None:
        self.request_id = request_id
        self._store = store
        self._reasons = tuple(reasons)
        self._actor = actor
        self._form = CancellationForm()
        self._logger = logging.getLogger(__name__)

    @property
    def form(self) -> CancellationForm:
        return self._form

    @property
    def phase(self) -> CancellationPhase:
        return self._form.phase

    @property
    def is_open(self) -> bool:
        return self._form.is_open

    @property
    def busy(self) -> bool:
        return self._form.phase is CancellationPhase.confirming

    @property
    def reasons(self) -> tuple[CancellationReason, ...]:
        return self._reasons

    def notice(self) -> str:
        return CUSTOMER_NOTICE if self._actor is ActorRole.customer else MECHANIC_NOTICE

    def can_submit(self) -> bool:
        return flow.can_submit(self._form)

    def open(self) -> None:
        self._form = flow.open_form()

    def close(self) -> None:
        self._form = flow.close_form()

    def select_reason(self, reason_id: str) -> None:
        if not self._form.is_open:
            self.open()
        self._form = flow.select_reason(self._form, reason_id, [r.id for r in self._reasons])

    def set_other_text(self, text: str) -> None:
        self._form = flow.edit_other_text(self._form, text)

    def _reason_text(self) -> str:
        if self._form.reason_id == OTHER_REASON_ID:
            return self._form.other_text.strip()
        for reason in self._reasons:
            if reason.id == self._form.reason_id:
                return reason.label
        return self._form.reason_id or ""

    async def submit(self) -> ActionResult:
        if self.busy:
            return ActionResult.blocked_with("Cancellation is already being submitted")
        blocked = flow.blocked_reason(self._form)
        if blocked:
            return ActionResult.blocked_with(blocked)

        record = CancellationRecord(
            reason_id=self._form.reason_id or "",
            reason_text=self._reason_text(),
            cancelled_by=self._actor,
            cancelled_at=utc_now_iso(),
        )

        self._form = flow.begin_submit(self._form)
        try:
            await self._store.cancel_job(self.request_id, record)
        except Exception as e:
            self._form = flow.submit_failed(self._form)
            self._logger.exception(
                "Error cancelling job",
                extra={"request_id": self.request_id, "reason": record.reason_id, "error": str(e)},
            )
            return ActionResult.failed_with("Failed to cancel job. Please try again.")

        self._form = flow.close_form()
        self._logger.info(
            "Job cancelled",
            extra={"request_id": self.request_id, "reason": record.reason_id, "actor": self._actor.value},
        )
        return ActionResult.success(value=record)
