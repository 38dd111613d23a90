from __future__ import annotations

import re
from typing import Sequence
from zoneinfo import ZoneInfo

from jobtrack.application.ports.custom_status_store import CustomStatusStorePort
from jobtrack.application.ports.service_request_store import ServiceRequestStorePort
from jobtrack.application.use_cases.status_tracking import StatusTracker
from jobtrack.domain.catalogs import COLOR_PALETTE, DEFAULT_CUSTOM_COLOR
from jobtrack.domain.entities.action_result import ActionResult
from jobtrack.domain.entities.actor import ActorRole
from jobtrack.domain.entities.history import StatusHistoryEntry
from jobtrack.domain.entities.service_request import ServiceRequest
from jobtrack.domain.entities.status_catalog import CANCELLED_STATUS_ID, StatusCatalog
from jobtrack.domain.entities.status_definition import StatusDefinition


def custom_status_id(label: str) -> str:
    return re.sub(r"\s+", "_", label.strip().lower())


class JobStatusController(StatusTracker):
    kind = "job status"
    failure_message = "Failed to update job status"

    def __init__(
        self,
        request_id: str,
        store: ServiceRequestStorePort,
        catalog: StatusCatalog,
        current_status: str = "pending",
        history: Sequence[StatusHistoryEntry] = (),
        actor: ActorRole = ActorRole.customer,
        custom_store: CustomStatusStorePort | None = None,
        owner_id: str | None = None,
        timezone: ZoneInfo | None = None,
        label_max: int = 20,
        description_max: int = 100,
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
        self._custom_store = custom_store
        self._owner_id = owner_id
        self._label_max = label_max
        self._description_max = description_max

    def options(self) -> list[StatusDefinition]:
        if self.actor is not ActorRole.mechanic:
            return []
        return self.catalog.selectable()

    def _validate(self, new_status: str) -> str | None:
        if new_status == CANCELLED_STATUS_ID:
            return "Use job cancellation to cancel a job"
        return super()._validate(new_status)

    async def request_status_change(self, new_status: str, note: str | None = None) -> ActionResult:
        note_text = (note or "").strip() or None

        def entry(timestamp: str) -> StatusHistoryEntry:
            return StatusHistoryEntry(
                status=new_status,
                timestamp=timestamp,
                actor_role=self.actor,
                note=note_text,
            )

        return await self._change(
            new_status,
            entry,
            lambda e: self._store.update_job_status(self.request_id, e),
        )

    def apply_remote(self, request: ServiceRequest) -> None:
        self.adopt(request.job_status, request.status_history)

    async def add_custom_status(
        self,
        label: str,
        description: str | None = None,
        color: str = DEFAULT_CUSTOM_COLOR,
    ) -> ActionResult:
        """Create a custom status and persist it to the owner's catalog.

        The id is the lower-cased label with whitespace runs replaced by
        underscores. On success the controller's catalog gains the new entry.
        """
        label_text = (label or "").strip()
        description_text = (description or "").strip() or None

        if self.actor is not ActorRole.mechanic:
            return ActionResult.blocked_with("Only mechanics can create custom statuses")
        if not label_text:
            return ActionResult.blocked_with("Status label is required")
        if len(label_text) > self._label_max:
            return ActionResult.blocked_with(f"Status label must be at most {self._label_max} characters")
        if description_text and len(description_text) > self._description_max:
            return ActionResult.blocked_with(
                f"Description must be at most {self._description_max} characters"
            )
        if color not in COLOR_PALETTE:
            return ActionResult.blocked_with("Please pick one of the available colors")
        if self._custom_store is None or not self._owner_id:
            return ActionResult.blocked_with("Custom statuses are not available for this job")
        if self.busy:
            return ActionResult.blocked_with("An update is already in progress")

        definition = StatusDefinition(
            id=custom_status_id(label_text),
            label=label_text,
            color=color,
            description=description_text,
            is_custom=True,
        )

        async with self._gate.hold():
            try:
                await self._custom_store.add_custom_status(self._owner_id, definition)
            except Exception as e:
                self._logger.exception(
                    "Error adding custom status",
                    extra={"request_id": self.request_id, "status": definition.id, "error": str(e)},
                )
                return ActionResult.failed_with("Failed to add custom status")

        self._catalog = self._catalog.with_custom(definition)
        self._logger.info(
            "Custom status created",
            extra={"request_id": self.request_id, "status": definition.id},
        )
        return ActionResult.success(value=definition)
