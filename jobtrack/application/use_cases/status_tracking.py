from __future__ import annotations

import logging
from typing import Awaitable, Callable, Sequence
from zoneinfo import ZoneInfo

from jobtrack.application.utils.busy_gate import BusyGate
from jobtrack.application.utils.display import HistoryRow, render_history, utc_now_iso
from jobtrack.domain.entities import transition
from jobtrack.domain.entities.action_result import ActionResult
from jobtrack.domain.entities.actor import ActorRole
from jobtrack.domain.entities.history import StatusHistoryEntry
from jobtrack.domain.entities.status_catalog import StatusCatalog
from jobtrack.domain.entities.status_definition import StatusDefinition
from jobtrack.domain.entities.transition import StatusTransition

Persist = Callable[[StatusHistoryEntry], Awaitable[None]]


class StatusTracker:
    """Shared state for a status badge with a selector and a collapsible history.

    Subclasses supply the catalog and the persist call; this class owns the
    busy gate, the confirmed/pending transition and the history toggle.
    """

    kind = "status"
    failure_message = "Failed to update status"

    def __init__(
        self,
        request_id: str,
        catalog: StatusCatalog,
        current_status: str,
        history: Sequence[StatusHistoryEntry] = (),
        actor: ActorRole = ActorRole.customer,
        timezone: ZoneInfo | None = None,
    ) -> None:
        self.request_id = request_id
        self._catalog = catalog
        self._state = StatusTransition(confirmed=current_status)
        self._history = tuple(history)
        self._actor = actor
        self._timezone = timezone
        self._gate = BusyGate()
        self._history_expanded = False
        self._logger = logging.getLogger(self.__class__.__module__)

    @property
    def catalog(self) -> StatusCatalog:
        return self._catalog

    @property
    def actor(self) -> ActorRole:
        return self._actor

    @property
    def current_status(self) -> str:
        return self._state.confirmed

    @property
    def pending_status(self) -> str | None:
        return self._state.pending

    @property
    def busy(self) -> bool:
        return self._gate.busy

    def status(self) -> StatusDefinition:
        return self._catalog.resolve(self._state.confirmed)

    def options(self) -> list[StatusDefinition]:
        if self._actor is not ActorRole.mechanic:
            return []
        return list(self._catalog.entries)

    @property
    def history_expanded(self) -> bool:
        return self._history_expanded

    @property
    def has_history(self) -> bool:
        return bool(self._history)

    def toggle_history(self) -> bool:
        self._history_expanded = not self._history_expanded
        return self._history_expanded

    def history(self, include_collapsed: bool = False) -> list[HistoryRow]:
        if not self._history_expanded and not include_collapsed:
            return []
        return render_history(self._history, self._catalog, self._timezone)

    def adopt(self, confirmed_status: str, history: Sequence[StatusHistoryEntry]) -> None:
        self._state = transition.adopt(self._state, confirmed_status)
        self._history = tuple(history)

    def _validate(self, new_status: str) -> str | None:
        if self._actor is not ActorRole.mechanic:
            return f"Only mechanics can update the {self.kind}"
        if self._catalog.find(new_status) is None:
            return f"Unknown {self.kind}: {new_status}"
        return None

    async def _change(self, new_status: str, entry_factory: Callable[[str], StatusHistoryEntry], persist: Persist) -> ActionResult:
        if new_status == self._state.confirmed:
            return ActionResult.nothing()

        error = self._validate(new_status)
        if error:
            return ActionResult.blocked_with(error)
        if self._gate.busy:
            return ActionResult.blocked_with("An update is already in progress")

        entry = entry_factory(utc_now_iso())
        async with self._gate.hold():
            self._state = transition.request(self._state, new_status)
            try:
                await persist(entry)
            except Exception as e:
                self._state = transition.reject(self._state)
                self._logger.exception(
                    "Error updating %s",
                    self.kind,
                    extra={"request_id": self.request_id, "status": new_status, "error": str(e)},
                )
                return ActionResult.failed_with(self.failure_message)

            self._state = transition.confirm(self._state)

        self._logger.info(
            "%s updated",
            self.kind.capitalize(),
            extra={"request_id": self.request_id, "status": new_status, "actor": self._actor.value},
        )
        return ActionResult.success(value=self.status())
