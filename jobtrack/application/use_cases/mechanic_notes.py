from __future__ import annotations

import logging
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from jobtrack.application.ports.notes_store import NotesStorePort
from jobtrack.application.utils.busy_gate import BusyGate
from jobtrack.application.utils.display import (
    DEFAULT_PREVIEW_LENGTH,
    ExpansionState,
    format_timestamp,
    needs_expansion,
    truncate_text,
    utc_now_iso,
)
from jobtrack.domain.entities.action_result import ActionResult
from jobtrack.domain.entities.note import MechanicNote


@dataclass(frozen=True)
class NoteView:
    id: str
    text: str
    when: str
    expandable: bool
    expanded: bool


class MechanicNotesController:
    """Private notes visible only to mechanics."""

    def __init__(
        self,
        request_id: str,
        store: NotesStorePort,
        read_only: bool = False,
        timezone: ZoneInfo | None = None,
        preview_length: int = DEFAULT_PREVIEW_LENGTH,
    ) -> None:
        self.request_id = request_id
        self._store = store
        self._read_only = read_only
        self._timezone = timezone
        self._preview_length = preview_length
        self._gate = BusyGate()
        self._expansion = ExpansionState()
        self._logger = logging.getLogger(__name__)

    @property
    def busy(self) -> bool:
        return self._gate.busy

    @property
    def read_only(self) -> bool:
        return self._read_only

    def toggle_note(self, note_id: str) -> None:
        self._expansion.toggle(note_id)

    def render(self, notes: list[MechanicNote]) -> list[NoteView]:
        views: list[NoteView] = []
        for note in notes:
            expanded = self._expansion.is_expanded(note.id)
            views.append(
                NoteView(
                    id=note.id,
                    text=truncate_text(note.text, expanded, self._preview_length),
                    when=format_timestamp(note.created_at, self._timezone),
                    expandable=needs_expansion(note.text, self._preview_length),
                    expanded=expanded,
                )
            )
        return views

    async def list_notes(self) -> list[NoteView]:
        notes = await self._store.list_notes(self.request_id)
        self._expansion.forget(n.id for n in notes)
        return self.render(notes)

    async def add_note(self, text: str) -> ActionResult:
        if self._read_only:
            return ActionResult.blocked_with("Notes are read-only")
        body = (text or "").strip()
        if not body:
            return ActionResult.blocked_with("Note cannot be empty")
        if self.busy:
            return ActionResult.blocked_with("An update is already in progress")

        async with self._gate.hold():
            try:
                note = await self._store.add_note(self.request_id, body, utc_now_iso())
            except Exception as e:
                self._logger.exception("Error adding note", extra={"request_id": self.request_id, "error": str(e)})
                return ActionResult.failed_with("Failed to add note")
        return ActionResult.success(value=note)

    async def delete_note(self, note_id: str) -> ActionResult:
        if self._read_only:
            return ActionResult.blocked_with("Notes are read-only")
        if self.busy:
            return ActionResult.blocked_with("An update is already in progress")

        async with self._gate.hold():
            try:
                deleted = await self._store.delete_note(self.request_id, note_id)
            except Exception as e:
                self._logger.exception("Error deleting note", extra={"request_id": self.request_id, "error": str(e)})
                return ActionResult.failed_with("Failed to delete note")
        if not deleted:
            return ActionResult.nothing()
        return ActionResult.success(value=note_id)
