from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from jobtrack.domain.entities.actor import ActorRole

OTHER_REASON_ID = "other"


@dataclass(frozen=True)
class CancellationReason:
    id: str
    label: str


@dataclass(frozen=True)
class CancellationRecord:
    reason_id: str
    reason_text: str
    cancelled_by: ActorRole
    cancelled_at: str  # ISO-8601


class CancellationPhase(str, Enum):
    idle = "idle"
    reason_selection = "reason_selection"
    other_reason_entry = "other_reason_entry"
    confirming = "confirming"


@dataclass(frozen=True)
class CancellationForm:
    phase: CancellationPhase = CancellationPhase.idle
    reason_id: str | None = None
    other_text: str = ""

    @property
    def is_open(self) -> bool:
        return self.phase is not CancellationPhase.idle


def open_form() -> CancellationForm:
    return CancellationForm(phase=CancellationPhase.reason_selection)


def close_form() -> CancellationForm:
    return CancellationForm()


def _selection_phase(reason_id: str | None) -> CancellationPhase:
    if reason_id == OTHER_REASON_ID:
        return CancellationPhase.other_reason_entry
    return CancellationPhase.reason_selection


def select_reason(
    form: CancellationForm,
    reason_id: str,
    known_ids: tuple[str, ...] | list[str],
) -> CancellationForm:
    if reason_id not in known_ids:
        raise ValueError(f"Unknown cancellation reason: {reason_id}")
    return CancellationForm(
        phase=_selection_phase(reason_id),
        reason_id=reason_id,
        other_text=form.other_text,
    )


def edit_other_text(form: CancellationForm, text: str) -> CancellationForm:
    return CancellationForm(phase=form.phase, reason_id=form.reason_id, other_text=text or "")


def can_submit(form: CancellationForm) -> bool:
    if form.phase is CancellationPhase.confirming or not form.reason_id:
        return False
    if form.reason_id == OTHER_REASON_ID:
        return bool(form.other_text.strip())
    return True


def blocked_reason(form: CancellationForm) -> str | None:
    """User-facing message explaining why submission is blocked, if it is."""
    if not form.reason_id:
        return "Please select a cancellation reason"
    if form.reason_id == OTHER_REASON_ID and not form.other_text.strip():
        return "Please provide details for your cancellation reason"
    return None


def begin_submit(form: CancellationForm) -> CancellationForm:
    return CancellationForm(
        phase=CancellationPhase.confirming,
        reason_id=form.reason_id,
        other_text=form.other_text,
    )


def submit_failed(form: CancellationForm) -> CancellationForm:
    # selections survive so the user can retry
    return CancellationForm(
        phase=_selection_phase(form.reason_id),
        reason_id=form.reason_id,
        other_text=form.other_text,
    )
