from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StatusTransition:
    """Confirmed backend status plus the transition currently in flight.

    The displayed status always derives from ``confirmed``; ``pending`` only
    drives the busy indicator and is never shown as the current status.
    """

    confirmed: str
    pending: str | None = None

    @property
    def in_flight(self) -> bool:
        return self.pending is not None


def request(state: StatusTransition, new_status: str) -> StatusTransition:
    if new_status == state.confirmed:
        return state
    return StatusTransition(confirmed=state.confirmed, pending=new_status)


def confirm(state: StatusTransition) -> StatusTransition:
    if state.pending is None:
        return state
    return StatusTransition(confirmed=state.pending)


def reject(state: StatusTransition) -> StatusTransition:
    return StatusTransition(confirmed=state.confirmed)


def adopt(state: StatusTransition, remote_status: str) -> StatusTransition:
    """Take a status confirmed elsewhere (feed update), keeping any in-flight request."""
    return StatusTransition(confirmed=remote_status, pending=state.pending)
