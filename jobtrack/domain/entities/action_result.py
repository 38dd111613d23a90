from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Outcome(str, Enum):
    ok = "ok"
    noop = "noop"
    blocked = "blocked"  # validation failed, nothing was called
    failed = "failed"  # external call raised


@dataclass(frozen=True)
class Alert:
    title: str
    message: str


@dataclass(frozen=True)
class ActionResult:
    outcome: Outcome
    alert: Alert | None = None
    value: Any = None
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.ok

    @staticmethod
    def success(value: Any = None, alert: Alert | None = None) -> "ActionResult":
        return ActionResult(outcome=Outcome.ok, value=value, alert=alert)

    @staticmethod
    def nothing() -> "ActionResult":
        return ActionResult(outcome=Outcome.noop)

    @staticmethod
    def blocked_with(message: str, title: str = "Error") -> "ActionResult":
        return ActionResult(outcome=Outcome.blocked, alert=Alert(title=title, message=message))

    @staticmethod
    def failed_with(message: str, title: str = "Error") -> "ActionResult":
        return ActionResult(outcome=Outcome.failed, alert=Alert(title=title, message=message))
