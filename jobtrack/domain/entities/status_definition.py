from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StatusDefinition:
    id: str
    label: str
    color: str  # opaque display token, e.g. "#ff9800"
    description: str | None = None
    is_custom: bool = False

    @staticmethod
    def synthesize(status_id: str) -> "StatusDefinition":
        """Best-effort display definition for an id no catalog knows about."""
        raw = status_id or ""
        label = raw[:1].upper() + raw[1:]
        return StatusDefinition(id=raw, label=label, color="")
