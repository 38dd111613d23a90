from dataclasses import dataclass


@dataclass(frozen=True)
class MechanicNote:
    id: str
    text: str
    created_at: str  # ISO-8601
