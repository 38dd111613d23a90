from dataclasses import dataclass


@dataclass(frozen=True)
class PhotoCategory:
    id: str
    label: str
    color: str


@dataclass(frozen=True)
class JobPhoto:
    id: str
    uri: str
    category: str
    timestamp: str  # ISO-8601
    caption: str | None = None
