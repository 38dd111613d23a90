from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from jobtrack.domain.entities.status_definition import StatusDefinition

CANCELLED_STATUS_ID = "cancelled"

FallbackPolicy = Literal["first", "synthesize"]


@dataclass(frozen=True)
class StatusCatalog:
    """Built-in statuses followed by caller-supplied custom ones.

    Duplicate ids are kept as-is; lookups return the first match, so a custom
    entry can never shadow a built-in.
    """

    builtins: tuple[StatusDefinition, ...]
    customs: tuple[StatusDefinition, ...] = ()
    fallback: FallbackPolicy = "first"

    @staticmethod
    def build(
        builtins: Iterable[StatusDefinition],
        customs: Iterable[StatusDefinition] | None = None,
        fallback: FallbackPolicy = "first",
    ) -> "StatusCatalog":
        return StatusCatalog(
            builtins=tuple(builtins),
            customs=tuple(customs or ()),
            fallback=fallback,
        )

    @property
    def entries(self) -> tuple[StatusDefinition, ...]:
        return self.builtins + self.customs

    def find(self, status_id: str) -> StatusDefinition | None:
        for definition in self.entries:
            if definition.id == status_id:
                return definition
        return None

    def resolve(self, status_id: str, fallback: FallbackPolicy | None = None) -> StatusDefinition:
        found = self.find(status_id)
        if found is not None:
            return found
        policy = fallback or self.fallback
        if policy == "first" and self.builtins:
            return self.builtins[0]
        return StatusDefinition.synthesize(status_id)

    def selectable(self) -> list[StatusDefinition]:
        # cancellation goes through its own flow because it needs a reason
        return [s for s in self.entries if s.id != CANCELLED_STATUS_ID]

    def with_custom(self, definition: StatusDefinition) -> "StatusCatalog":
        return StatusCatalog(
            builtins=self.builtins,
            customs=self.customs + (definition,),
            fallback=self.fallback,
        )

    def ids(self) -> list[str]:
        return [s.id for s in self.entries]
