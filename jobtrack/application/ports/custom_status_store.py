from __future__ import annotations

from abc import ABC, abstractmethod

from jobtrack.domain.entities.status_definition import StatusDefinition


class CustomStatusStorePort(ABC):
    @abstractmethod
    async def list_custom_statuses(self, owner_id: str) -> list[StatusDefinition]:
        raise NotImplementedError

    @abstractmethod
    async def add_custom_status(self, owner_id: str, definition: StatusDefinition) -> None:
        raise NotImplementedError
