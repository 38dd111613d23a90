from abc import ABC, abstractmethod

from jobtrack.domain.entities.note import MechanicNote


class NotesStorePort(ABC):
    @abstractmethod
    async def list_notes(self, request_id: str) -> list[MechanicNote]:
        raise NotImplementedError

    @abstractmethod
    async def add_note(self, request_id: str, text: str, created_at: str) -> MechanicNote:
        raise NotImplementedError

    @abstractmethod
    async def delete_note(self, request_id: str, note_id: str) -> bool:
        """Returns False when the note did not exist."""
        raise NotImplementedError
