from abc import ABC, abstractmethod

from jobtrack.domain.entities.photo import JobPhoto


class PhotoStorePort(ABC):
    @abstractmethod
    async def list_photos(self, request_id: str) -> list[JobPhoto]:
        raise NotImplementedError

    @abstractmethod
    async def add_photo(
        self,
        request_id: str,
        uri: str,
        category: str,
        caption: str | None,
        timestamp: str,
    ) -> JobPhoto:
        raise NotImplementedError

    @abstractmethod
    async def delete_photo(self, request_id: str, photo_id: str) -> bool:
        raise NotImplementedError
