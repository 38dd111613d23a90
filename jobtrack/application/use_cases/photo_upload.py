from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence
from zoneinfo import ZoneInfo

from jobtrack.application.ports.photo_store import PhotoStorePort
from jobtrack.application.utils.busy_gate import BusyGate
from jobtrack.application.utils.display import format_timestamp, utc_now_iso
from jobtrack.domain.entities.action_result import ActionResult
from jobtrack.domain.entities.photo import JobPhoto, PhotoCategory


@dataclass(frozen=True)
class PhotoView:
    id: str
    uri: str
    category: PhotoCategory
    caption: str | None
    when: str


class PhotoUploadController:
    def __init__(
        self,
        request_id: str,
        store: PhotoStorePort,
        categories: Sequence[PhotoCategory],
        read_only: bool = False,
        timezone: ZoneInfo | None = None,
    ) -> None:
        self.request_id = request_id
        self._store = store
        self._categories = tuple(categories)
        self._read_only = read_only
        self._timezone = timezone
        self._gate = BusyGate()
        self._selected_category: str | None = self._categories[0].id if self._categories else None
        self._caption = ""
        self._logger = logging.getLogger(__name__)

    @property
    def busy(self) -> bool:
        return self._gate.busy

    @property
    def selected_category(self) -> str | None:
        return self._selected_category

    @property
    def caption(self) -> str:
        return self._caption

    def select_category(self, category_id: str | None) -> None:
        if category_id is not None and category_id not in {c.id for c in self._categories}:
            raise ValueError(f"Unknown photo category: {category_id}")
        self._selected_category = category_id

    def set_caption(self, text: str) -> None:
        self._caption = text or ""

    def category_for(self, category_id: str | None) -> PhotoCategory:
        for category in self._categories:
            if category.id == category_id:
                return category
        # unknown categories display as the last one ("Other")
        return self._categories[-1]

    def render(self, photos: Sequence[JobPhoto]) -> list[PhotoView]:
        return [
            PhotoView(
                id=p.id,
                uri=p.uri,
                category=self.category_for(p.category),
                caption=p.caption,
                when=format_timestamp(p.timestamp, self._timezone),
            )
            for p in photos
        ]

    async def list_photos(self) -> list[PhotoView]:
        return self.render(await self._store.list_photos(self.request_id))

    async def upload(self, uri: str) -> ActionResult:
        if self._read_only:
            return ActionResult.blocked_with("Photos are read-only")
        if not self._selected_category:
            return ActionResult.blocked_with("Please select a category for the photo")
        if not (uri or "").strip():
            return ActionResult.blocked_with("Please choose a photo to upload")
        if self.busy:
            return ActionResult.blocked_with("An upload is already in progress")

        async with self._gate.hold():
            try:
                photo = await self._store.add_photo(
                    self.request_id,
                    uri=uri.strip(),
                    category=self._selected_category,
                    caption=self._caption.strip() or None,
                    timestamp=utc_now_iso(),
                )
            except Exception as e:
                self._logger.exception("Error uploading photo", extra={"request_id": self.request_id, "error": str(e)})
                return ActionResult.failed_with("Failed to upload photo")

        self._caption = ""
        return ActionResult.success(value=photo)

    async def delete_photo(self, photo_id: str) -> ActionResult:
        if self._read_only:
            return ActionResult.blocked_with("Photos are read-only")
        if self.busy:
            return ActionResult.blocked_with("An upload is already in progress")

        async with self._gate.hold():
            try:
                deleted = await self._store.delete_photo(self.request_id, photo_id)
            except Exception as e:
                self._logger.exception("Error deleting photo", extra={"request_id": self.request_id, "error": str(e)})
                return ActionResult.failed_with("Failed to delete photo")
        if not deleted:
            return ActionResult.nothing()
        return ActionResult.success(value=photo_id)
