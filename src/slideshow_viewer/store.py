"""ProjectStore protocol — the bookmark persistence abstraction layer."""

from typing import Protocol, runtime_checkable

from slideshow_viewer.models import SlideshowMetadata, StoredProject


@runtime_checkable
class ProjectStore(Protocol):
    def upsert(
        self, metadata: SlideshowMetadata, viewed_at: int | None = None
    ) -> StoredProject: ...

    def get(self, article_id: str) -> StoredProject | None: ...

    def toggle_favorite(self, article_id: str) -> bool: ...

    def get_favorite_flag(self, article_id: str) -> bool: ...

    def list_recents(self, limit: int, offset: int = 0) -> list[StoredProject]: ...

    def list_favorites(self) -> list[StoredProject]: ...


def check_page(limit: int, offset: int) -> None:
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
    if offset < 0:
        raise ValueError(f"offset must be >= 0, got {offset}")
