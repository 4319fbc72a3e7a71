"""In-process ProjectStore, for tests and throwaway sessions."""

import dataclasses
import threading

from slideshow_viewer.models import SlideshowMetadata, StoredProject, now_millis
from slideshow_viewer.store import check_page


class InMemoryProjectStore:
    def __init__(self) -> None:
        self._projects: dict[str, StoredProject] = {}
        self._lock = threading.Lock()

    def upsert(
        self, metadata: SlideshowMetadata, viewed_at: int | None = None
    ) -> StoredProject:
        with self._lock:
            existing = self._projects.get(metadata.article_id)
            project = StoredProject.from_metadata(
                metadata,
                viewed_at=now_millis() if viewed_at is None else viewed_at,
                is_favorite=existing.is_favorite if existing else False,
            )
            self._projects[metadata.article_id] = project
            return dataclasses.replace(project)

    def get(self, article_id: str) -> StoredProject | None:
        with self._lock:
            project = self._projects.get(article_id)
            return dataclasses.replace(project) if project else None

    def toggle_favorite(self, article_id: str) -> bool:
        with self._lock:
            project = self._projects.get(article_id)
            if project is None:
                return False
            project.is_favorite = not project.is_favorite
            return project.is_favorite

    def get_favorite_flag(self, article_id: str) -> bool:
        with self._lock:
            project = self._projects.get(article_id)
            return bool(project and project.is_favorite)

    def _ordered(self) -> list[StoredProject]:
        return sorted(
            (dataclasses.replace(p) for p in self._projects.values()),
            key=lambda p: p.viewed_at,
            reverse=True,
        )

    def list_recents(self, limit: int, offset: int = 0) -> list[StoredProject]:
        check_page(limit, offset)
        with self._lock:
            return self._ordered()[offset : offset + limit]

    def list_favorites(self) -> list[StoredProject]:
        with self._lock:
            return [p for p in self._ordered() if p.is_favorite]
