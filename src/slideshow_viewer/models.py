"""Dataclasses for slideshow images, metadata and stored bookmarks."""

import dataclasses
import time

from slideshow_viewer.errors import MissingInputError

DEFAULT_SITE = "www.archdaily.com"


@dataclasses.dataclass(frozen=True)
class SlideImage:
    """A single image of a slideshow, normalized from the page payload."""

    url_large: str
    url_medium: str
    image_alt: str
    caption: str

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    @classmethod
    def from_payload(cls, item: dict) -> "SlideImage":
        """Build from one element of the data-images array. Absent fields become ""."""
        return cls(
            url_large=_text(item.get("url_large")),
            url_medium=_text(item.get("url_medium")),
            image_alt=_text(item.get("image_alt")),
            caption=_text(item.get("caption")),
        )


@dataclasses.dataclass(frozen=True)
class SlideshowMetadata:
    """Identifies one slideshow: the article it belongs to and its image-set nonce."""

    article_id: str
    nonce: str
    title: str
    thumbnail: str

    def to_dict(self) -> dict:
        return {
            "articleId": self.article_id,
            "nonce": self.nonce,
            "title": self.title,
            "thumbnail": self.thumbnail,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "SlideshowMetadata":
        return cls(
            article_id=d["articleId"],
            nonce=d["nonce"],
            title=d.get("title", ""),
            thumbnail=d.get("thumbnail", ""),
        )


@dataclasses.dataclass(frozen=True)
class Slideshow:
    images: list[SlideImage]
    metadata: SlideshowMetadata

    def to_dict(self) -> dict:
        return {
            "images": [image.to_dict() for image in self.images],
            "metadata": self.metadata.to_dict(),
        }


@dataclasses.dataclass(frozen=True)
class Resolution:
    """Where a user-supplied URL leads: the slideshow page plus its identifiers."""

    slideshow_url: str
    article_id: str
    nonce: str


@dataclasses.dataclass
class StoredProject:
    """A bookmarked slideshow, keyed by article_id."""

    article_id: str
    nonce: str
    title: str
    thumbnail: str
    viewed_at: int
    is_favorite: bool = False

    def to_dict(self) -> dict:
        return {
            "articleId": self.article_id,
            "nonce": self.nonce,
            "title": self.title,
            "thumbnail": self.thumbnail,
            "viewedAt": self.viewed_at,
            "isFavorite": self.is_favorite,
        }

    @classmethod
    def from_metadata(
        cls, metadata: SlideshowMetadata, viewed_at: int, is_favorite: bool = False
    ) -> "StoredProject":
        return cls(
            article_id=metadata.article_id,
            nonce=metadata.nonce,
            title=metadata.title,
            thumbnail=metadata.thumbnail,
            viewed_at=viewed_at,
            is_favorite=is_favorite,
        )


def _text(value) -> str:
    if value is None:
        return ""
    return str(value)


def now_millis() -> int:
    return int(time.time() * 1000)


def build_slideshow_url(article_id: str, nonce: str, site: str = DEFAULT_SITE) -> str:
    """Canonical slideshow address, e.g. https://www.archdaily.com/1002775/0/6492388b5921185aa0184e61"""
    return f"https://{site}/{article_id}/0/{nonce}"


def make_share_token(article_id: str, nonce: str) -> str:
    return f"{article_id}-{nonce}"


def parse_share_token(token: str) -> tuple[str, str]:
    """Split a share token "<articleId>-<nonce>" at its first hyphen."""
    article_id, _, nonce = (token or "").strip().partition("-")
    if not article_id or not nonce:
        raise MissingInputError(f"Invalid share token: {token!r}")
    return article_id, nonce
