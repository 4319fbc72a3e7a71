"""Turn a user-supplied URL into a slideshow page address plus article id and nonce."""

import logging
import re
from urllib.parse import urlsplit

import requests

from slideshow_viewer.config import Settings
from slideshow_viewer.errors import MissingInputError, NonceNotFoundError
from slideshow_viewer.fetch import fetch_text, new_session
from slideshow_viewer.models import Resolution, build_slideshow_url

logger = logging.getLogger(__name__)

NONCE_PATTERN = re.compile(r"#newsroom-picture-att-id-([0-9a-fA-F]+)")

DIRECT = "direct"
BARE = "bare"
INVALID = "invalid"


def normalize_url(url: str) -> str:
    """Add https:// to scheme-less input; reject schemes other than http(s)."""
    url = (url or "").strip()
    if not url:
        raise MissingInputError("URL is required")
    if "://" not in url:
        url = "https://" + url.lstrip("/")
    if urlsplit(url).scheme.lower() not in ("http", "https"):
        raise MissingInputError(f"URL must use http or https: {url}")
    return url


def path_segments(url: str) -> list[str]:
    return [part for part in urlsplit(normalize_url(url)).path.split("/") if part]


def classify_url(url: str) -> str:
    """DIRECT for /<articleId>/<slug>/<nonce>-..., BARE for /<articleId>/<slug>, else INVALID."""
    count = len(path_segments(url))
    if count >= 3:
        return DIRECT
    if count == 2:
        return BARE
    return INVALID


def nonce_from_segment(segment: str) -> str:
    return segment.split("-", 1)[0]


def find_nonce(html: str) -> str | None:
    match = NONCE_PATTERN.search(html)
    return match.group(1) if match else None


def resolve_direct(url: str) -> Resolution:
    """Read article id and nonce straight from the path; no network."""
    segments = path_segments(url)
    return Resolution(
        slideshow_url=url,
        article_id=segments[0],
        nonce=nonce_from_segment(segments[-1]),
    )


def resolve(
    url: str,
    *,
    session: requests.Session | None = None,
    settings: Settings | None = None,
) -> Resolution:
    settings = settings or Settings()
    url = normalize_url(url)

    kind = classify_url(url)
    logger.debug("Classified %s as %s", url, kind)

    if kind == DIRECT:
        return resolve_direct(url)
    if kind == INVALID:
        raise MissingInputError(
            f"URL must point to an article (/<articleId>/<slug>): {url}"
        )

    article_id = path_segments(url)[0]
    html = fetch_text(url, session or new_session(settings), settings.timeout)
    nonce = find_nonce(html)
    if nonce is None:
        raise NonceNotFoundError("Slideshow nonce not found in article page")

    return Resolution(
        slideshow_url=build_slideshow_url(article_id, nonce, settings.site),
        article_id=article_id,
        nonce=nonce,
    )
