"""Pull the embedded image list and page metadata out of a slideshow page."""

import json
import logging
import re

import requests
from bs4 import BeautifulSoup

from slideshow_viewer.config import Settings
from slideshow_viewer.errors import (
    AttributeValueError,
    DataAttributeNotFoundError,
    MalformedPayloadError,
)
from slideshow_viewer.fetch import fetch_text, new_session
from slideshow_viewer.models import SlideImage, Slideshow, SlideshowMetadata

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Slideshow"

# The attribute sits on a line of its own in the page markup.
DATA_IMAGES_LINE = re.compile(r"^[ \t]*(data-images=.*?)[ \t\r]*$", re.MULTILINE)
DATA_IMAGES_VALUE = re.compile(r'data-images="([^"]*)"')
ENTITY = re.compile(r"&[a-z]+;|&#\d+;")
TITLE_SUFFIX = re.compile(r"\s+-\s+\d+$")

NAMED_ENTITIES = {
    "&quot;": '"',
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&#39;": "'",
    "&apos;": "'",
}


def _replace_entity(match: re.Match) -> str:
    token = match.group(0)
    if token in NAMED_ENTITIES:
        return NAMED_ENTITIES[token]
    if token.startswith("&#"):
        code_point = int(token[2:-1])
        # Surrogates and out-of-range code points stay encoded.
        if code_point > 0x10FFFF or 0xD800 <= code_point <= 0xDFFF:
            return token
        return chr(code_point)
    return token


def decode_html_entities(text: str) -> str:
    """Decode &quot; &amp; &lt; &gt; &#39; &apos; and &#NNN;. Unknown named entities are kept."""
    return ENTITY.sub(_replace_entity, text)


def find_data_images(html: str) -> str:
    """Return the raw (still entity-encoded) data-images value."""
    line = DATA_IMAGES_LINE.search(html)
    if line is None:
        raise DataAttributeNotFoundError("data-images attribute not found in HTML")
    value = DATA_IMAGES_VALUE.search(line.group(1))
    if value is None or not value.group(1):
        raise AttributeValueError("Failed to extract data-images value")
    return value.group(1)


def parse_images(raw: str) -> list[dict]:
    try:
        payload = json.loads(decode_html_entities(raw))
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(f"data-images is not valid JSON: {e}") from e
    if not isinstance(payload, list):
        raise MalformedPayloadError("data-images is not a JSON array")
    for item in payload:
        if not isinstance(item, dict):
            raise MalformedPayloadError("data-images contains a non-object entry")
    return payload


def extract_title(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    if soup.title is None:
        return DEFAULT_TITLE
    title = TITLE_SUFFIX.sub("", soup.title.get_text(strip=True))
    return title or DEFAULT_TITLE


def pick_thumbnail(items: list[dict]) -> str:
    if not items:
        return ""
    first = items[0]
    return str(first.get("url_medium") or first.get("url_slideshow") or "")


def parse_slideshow_html(html: str, *, article_id: str, nonce: str) -> Slideshow:
    """Parse an already-fetched slideshow page."""
    items = parse_images(find_data_images(html))
    metadata = SlideshowMetadata(
        article_id=article_id,
        nonce=nonce,
        title=extract_title(html),
        thumbnail=pick_thumbnail(items),
    )
    return Slideshow(
        images=[SlideImage.from_payload(item) for item in items],
        metadata=metadata,
    )


def extract(
    slideshow_url: str,
    *,
    article_id: str,
    nonce: str,
    session: requests.Session | None = None,
    settings: Settings | None = None,
) -> Slideshow:
    settings = settings or Settings()
    html = fetch_text(slideshow_url, session or new_session(settings), settings.timeout)
    slideshow = parse_slideshow_html(html, article_id=article_id, nonce=nonce)
    logger.info(
        "Extracted %d images for article %s (%s)",
        len(slideshow.images),
        article_id,
        slideshow.metadata.title,
    )
    return slideshow
