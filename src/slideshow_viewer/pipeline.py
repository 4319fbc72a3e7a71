"""Resolve a URL, extract its slideshow, and optionally bookmark the result."""

import logging

import requests

from slideshow_viewer.config import Settings
from slideshow_viewer.extractor import extract
from slideshow_viewer.fetch import new_session
from slideshow_viewer.models import Slideshow
from slideshow_viewer.resolver import resolve
from slideshow_viewer.store import ProjectStore

logger = logging.getLogger(__name__)


def parse_slideshow(
    url: str,
    *,
    session: requests.Session | None = None,
    settings: Settings | None = None,
    store: ProjectStore | None = None,
) -> Slideshow:
    """Run resolver then extractor; at most two sequential fetches."""
    settings = settings or Settings()
    session = session or new_session(settings)

    resolution = resolve(url, session=session, settings=settings)
    slideshow = extract(
        resolution.slideshow_url,
        article_id=resolution.article_id,
        nonce=resolution.nonce,
        session=session,
        settings=settings,
    )

    if store is not None:
        store.upsert(slideshow.metadata)
        logger.debug("Saved article %s to bookmarks", resolution.article_id)
    return slideshow
