"""Shared fetch helper: one GET, with every failure mapped to FetchError."""

import logging

import requests

from slideshow_viewer.config import Settings
from slideshow_viewer.errors import FetchError

logger = logging.getLogger(__name__)


def new_session(settings: Settings) -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = settings.user_agent
    return session


def fetch_text(url: str, session: requests.Session, timeout: float) -> str:
    """GET url and return the body. Non-2xx, timeouts and network errors raise FetchError."""
    logger.info("Fetching %s", url)
    try:
        response = session.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning("Fetch failed for %s: %s", url, e)
        raise FetchError(f"Failed to fetch URL: {url}") from e
    return response.text
