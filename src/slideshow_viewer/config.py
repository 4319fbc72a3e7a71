"""Runtime settings, read from the environment (and a .env file when present)."""

import dataclasses
import os
from pathlib import Path

from dotenv import load_dotenv

from slideshow_viewer.models import DEFAULT_SITE

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "slideshow-viewer/0.1"
DEFAULT_DB_PATH = Path("data/slideshow.db")


@dataclasses.dataclass(frozen=True)
class Settings:
    site: str = DEFAULT_SITE
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    db_path: Path = DEFAULT_DB_PATH


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(dotenv: bool = True) -> Settings:
    """Build Settings from SLIDESHOW_* environment variables."""
    if dotenv:
        load_dotenv()
    return Settings(
        site=os.environ.get("SLIDESHOW_SITE", "").strip() or DEFAULT_SITE,
        timeout=_float_env("SLIDESHOW_TIMEOUT", DEFAULT_TIMEOUT),
        user_agent=os.environ.get("SLIDESHOW_USER_AGENT", "").strip()
        or DEFAULT_USER_AGENT,
        db_path=Path(os.environ.get("SLIDESHOW_DB", "").strip() or DEFAULT_DB_PATH),
    )
