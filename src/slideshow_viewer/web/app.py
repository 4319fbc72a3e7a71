"""FastAPI web application: slideshow parsing API, bookmarks API and the viewer page."""

import json
import logging
from functools import lru_cache
from pathlib import Path

import requests
import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool

from slideshow_viewer.config import Settings, load_settings
from slideshow_viewer.errors import SlideshowError
from slideshow_viewer.fetch import new_session
from slideshow_viewer.models import build_slideshow_url, parse_share_token
from slideshow_viewer.pipeline import parse_slideshow
from slideshow_viewer.store import ProjectStore
from slideshow_viewer.stores.sqlite import SqliteProjectStore

logger = logging.getLogger(__name__)

load_dotenv()

app = FastAPI(
    title="Slideshow Viewer",
    description="Extracts photo slideshows from article pages and keeps a local history of them",
    version="0.1.0",
)

# Setup templates
templates_dir = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))


@lru_cache
def get_settings() -> Settings:
    return load_settings(dotenv=False)


@lru_cache
def get_store() -> ProjectStore:
    return SqliteProjectStore(get_settings().db_path)


def get_session(settings: Settings = Depends(get_settings)) -> requests.Session:
    return new_session(settings)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(SlideshowError)
async def slideshow_error_handler(request: Request, exc: SlideshowError):
    return _error(exc.message, exc.status_code)


@app.get("/", response_class=HTMLResponse)
async def home(
    request: Request,
    s: str | None = None,
    settings: Settings = Depends(get_settings),
):
    """Serve the viewer. ?s=<articleId>-<nonce> preloads a shared slideshow."""
    shared_url = None
    if s:
        try:
            article_id, nonce = parse_share_token(s)
            shared_url = build_slideshow_url(article_id, nonce, settings.site)
        except SlideshowError:
            logger.debug("Ignoring malformed share token %r", s)
    return templates.TemplateResponse(
        request, "index.html", {"shared_url": shared_url}
    )


@app.post("/api/parse-slideshow")
async def parse_slideshow_route(
    request: Request,
    settings: Settings = Depends(get_settings),
    store: ProjectStore = Depends(get_store),
    session: requests.Session = Depends(get_session),
):
    """Resolve the posted URL and return its images and metadata."""
    try:
        payload = json.loads(await request.body() or b"null")
    except ValueError:
        payload = None
    url = payload.get("url") if isinstance(payload, dict) else None
    if not url or not isinstance(url, str):
        return _error("URL is required", 400)

    try:
        slideshow = await run_in_threadpool(
            parse_slideshow, url, session=session, settings=settings, store=store
        )
        return JSONResponse(content=slideshow.to_dict())
    except SlideshowError as e:
        return _error(e.message, e.status_code)
    except Exception:
        logger.exception("Error parsing slideshow %s", url)
        return _error("Failed to parse slideshow data", 500)


@app.get("/api/projects/recents")
def recents(
    limit: int = Query(20, ge=0, le=200),
    offset: int = Query(0, ge=0),
    store: ProjectStore = Depends(get_store),
):
    return [p.to_dict() for p in store.list_recents(limit, offset)]


@app.get("/api/projects/favorites")
def favorites(store: ProjectStore = Depends(get_store)):
    return [p.to_dict() for p in store.list_favorites()]


@app.get("/api/projects/{article_id}/favorite")
def favorite_flag(article_id: str, store: ProjectStore = Depends(get_store)):
    return {"articleId": article_id, "isFavorite": store.get_favorite_flag(article_id)}


@app.post("/api/projects/{article_id}/favorite")
def toggle_favorite(article_id: str, store: ProjectStore = Depends(get_store)):
    return {"articleId": article_id, "isFavorite": store.toggle_favorite(article_id)}


@app.get("/share/{token}")
def share(token: str, settings: Settings = Depends(get_settings)):
    article_id, nonce = parse_share_token(token)
    return {
        "articleId": article_id,
        "nonce": nonce,
        "url": build_slideshow_url(article_id, nonce, settings.site),
    }


def main():
    """Entry point for the web application."""
    uvicorn.run("slideshow_viewer.web.app:app", host="0.0.0.0", port=1234, reload=True)


if __name__ == "__main__":
    main()
