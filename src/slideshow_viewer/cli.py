"""Command line interface: parse, recents, favorites, favorite, share, serve."""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager, nullcontext
from typing import Annotated

import typer
import uvicorn
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from slideshow_viewer.config import load_settings
from slideshow_viewer.errors import SlideshowError
from slideshow_viewer.models import (
    StoredProject,
    build_slideshow_url,
    make_share_token,
)
from slideshow_viewer.pipeline import parse_slideshow
from slideshow_viewer.store import ProjectStore
from slideshow_viewer.stores.memory import InMemoryProjectStore
from slideshow_viewer.stores.sqlite import SqliteProjectStore

app = typer.Typer(
    name="slideshow-viewer",
    help="Extract photo slideshows from article pages and keep a local history of them.",
)

console = Console()

_state: dict = {"db": None, "memory": False}


@app.callback()
def main_callback(
    verbose: Annotated[
        bool, typer.Option("-v", "--verbose", help="Enable debug logging")
    ] = False,
    db: Annotated[
        str | None,
        typer.Option(help="Bookmark database path (default: $SLIDESHOW_DB)"),
    ] = None,
    memory: Annotated[
        bool, typer.Option("--memory", help="Keep bookmarks in memory only")
    ] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    _state["db"] = db
    _state["memory"] = memory


@contextmanager
def _open_store() -> Iterator[ProjectStore]:
    if _state["memory"]:
        yield InMemoryProjectStore()
        return
    store = SqliteProjectStore(_state["db"] or load_settings().db_path)
    try:
        yield store
    finally:
        store.close()


def _projects_table(title: str, projects: list[StoredProject]) -> Table:
    table = Table(title=title)
    table.add_column("Article")
    table.add_column("Title")
    table.add_column("Viewed")
    table.add_column("★")
    for p in projects:
        table.add_row(
            p.article_id,
            p.title,
            str(p.viewed_at),
            "★" if p.is_favorite else "",
        )
    return table


@app.command()
def parse(
    url: Annotated[str, typer.Argument(help="Article or slideshow URL")],
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the raw JSON response")
    ] = False,
    save: Annotated[
        bool, typer.Option("--save/--no-save", help="Record the view in bookmarks")
    ] = True,
) -> None:
    """Extract the slideshow behind URL."""
    settings = load_settings()
    opened = _open_store() if save else nullcontext()
    try:
        with opened as store, console.status(f"Fetching slideshow from {url}..."):
            slideshow = parse_slideshow(url, settings=settings, store=store)
    except SlideshowError as e:
        console.print(f"❌ Error: {e.message}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(json.dumps(slideshow.to_dict(), ensure_ascii=False))
        return

    meta = slideshow.metadata
    table = Table(title=meta.title)
    table.add_column("#", justify="right")
    table.add_column("Caption")
    table.add_column("Large image")
    for i, image in enumerate(slideshow.images, 1):
        table.add_row(str(i), image.caption or image.image_alt, image.url_large)
    console.print(table)
    console.print(f"  • Article: {meta.article_id}")
    console.print(f"  • Nonce: {meta.nonce}")
    console.print(f"  • Share: {make_share_token(meta.article_id, meta.nonce)}")


@app.command()
def recents(
    limit: Annotated[int, typer.Option(min=0, help="Page size")] = 20,
    offset: Annotated[int, typer.Option(min=0, help="Records to skip")] = 0,
) -> None:
    """List recently viewed slideshows, newest first."""
    with _open_store() as store:
        projects = store.list_recents(limit, offset)
    if not projects:
        console.print("No slideshows viewed yet.")
        return
    console.print(_projects_table("Recent", projects))


@app.command()
def favorites() -> None:
    """List favorited slideshows."""
    with _open_store() as store:
        projects = store.list_favorites()
    if not projects:
        console.print("No favorites yet.")
        return
    console.print(_projects_table("Favorites", projects))


@app.command()
def favorite(
    article_id: Annotated[str, typer.Argument(help="Article id to (un)favorite")],
) -> None:
    """Toggle the favorite flag of a viewed slideshow."""
    with _open_store() as store:
        if store.get(article_id) is None:
            console.print(f"❌ Error: article {article_id} has not been viewed")
            raise typer.Exit(code=1)
        flag = store.toggle_favorite(article_id)
    console.print(f"{'★ Favorited' if flag else '☆ Unfavorited'}: {article_id}")


@app.command()
def share(
    article_id: Annotated[str, typer.Argument()],
    nonce: Annotated[str, typer.Argument()],
) -> None:
    """Print the share token and slideshow URL for an article/nonce pair."""
    settings = load_settings()
    console.print(f"Token: {make_share_token(article_id, nonce)}")
    console.print(f"URL: {build_slideshow_url(article_id, nonce, settings.site)}")


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Bind address")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port")] = 1234,
    reload: Annotated[bool, typer.Option(help="Reload on code changes")] = False,
) -> None:
    """Run the web viewer."""
    uvicorn.run("slideshow_viewer.web.app:app", host=host, port=port, reload=reload)


def main() -> None:
    app()
