"""Typer application and CLI entry point for cakewalk.

The ``cakewalk`` command is a thin shell over the library clients, handy for
checking what the API returns for a project without writing code::

    cakewalk --project-id proj_123 posts list --limit 5
    cakewalk --json articles get hello-world

Credentials come from flags, the environment or ``./cakewalk.json`` (see
:mod:`cakewalk.config`). :class:`~cakewalk.exceptions.CakewalkError`
subclasses exit with their ``exit_code``; transport failures exit with
:data:`~cakewalk.exit_codes.EXIT_CONNECTION_ERROR`.

See Also:
    :mod:`cakewalk.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
import typer

from cakewalk import __version__
from cakewalk.client.base import CachedApiClient
from cakewalk.config import Settings, build_articles_client, build_blog_client, resolve_settings
from cakewalk.exceptions import CakewalkError, InvalidUsageError
from cakewalk.exit_codes import EXIT_CONNECTION_ERROR, EXIT_GENERIC_FAILURE, EXIT_NOT_FOUND
from cakewalk.models import ArticlesResponse
from cakewalk.output import debug, error, info, print_json, print_table, warning

C = TypeVar("C", bound=CachedApiClient)
R = TypeVar("R")

app = typer.Typer(
    name="cakewalk",
    help="Query the Cakewalk blog and content API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)
posts_app = typer.Typer(help="Project posts (/v1/posts).", no_args_is_help=True)
articles_app = typer.Typer(help="Articles by page, slug, category or tag.", no_args_is_help=True)

app.add_typer(posts_app, name="posts")
app.add_typer(articles_app, name="articles")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"cakewalk {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Send the library's debug records to stderr when ``--verbose`` is set."""
    if not verbose:
        return
    logger = logging.getLogger("cakewalk")
    logger.setLevel(logging.DEBUG)
    if not any(getattr(h, "_cakewalk_cli", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("[debug] %(name)s: %(message)s"))
        handler._cakewalk_cli = True  # type: ignore[attr-defined]
        logger.addHandler(handler)


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    api_key: Optional[str] = typer.Option(
        None, "--api-key", help="API key (overrides CAKEWALK_API_KEY)."
    ),
    project_id: Optional[str] = typer.Option(
        None, "--project-id", help="Project id (overrides CAKEWALK_PROJECT_ID)."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="API origin (overrides CAKEWALK_BASE_URL)."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Install the output manager and stash connection flags in ``ctx.obj``."""
    from cakewalk.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    if json_output and plain_output:
        warning("--json and --plain both given; using JSON")
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    ctx.obj["api_key"] = api_key
    ctx.obj["project_id"] = project_id
    ctx.obj["base_url"] = base_url


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _settings(ctx: typer.Context) -> Settings:
    obj = ctx.obj or {}
    return resolve_settings(
        api_key=obj.get("api_key"),
        project_id=obj.get("project_id"),
        base_url=obj.get("base_url"),
    )


def _call(
    ctx: typer.Context,
    build: Callable[[Settings], C],
    fn: Callable[[C], Awaitable[R]],
) -> R:
    """Build a client, run one accessor on it, and map failures to exit codes."""

    async def _run() -> R:
        async with build(_settings(ctx)) as client:
            debug(f"Using {client.base_url}")
            return await fn(client)  # type: ignore[arg-type]

    try:
        return asyncio.run(_run())
    except CakewalkError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code)
    except httpx.TransportError as exc:
        error(f"Connection failed: {exc}")
        raise typer.Exit(code=EXIT_CONNECTION_ERROR)


def _post_id(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise InvalidUsageError(f"Post id must be numeric, got {value!r}") from None


def _print_item(item: Any, what: str) -> None:
    if item is None:
        error(f"{what} not found")
        raise typer.Exit(code=EXIT_NOT_FOUND)
    print_json(item.model_dump(mode="json", by_alias=True))


def _print_articles(result: ArticlesResponse, title: str) -> None:
    rows = [
        [a.slug, a.headline, str(a.reading_time), a.published_at or ""]
        for a in result.articles
    ]
    print_table(
        ["Slug", "Headline", "Minutes", "Published"],
        rows,
        title=f"{title} (page {result.page}/{result.total_pages}, {result.total} total)",
    )


# ------------------------------------------------------------------ #
# Posts
# ------------------------------------------------------------------ #


@posts_app.command("list")
def posts_list(
    ctx: typer.Context,
    status: str = typer.Option("published", "--status", help="Post status filter."),
    limit: int = typer.Option(50, "--limit", min=1, help="Page size."),
    offset: int = typer.Option(0, "--offset", min=0, help="Number of posts to skip."),
) -> None:
    """List the posts of the configured project."""
    result = _call(ctx, build_blog_client, lambda c: c.get_posts(status, limit, offset))
    rows = [
        [str(p.id), p.slug, p.title, p.status, p.published_at or ""]
        for p in result.posts
    ]
    page = result.pagination
    print_table(
        ["ID", "Slug", "Title", "Status", "Published"],
        rows,
        title=f"Posts ({page.total} total, offset {page.offset})",
    )
    if page.has_more:
        info(f"More posts available; next offset is {page.offset + page.limit}")


@posts_app.command("get")
def posts_get(
    ctx: typer.Context,
    post_id: str = typer.Argument(..., help="Numeric post id."),
) -> None:
    """Show a single post by id."""
    post = _call(ctx, build_blog_client, lambda c: c.get_post(_post_id(post_id)))
    _print_item(post, f"Post {post_id}")


@posts_app.command("slug")
def posts_slug(
    ctx: typer.Context,
    slug: str = typer.Argument(..., help="Post slug."),
) -> None:
    """Show a single post by slug."""
    post = _call(ctx, build_blog_client, lambda c: c.get_post_by_slug(slug))
    _print_item(post, f"Post '{slug}'")


# ------------------------------------------------------------------ #
# Articles
# ------------------------------------------------------------------ #


@articles_app.command("list")
def articles_list(
    ctx: typer.Context,
    page: int = typer.Option(1, "--page", min=1),
    limit: int = typer.Option(10, "--limit", min=1),
) -> None:
    """List articles, one page at a time."""
    result = _call(ctx, build_articles_client, lambda c: c.get_articles(page, limit))
    _print_articles(result, "Articles")


@articles_app.command("get")
def articles_get(
    ctx: typer.Context,
    slug: str = typer.Argument(..., help="Article slug."),
) -> None:
    """Show a single article by slug."""
    article = _call(ctx, build_articles_client, lambda c: c.get_article(slug))
    _print_item(article, f"Article '{slug}'")


@articles_app.command("category")
def articles_by_category(
    ctx: typer.Context,
    slug: str = typer.Argument(..., help="Category slug."),
    page: int = typer.Option(1, "--page", min=1),
    limit: int = typer.Option(10, "--limit", min=1),
) -> None:
    """List the articles in a category."""
    result = _call(
        ctx, build_articles_client, lambda c: c.get_articles_by_category(slug, page, limit)
    )
    _print_articles(result, f"Category '{slug}'")


@articles_app.command("tag")
def articles_by_tag(
    ctx: typer.Context,
    slug: str = typer.Argument(..., help="Tag slug."),
    page: int = typer.Option(1, "--page", min=1),
    limit: int = typer.Option(10, "--limit", min=1),
) -> None:
    """List the articles with a tag."""
    result = _call(
        ctx, build_articles_client, lambda c: c.get_articles_by_tag(slug, page, limit)
    )
    _print_articles(result, f"Tag '{slug}'")


# ------------------------------------------------------------------ #
# Taxonomies
# ------------------------------------------------------------------ #


@app.command("categories")
def categories(ctx: typer.Context) -> None:
    """List all categories."""
    result = _call(ctx, build_articles_client, lambda c: c.get_categories())
    print_table(["Slug", "Name"], [[c.slug, c.name] for c in result], title="Categories")


@app.command("tags")
def tags(ctx: typer.Context) -> None:
    """List all tags."""
    result = _call(ctx, build_articles_client, lambda c: c.get_tags())
    print_table(["Slug", "Name"], [[t.slug, t.name] for t in result], title="Tags")


def main() -> None:
    """Console-script entry point.

    Unexpected exceptions are reported on stderr and exit with
    :data:`~cakewalk.exit_codes.EXIT_GENERIC_FAILURE`.
    """
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except CakewalkError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error: {exc!r}")
        sys.exit(EXIT_GENERIC_FAILURE)
