"""cakewalk -- typed, caching Python client for the Cakewalk content API.

Two asynchronous clients share one cached-fetch core:

* :class:`BlogClient` reads the posts of a single project (``/v1/posts``).
* :class:`ArticlesClient` reads articles, categories and tags.

Successful responses are memoised in memory for ``cache_ttl`` seconds
(default 300) per client instance. Single-item lookups return ``None`` when
the API answers 404; every other failure raises a
:class:`~cakewalk.exceptions.CakewalkError` subclass or the underlying
:mod:`httpx` transport error.

Typical usage::

    from cakewalk import BlogClient

    async with BlogClient(api_key, project_id, cache_ttl=60) as client:
        listing = await client.get_posts(limit=10)
        post = await client.get_post_by_slug("launch-notes")

Modules:
    client: The cached client core and the two flavours.
    cache: In-memory TTL cache.
    models: Pydantic models for every payload.
    exceptions: Exception hierarchy with exit-code mapping.
    config: Settings resolution used by the CLI.
    app: Typer CLI entry point.
"""

__version__ = "0.1.0"

from cakewalk.client import ArticlesClient, BlogClient, CachedApiClient  # noqa: E402
from cakewalk.exceptions import (  # noqa: E402
    ApiError,
    AuthError,
    CakewalkError,
    ConfigError,
    DecodeError,
    NotFoundError,
    ServerError,
)
from cakewalk.models import (  # noqa: E402
    Article,
    ArticlesResponse,
    ArticleSummary,
    Author,
    Category,
    ClientOptions,
    ContentSection,
    Pagination,
    Post,
    PostsResponse,
    StructuredContent,
    UnknownSection,
    Tag,
)

__all__ = [
    "__version__",
    "ArticlesClient",
    "BlogClient",
    "CachedApiClient",
    "ApiError",
    "AuthError",
    "CakewalkError",
    "ConfigError",
    "DecodeError",
    "NotFoundError",
    "ServerError",
    "Article",
    "ArticlesResponse",
    "ArticleSummary",
    "Author",
    "Category",
    "ClientOptions",
    "ContentSection",
    "Pagination",
    "Post",
    "PostsResponse",
    "StructuredContent",
    "UnknownSection",
    "Tag",
]
