"""Project-scoped posts flavour of the Cakewalk client.

:class:`BlogClient` reads the posts of a single project through the
``/v1/posts`` endpoints. Every request carries an ``X-Project-Id`` header
and every cache key starts with the project id, so two clients for
different projects can never serve each other's entries.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from cakewalk.client.base import CachedApiClient
from cakewalk.exceptions import ConfigError
from cakewalk.models import ClientOptions, Post, PostResponse, PostsResponse

DEFAULT_STATUS = "published"
DEFAULT_LIMIT = 50
DEFAULT_OFFSET = 0


class BlogClient(CachedApiClient):
    """Typed accessors for the posts of one Cakewalk project.

    Args:
        api_key: Organisation API key sent as a bearer token.
        project_id: The project to read posts from.
        options: Cache TTL, base URL and timeout settings.
        **kwargs: Forwarded to :class:`~cakewalk.client.base.CachedApiClient`.

    Raises:
        ConfigError: If *api_key* or *project_id* is empty.

    Example::

        async with BlogClient("ck_live_...", "proj_123") as client:
            listing = await client.get_posts(limit=10)
            post = await client.get_post_by_slug("launch-notes")
    """

    default_base_url = "https://api.cakewalk.ai/api"

    def __init__(
        self,
        api_key: str,
        project_id: str,
        options: Optional[ClientOptions] = None,
        **kwargs: Any,
    ) -> None:
        if not project_id:
            raise ConfigError("A project id is required to create a BlogClient")
        super().__init__(api_key, options, **kwargs)
        self._project_id = project_id

    @property
    def project_id(self) -> str:
        return self._project_id

    def make_key(self, *parts: Any) -> str:
        return super().make_key(self._project_id, *parts)

    # ------------------------------------------------------------------ #
    # Cache keys
    # ------------------------------------------------------------------ #

    def posts_key(
        self,
        status: str = DEFAULT_STATUS,
        limit: int = DEFAULT_LIMIT,
        offset: int = DEFAULT_OFFSET,
    ) -> str:
        return self.make_key("posts", status, limit, offset)

    def post_key(self, post_id: Union[int, str]) -> str:
        return self.make_key("post", "id", post_id)

    def post_slug_key(self, slug: str) -> str:
        return self.make_key("post", "slug", slug)

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    async def get_posts(
        self,
        status: str = DEFAULT_STATUS,
        limit: int = DEFAULT_LIMIT,
        offset: int = DEFAULT_OFFSET,
    ) -> PostsResponse:
        """Return one page of posts and its pagination block."""
        return await self.cached(
            self.posts_key(status, limit, offset),
            lambda: self._fetch(
                PostsResponse,
                "/v1/posts",
                {"status": status, "limit": limit, "offset": offset},
            ),
        )

    async def get_post(self, post_id: Union[int, str]) -> Optional[Post]:
        """Return the post with *post_id*, or ``None`` if the API answers 404."""
        return await self.cached_or_none(
            self.post_key(post_id),
            lambda: self._fetch_post(f"/v1/posts/{self._segment(post_id)}"),
        )

    async def get_post_by_slug(self, slug: str) -> Optional[Post]:
        """Return the post with *slug*, or ``None`` if the API answers 404."""
        return await self.cached_or_none(
            self.post_slug_key(slug),
            lambda: self._fetch_post(f"/v1/posts/slug/{self._segment(slug)}"),
        )

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _build_headers(self) -> dict[str, str]:
        headers = super()._build_headers()
        headers["X-Project-Id"] = self._project_id
        return headers

    async def _fetch_post(self, path: str) -> Post:
        envelope: PostResponse = await self._fetch(PostResponse, path)
        return envelope.post
