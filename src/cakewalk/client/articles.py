"""Articles flavour of the Cakewalk client.

:class:`ArticlesClient` reads the organisation-wide article feed along with
its categories and tags. It sends no project header and its cache keys
carry no project prefix.
"""

from __future__ import annotations

from typing import Optional

from cakewalk.client.base import CachedApiClient
from cakewalk.models import Article, ArticlesResponse, Category, Tag

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


class ArticlesClient(CachedApiClient):
    """Typed accessors for the ``/articles``, ``/categories`` and ``/tags`` endpoints.

    Example::

        async with ArticlesClient("ck_live_...") as client:
            page = await client.get_articles(page=2)
            article = await client.get_article("hello-world")
    """

    default_base_url = "https://api.cakewalk.ai"

    # ------------------------------------------------------------------ #
    # Cache keys
    # ------------------------------------------------------------------ #

    def articles_key(self, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> str:
        return self.make_key("articles", page, limit)

    def article_key(self, slug: str) -> str:
        return self.make_key("article", slug)

    def category_key(
        self, category_slug: str, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT
    ) -> str:
        return self.make_key("category", category_slug, page, limit)

    def tag_key(
        self, tag_slug: str, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT
    ) -> str:
        return self.make_key("tag", tag_slug, page, limit)

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    async def get_articles(
        self, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT
    ) -> ArticlesResponse:
        """Return one page of article summaries."""
        return await self.cached(
            self.articles_key(page, limit),
            lambda: self._fetch(
                ArticlesResponse, "/articles", {"page": page, "limit": limit}
            ),
        )

    async def get_article(self, slug: str) -> Optional[Article]:
        """Return the article with *slug*, or ``None`` if the API answers 404."""
        return await self.cached_or_none(
            self.article_key(slug),
            lambda: self._fetch(Article, f"/articles/{self._segment(slug)}"),
        )

    async def get_articles_by_category(
        self,
        category_slug: str,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> ArticlesResponse:
        """Return one page of the articles filed under *category_slug*."""
        return await self.cached(
            self.category_key(category_slug, page, limit),
            lambda: self._fetch(
                ArticlesResponse,
                f"/categories/{self._segment(category_slug)}/articles",
                {"page": page, "limit": limit},
            ),
        )

    async def get_articles_by_tag(
        self,
        tag_slug: str,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_LIMIT,
    ) -> ArticlesResponse:
        """Return one page of the articles tagged *tag_slug*."""
        return await self.cached(
            self.tag_key(tag_slug, page, limit),
            lambda: self._fetch(
                ArticlesResponse,
                f"/tags/{self._segment(tag_slug)}/articles",
                {"page": page, "limit": limit},
            ),
        )

    async def get_categories(self) -> list[Category]:
        return await self.cached(
            self.make_key("categories"),
            lambda: self._fetch(list[Category], "/categories"),
        )

    async def get_tags(self) -> list[Tag]:
        return await self.cached(
            self.make_key("tags"), lambda: self._fetch(list[Tag], "/tags")
        )
