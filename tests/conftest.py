"""Shared test fixtures for cakewalk.

Provides a controllable clock for cache expiry, a fake Cakewalk API built on
:class:`httpx.MockTransport` that records every request it receives, and
fixtures that isolate the CLI from the caller's environment.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import httpx
import pytest

from cakewalk.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager holds references to sys.stdout/sys.stderr taken at
    creation time, which go stale once CliRunner restores the real streams.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Callable returning a manually advanced epoch time."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ---------------------------------------------------------------------------
# Fake API
# ---------------------------------------------------------------------------


class FakeApi:
    """Canned responses keyed by URL path, plus a log of received requests.

    Register a response with :meth:`add`; a path may be given several
    responses, which are served in order (the last one repeats). Unknown
    paths answer 404.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[str, list[Callable[[httpx.Request], httpx.Response]]] = {}

    def add(
        self,
        path: str,
        json: Any = None,
        status_code: int = 200,
        content: Optional[bytes] = None,
    ) -> None:
        def _respond(request: httpx.Request) -> httpx.Response:
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=json)

        self._routes.setdefault(path, []).append(_respond)

    def add_error(self, path: str, exc: Exception) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc

        self._routes.setdefault(path, []).append(_raise)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responders = self._routes.get(request.url.path)
        if not responders:
            return httpx.Response(404, json={"error": "not found"})
        responder = responders.pop(0) if len(responders) > 1 else responders[0]
        return responder(request)

    def calls(self, path: Optional[str] = None) -> int:
        if path is None:
            return len(self.requests)
        return sum(1 for r in self.requests if r.url.path == path)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


# ---------------------------------------------------------------------------
# Sample payloads
# ---------------------------------------------------------------------------


def make_post(post_id: int = 1, slug: str = "hello-world", **extra: Any) -> dict[str, Any]:
    post: dict[str, Any] = {
        "id": post_id,
        "title": f"Post {post_id}",
        "slug": slug,
        "status": "published",
        "post_type": "article",
        "post_format": "standard",
        "primary_keyword": "cakes",
        "secondary_keywords": ["baking"],
        "excerpt": None,
        "body_markdown": "# Hello",
        "body_html": "<h1>Hello</h1>",
        "structured_content": None,
        "schema_json_ld": None,
        "meta_title": None,
        "meta_description": None,
        "featured_image_url": None,
        "ai_summary": None,
        "faq_questions": [],
        "author": None,
        "published_at": "2024-05-01T10:00:00Z",
        "created_at": "2024-04-30T10:00:00Z",
        "updated_at": "2024-05-01T10:00:00Z",
    }
    post.update(extra)
    return post


def make_posts_page(*posts: dict[str, Any], limit: int = 50, offset: int = 0) -> dict[str, Any]:
    return {
        "posts": list(posts),
        "pagination": {
            "total": len(posts),
            "limit": limit,
            "offset": offset,
            "has_more": False,
        },
    }


def make_article(slug: str = "hello-world", **extra: Any) -> dict[str, Any]:
    article: dict[str, Any] = {
        "id": f"art_{slug}",
        "slug": slug,
        "headline": slug.replace("-", " ").title(),
        "metaDescription": "A short description.",
        "readingTime": 4,
        "publishedAt": "2024-05-01T10:00:00Z",
        "categories": [{"slug": "news", "name": "News"}],
        "tags": [{"slug": "python", "name": "Python"}],
    }
    article.update(extra)
    return article


def make_articles_page(*articles: dict[str, Any], page: int = 1, limit: int = 10) -> dict[str, Any]:
    return {
        "articles": list(articles),
        "total": len(articles),
        "page": page,
        "limit": limit,
        "totalPages": 1,
    }


# ---------------------------------------------------------------------------
# Environment isolation
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Clear CAKEWALK_* variables and run the test from an empty directory.

    Returns:
        The tmp_path working directory, for writing a ``cakewalk.json``.
    """
    for var in [
        "CAKEWALK_API_KEY",
        "CAKEWALK_PROJECT_ID",
        "CAKEWALK_BASE_URL",
        "CAKEWALK_CACHE_TTL",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def cli_runner():
    from typer.testing import CliRunner

    return CliRunner()
