"""Tests for the project-scoped BlogClient."""

from __future__ import annotations

import pytest

from conftest import make_post, make_posts_page

from cakewalk.client import BlogClient
from cakewalk.exceptions import ConfigError, DecodeError, ServerError
from cakewalk.models import Post, PostsResponse, UnknownSection

BASE = "https://api.cakewalk.ai/api"


@pytest.fixture
def client(fake_api, clock) -> BlogClient:
    return BlogClient(
        "k1", "proj_123", cache_ttl=1, http_client=fake_api.http_client(), clock=clock
    )


class TestConstruction:
    def test_requires_project_id(self) -> None:
        with pytest.raises(ConfigError):
            BlogClient("k1", "")

    def test_requires_api_key(self) -> None:
        with pytest.raises(ConfigError):
            BlogClient("", "proj_123")

    def test_default_base_url(self) -> None:
        client = BlogClient("k1", "proj_123")
        assert client.base_url == BASE
        assert client.project_id == "proj_123"


class TestKeys:
    def test_keys_are_project_prefixed(self, client: BlogClient) -> None:
        assert client.posts_key() == "proj_123:posts:published:50:0"
        assert client.post_key(7) == "proj_123:post:id:7"
        assert client.post_slug_key("hello") == "proj_123:post:slug:hello"

    def test_projects_never_share_keys(self, clock) -> None:
        a = BlogClient("k1", "proj_a")
        b = BlogClient("k1", "proj_b")
        assert a.posts_key() != b.posts_key()


class TestGetPosts:
    @pytest.mark.asyncio
    async def test_cache_hit_within_ttl_and_refetch_after(
        self, client: BlogClient, fake_api, clock
    ) -> None:
        fake_api.add("/api/v1/posts", json=make_posts_page(make_post(1), make_post(2, "second")))

        first = await client.get_posts()
        assert isinstance(first, PostsResponse)
        assert [p.id for p in first.posts] == [1, 2]
        assert fake_api.calls() == 1

        second = await client.get_posts()
        assert second == first
        assert fake_api.calls() == 1

        clock.advance(1.5)
        await client.get_posts()
        assert fake_api.calls() == 2

    @pytest.mark.asyncio
    async def test_default_parameters(self, client: BlogClient, fake_api) -> None:
        fake_api.add("/api/v1/posts", json=make_posts_page())

        await client.get_posts()

        assert str(fake_api.last_request.url) == (
            f"{BASE}/v1/posts?status=published&limit=50&offset=0"
        )

    @pytest.mark.asyncio
    async def test_project_header_sent(self, client: BlogClient, fake_api) -> None:
        fake_api.add("/api/v1/posts", json=make_posts_page())

        await client.get_posts()

        headers = fake_api.last_request.headers
        assert headers["X-Project-Id"] == "proj_123"
        assert headers["Authorization"] == "Bearer k1"

    @pytest.mark.asyncio
    async def test_pagination_params_are_distinct_entries(self, client: BlogClient, fake_api) -> None:
        fake_api.add("/api/v1/posts", json=make_posts_page(make_post(1), limit=10))
        fake_api.add("/api/v1/posts", json=make_posts_page(make_post(2), limit=20))
        fake_api.add("/api/v1/posts", json=make_posts_page(make_post(3), offset=10))

        by_10 = await client.get_posts(limit=10)
        by_20 = await client.get_posts(limit=20)
        offset_10 = await client.get_posts(offset=10)

        assert [p.id for p in by_10.posts] == [1]
        assert [p.id for p in by_20.posts] == [2]
        assert [p.id for p in offset_10.posts] == [3]
        assert fake_api.calls() == 3

    @pytest.mark.asyncio
    async def test_status_filter(self, client: BlogClient, fake_api) -> None:
        fake_api.add("/api/v1/posts", json=make_posts_page())

        await client.get_posts(status="draft", limit=5, offset=15)

        params = fake_api.last_request.url.params
        assert params["status"] == "draft"
        assert params["limit"] == "5"
        assert params["offset"] == "15"

    @pytest.mark.asyncio
    async def test_server_error_is_raised_and_not_cached(self, client: BlogClient, fake_api) -> None:
        fake_api.add("/api/v1/posts", json={"error": "boom"}, status_code=500)
        fake_api.add("/api/v1/posts", json=make_posts_page(make_post(1)))

        with pytest.raises(ServerError):
            await client.get_posts()

        result = await client.get_posts()
        assert [p.id for p in result.posts] == [1]
        assert fake_api.calls() == 2

    @pytest.mark.asyncio
    async def test_unexpected_shape_raises_decode_error(self, client: BlogClient, fake_api) -> None:
        fake_api.add("/api/v1/posts", json={"posts": "not-a-list"})
        with pytest.raises(DecodeError):
            await client.get_posts()
        assert client.cache_stats()["size"] == 0


class TestGetPost:
    @pytest.mark.asyncio
    async def test_by_id_unwraps_envelope(self, client: BlogClient, fake_api) -> None:
        fake_api.add("/api/v1/posts/7", json={"post": make_post(7)})

        post = await client.get_post(7)

        assert isinstance(post, Post)
        assert post.id == 7
        assert fake_api.last_request.headers["X-Project-Id"] == "proj_123"

    @pytest.mark.asyncio
    async def test_by_id_404_returns_none(self, client: BlogClient, fake_api) -> None:
        fake_api.add("/api/v1/posts/404", json={"error": "missing"}, status_code=404)
        assert await client.get_post(404) is None

    @pytest.mark.asyncio
    async def test_not_found_is_not_cached(self, client: BlogClient, fake_api) -> None:
        fake_api.add("/api/v1/posts/9", status_code=404, json={})
        fake_api.add("/api/v1/posts/9", json={"post": make_post(9)})

        assert await client.get_post(9) is None
        post = await client.get_post(9)
        assert post is not None and post.id == 9

    @pytest.mark.asyncio
    async def test_by_id_500_raises(self, client: BlogClient, fake_api) -> None:
        fake_api.add("/api/v1/posts/7", status_code=500, json={})
        with pytest.raises(ServerError):
            await client.get_post(7)

    @pytest.mark.asyncio
    async def test_by_slug(self, client: BlogClient, fake_api) -> None:
        fake_api.add("/api/v1/posts/slug/launch-notes", json={"post": make_post(3, "launch-notes")})

        post = await client.get_post_by_slug("launch-notes")
        again = await client.get_post_by_slug("launch-notes")

        assert post.slug == "launch-notes"
        assert again == post
        assert fake_api.calls() == 1

    @pytest.mark.asyncio
    async def test_unknown_section_type_does_not_fail_the_post(
        self, client: BlogClient, fake_api
    ) -> None:
        fake_api.add(
            "/api/v1/posts/slug/s",
            json={
                "post": make_post(
                    3, "s", structured_content={"sections": [{"type": "quote", "text": "hi"}]}
                )
            },
        )

        post = await client.get_post_by_slug("s")

        assert isinstance(post, Post)
        assert isinstance(post.structured_content.sections[0], UnknownSection)

    @pytest.mark.asyncio
    async def test_slug_containing_404_is_not_mistaken_for_not_found(
        self, client: BlogClient, fake_api
    ) -> None:
        fake_api.add("/api/v1/posts/slug/error-404-guide", status_code=500, json={})
        with pytest.raises(ServerError):
            await client.get_post_by_slug("error-404-guide")

    @pytest.mark.asyncio
    async def test_by_slug_404_returns_none(self, client: BlogClient, fake_api) -> None:
        assert await client.get_post_by_slug("missing") is None

    @pytest.mark.asyncio
    async def test_clear_cache_key_forces_refetch(self, client: BlogClient, fake_api) -> None:
        fake_api.add("/api/v1/posts/7", json={"post": make_post(7)})
        fake_api.add("/api/v1/posts", json=make_posts_page())

        await client.get_post(7)
        await client.get_posts()
        client.clear_cache_key(client.post_key(7))
        await client.get_post(7)
        await client.get_posts()

        assert fake_api.calls("/api/v1/posts/7") == 2
        assert fake_api.calls("/api/v1/posts") == 1
