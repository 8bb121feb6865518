"""Cached, authenticated fetch core shared by every cakewalk client.

This module provides :class:`CachedApiClient`, the asynchronous base class
behind :class:`~cakewalk.client.articles.ArticlesClient` and
:class:`~cakewalk.client.posts.BlogClient`. It wraps
:class:`httpx.AsyncClient` and layers on:

- **Auth headers** -- ``Authorization: Bearer <api key>`` plus JSON content
  negotiation on every request; subclasses may add scoping headers.
- **Error mapping** -- non-2xx responses raise the matching
  :class:`~cakewalk.exceptions.ApiError` subclass; unparseable bodies raise
  :class:`~cakewalk.exceptions.DecodeError`.
- **Response caching** -- :meth:`CachedApiClient.cached` memoises successful
  results in a per-instance :class:`~cakewalk.cache.ResponseCache`.

Failures are never cached and transport errors from httpx propagate
unchanged. There is no retry and no de-duplication of concurrent identical
calls: each call that misses the cache issues its own request and the last
one to finish owns the entry.
"""

from __future__ import annotations

import copy
import json
import logging
from functools import lru_cache
from typing import Any, Awaitable, Callable, Optional, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from cakewalk.cache import ResponseCache
from cakewalk.exceptions import ConfigError, DecodeError, NotFoundError, error_for_status
from cakewalk.models import ClientOptions

logger = logging.getLogger(__name__)

T = TypeVar("T")

KEY_DELIMITER = ":"


@lru_cache(maxsize=None)
def _adapter(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


class CachedApiClient:
    """Asynchronous Cakewalk API client with an in-memory response cache.

    The client can be used as an async context manager, or directly; in the
    latter case the underlying :class:`httpx.AsyncClient` is created on the
    first request and released by :meth:`aclose`.

    Args:
        api_key: Organisation API key sent as a bearer token.
        options: Cache TTL, base URL and timeout settings.
        cache_ttl: Shortcut overriding ``options.cache_ttl``.
        base_url: Shortcut overriding ``options.base_url``.
        http_client: Pre-configured :class:`httpx.AsyncClient` to send
            requests with. The caller keeps ownership and must close it.
        clock: Time source for cache expiry, mainly for tests.

    Raises:
        ConfigError: If *api_key* is empty.
    """

    default_base_url = "https://api.cakewalk.ai"

    def __init__(
        self,
        api_key: str,
        options: Optional[ClientOptions] = None,
        *,
        cache_ttl: Optional[float] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        if not api_key:
            raise ConfigError("An API key is required to create a Cakewalk client")

        options = options or ClientOptions()
        overrides: dict[str, Any] = {}
        if cache_ttl is not None:
            overrides["cache_ttl"] = cache_ttl
        if base_url is not None:
            overrides["base_url"] = base_url
        if overrides:
            options = ClientOptions(**{**options.model_dump(), **overrides})

        self._api_key = api_key
        self._options = options
        self._base_url = (options.base_url or self.default_base_url).rstrip("/")
        self._cache = ResponseCache(options.cache_ttl, clock=clock)
        self._http_client = http_client
        self._owns_http_client = http_client is None

    @property
    def options(self) -> ClientOptions:
        return self._options

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def cache_ttl(self) -> float:
        return self._options.cache_ttl

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> CachedApiClient:
        self._get_http_client()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    # ------------------------------------------------------------------ #
    # Cached-fetch core
    # ------------------------------------------------------------------ #

    async def cached(self, key: str, producer: Callable[[], Awaitable[T]]) -> T:
        """Return the fresh cached value for *key*, or produce and store one.

        *producer* is awaited at most once, and only on a miss or when the
        stored entry has expired. If it raises, nothing is stored and the
        exception propagates unchanged.

        Callers always receive a deep copy, so changing a returned model
        never alters the stored entry.

        Args:
            key: Cache key, normally built with :meth:`make_key`.
            producer: Zero-argument coroutine function computing the value.

        Returns:
            The cached or freshly produced value.
        """
        entry = self._cache.get(key)
        if entry is not None:
            logger.debug("Cache hit: %s", key)
            return copy.deepcopy(entry.value)

        logger.debug("Cache miss: %s", key)
        value = await producer()
        self._cache.set(key, value)
        return copy.deepcopy(value)

    async def cached_or_none(
        self, key: str, producer: Callable[[], Awaitable[T]]
    ) -> Optional[T]:
        """Like :meth:`cached`, but a 404 from *producer* yields ``None``.

        The not-found outcome is not cached.
        """
        try:
            return await self.cached(key, producer)
        except NotFoundError:
            logger.debug("Not found: %s", key)
            return None

    def make_key(self, *parts: Any) -> str:
        """Build a cache key from an operation tag and its parameters.

        Each part is percent-encoded so that a slug containing the
        delimiter cannot collide with another key. Plain slugs and numbers
        are unchanged, e.g. ``make_key("tag", "python", 1, 10)`` is
        ``"tag:python:1:10"``.
        """
        return KEY_DELIMITER.join(quote(str(part), safe="") for part in parts)

    def clear_cache(self) -> None:
        """Drop every cached entry."""
        logger.debug("Clearing %d cache entries", len(self._cache))
        self._cache.clear()

    def clear_cache_key(self, key: str) -> None:
        """Drop the cached entry for *key*, if any."""
        self._cache.invalidate(key)

    def cache_stats(self) -> dict[str, Any]:
        """Return size and TTL statistics for this client's cache."""
        return self._cache.stats()

    # ------------------------------------------------------------------ #
    # Authenticated fetch
    # ------------------------------------------------------------------ #

    async def request(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET ``base_url + path`` and return the decoded JSON body.

        This method performs no caching.

        Args:
            path: Endpoint path beginning with ``/``.
            params: Query parameters, URL-encoded in insertion order.

        Returns:
            The JSON-decoded response body.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On 5xx.
            ApiError: On any other non-2xx status.
            DecodeError: If the body is not valid JSON.
        """
        url = f"{self._base_url}{path}"
        client = self._get_http_client()
        logger.debug("GET %s params=%s", url, params)

        response = await client.get(url, params=params, headers=self._build_headers())

        if not response.is_success:
            raise error_for_status(response.status_code, response.reason_phrase or "")

        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(f"Invalid JSON in response from {path}: {exc}") from exc

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _build_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self._options.timeout,
                follow_redirects=True,
            )
        return self._http_client

    @staticmethod
    def _validate(shape: Any, data: Any, path: str) -> Any:
        """Validate decoded JSON against *shape*, raising :class:`DecodeError`."""
        try:
            return _adapter(shape).validate_python(data)
        except ValidationError as exc:
            raise DecodeError(
                f"Unexpected response shape from {path}: {exc.error_count()} validation error(s)"
            ) from exc

    async def _fetch(
        self, shape: Any, path: str, params: Optional[dict[str, Any]] = None
    ) -> Any:
        data = await self.request(path, params)
        return self._validate(shape, data, path)

    @staticmethod
    def _segment(value: Any) -> str:
        """Percent-encode a value for use as a single URL path segment."""
        return quote(str(value), safe="")
