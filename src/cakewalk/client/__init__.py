"""Asynchronous clients for the Cakewalk content API.

Classes:
    :class:`CachedApiClient` -- shared core: auth headers, error mapping and
    the in-memory response cache.
    :class:`ArticlesClient` -- organisation-wide articles, categories and tags.
    :class:`BlogClient` -- posts of a single project.

All clients are async context managers::

    from cakewalk.client import BlogClient

    async with BlogClient(api_key, project_id) as client:
        posts = await client.get_posts()
"""

from cakewalk.client.articles import ArticlesClient
from cakewalk.client.base import CachedApiClient
from cakewalk.client.posts import BlogClient

__all__ = ["CachedApiClient", "ArticlesClient", "BlogClient"]
