"""Settings resolution for the ``cakewalk`` command line.

The library clients take their configuration as constructor arguments; this
module exists for the CLI, which has to find an API key and project id
somewhere. :func:`resolve_settings` merges, from highest to lowest
precedence:

1. CLI flags (``--api-key``, ``--project-id``, ``--base-url``)
2. Environment variables (``CAKEWALK_API_KEY``, ``CAKEWALK_PROJECT_ID``,
   ``CAKEWALK_BASE_URL``, ``CAKEWALK_CACHE_TTL``)
3. Project config (``./cakewalk.json``)
4. Defaults

:func:`build_blog_client` and :func:`build_articles_client` turn the
resolved :class:`Settings` into ready-to-use clients.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError

from cakewalk.client import ArticlesClient, BlogClient
from cakewalk.exceptions import ConfigError
from cakewalk.models import DEFAULT_CACHE_TTL, ClientOptions

_PROJECT_CONFIG_FILENAME = "cakewalk.json"

ENV_API_KEY = "CAKEWALK_API_KEY"
ENV_PROJECT_ID = "CAKEWALK_PROJECT_ID"
ENV_BASE_URL = "CAKEWALK_BASE_URL"
ENV_CACHE_TTL = "CAKEWALK_CACHE_TTL"


class Settings(BaseModel):
    """Effective CLI configuration after precedence resolution."""

    api_key: Optional[str] = None
    project_id: Optional[str] = None
    base_url: Optional[str] = None
    cache_ttl: float = Field(default=DEFAULT_CACHE_TTL, ge=0)

    def client_options(self) -> ClientOptions:
        return ClientOptions(cache_ttl=self.cache_ttl, base_url=self.base_url)


def load_project_config(directory: Optional[Path] = None) -> Optional[dict[str, Any]]:
    """Load ``cakewalk.json`` from *directory* (default: the working directory).

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file cannot be read or is not a JSON object.
    """
    path = (directory or Path.cwd()) / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return data


def _env_cache_ttl() -> Optional[float]:
    raw = os.environ.get(ENV_CACHE_TTL)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{ENV_CACHE_TTL} must be a number of seconds, got {raw!r}") from None


def resolve_settings(
    api_key: Optional[str] = None,
    project_id: Optional[str] = None,
    base_url: Optional[str] = None,
    cache_ttl: Optional[float] = None,
) -> Settings:
    """Resolve CLI settings with the full precedence chain.

    Arguments are the CLI flag values; ``None`` means "not given".

    Raises:
        ConfigError: For an invalid project file or environment value.
    """
    # 4 + 3. Defaults overlaid with the project file
    merged: dict[str, Any] = {}
    project = load_project_config()
    if project is not None:
        for field in Settings.model_fields:
            if project.get(field) is not None:
                merged[field] = project[field]

    # 2. Environment variables
    env_values = {
        "api_key": os.environ.get(ENV_API_KEY) or None,
        "project_id": os.environ.get(ENV_PROJECT_ID) or None,
        "base_url": os.environ.get(ENV_BASE_URL) or None,
        "cache_ttl": _env_cache_ttl(),
    }
    merged.update({k: v for k, v in env_values.items() if v is not None})

    # 1. CLI flags
    flags = {
        "api_key": api_key,
        "project_id": project_id,
        "base_url": base_url,
        "cache_ttl": cache_ttl,
    }
    merged.update({k: v for k, v in flags.items() if v is not None})

    try:
        return Settings(**merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def build_articles_client(settings: Settings) -> ArticlesClient:
    """Create an :class:`ArticlesClient` from resolved settings.

    Raises:
        ConfigError: If no API key was configured.
    """
    if not settings.api_key:
        raise ConfigError(f"No API key configured. Pass --api-key or set {ENV_API_KEY}.")
    return ArticlesClient(settings.api_key, settings.client_options())


def build_blog_client(settings: Settings) -> BlogClient:
    """Create a :class:`BlogClient` from resolved settings.

    Raises:
        ConfigError: If the API key or project id is missing.
    """
    if not settings.api_key:
        raise ConfigError(f"No API key configured. Pass --api-key or set {ENV_API_KEY}.")
    if not settings.project_id:
        raise ConfigError(
            f"No project id configured. Pass --project-id or set {ENV_PROJECT_ID}."
        )
    return BlogClient(settings.api_key, settings.project_id, settings.client_options())
