"""Pydantic models for every payload the Cakewalk API returns.

The models fall into three groups:

**Client configuration** -- :class:`ClientOptions`, the immutable options
object accepted by both client flavours.

**Articles flavour** -- :class:`Category`, :class:`Tag`,
:class:`ArticleSummary`, :class:`Article` and :class:`ArticlesResponse`.
The API sends camelCase keys; the models expose snake_case attributes with
camelCase aliases and accept either spelling on input.

**Posts flavour** -- :class:`Author`, the structured content sections
(a union keyed on ``type``; unrecognised types become
:class:`UnknownSection` instead of failing the post), :class:`StructuredContent`,
:class:`Post`, :class:`Pagination`, :class:`PostsResponse` and
:class:`PostResponse`.

These are data transfer shapes owned by the remote service. Every model
uses ``extra="allow"`` so fields the API adds later are preserved in
``model_extra`` instead of being dropped.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Discriminator, Field


DEFAULT_CACHE_TTL = 300


class ClientOptions(BaseModel):
    """Options shared by :class:`~cakewalk.client.ArticlesClient` and
    :class:`~cakewalk.client.BlogClient`.

    A ``base_url`` of ``None`` selects the flavour's production origin.
    ``cache_ttl`` of ``0`` stores entries that are already stale, so every
    call goes to the network.
    """

    model_config = ConfigDict(frozen=True)

    cache_ttl: float = Field(
        default=DEFAULT_CACHE_TTL, ge=0, description="Cache TTL in seconds"
    )
    base_url: Optional[str] = Field(
        default=None, description="Override the API origin"
    )
    timeout: float = Field(
        default=30.0, gt=0, description="Transport timeout in seconds"
    )


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


# --- Articles ---


class Category(_Payload):
    slug: str
    name: str


class Tag(_Payload):
    slug: str
    name: str


class ArticleSummary(_Payload):
    """Article as it appears in list responses (no body)."""

    id: str
    slug: str
    headline: str
    meta_description: str = Field(default="", alias="metaDescription")
    reading_time: int = Field(default=0, alias="readingTime")
    published_at: Optional[str] = Field(default=None, alias="publishedAt")
    categories: list[Category] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)


class Article(ArticleSummary):
    """A full article, including its Markdown and HTML body."""

    content: str = ""
    content_html: str = Field(default="", alias="contentHtml")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    related_articles: Optional[list[ArticleSummary]] = Field(
        default=None, alias="relatedArticles"
    )


class ArticlesResponse(_Payload):
    articles: list[ArticleSummary] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 10
    total_pages: int = Field(default=0, alias="totalPages")


# --- Posts ---


class Author(_Payload):
    name: Optional[str] = None
    title: Optional[str] = None
    photo_url: Optional[str] = None
    url: Optional[str] = None
    bio: Optional[str] = None
    byline: Optional[str] = None


class IntroSection(_Payload):
    type: Literal["intro"] = "intro"
    content: str


class HeadingSection(_Payload):
    type: Literal["heading"] = "heading"
    heading: str
    level: Literal[2, 3] = 2
    content: Optional[str] = None


class TableSection(_Payload):
    type: Literal["table"] = "table"
    caption: Optional[str] = None
    headers: list[str] = Field(default_factory=list)
    rows: list[list[str]] = Field(default_factory=list)


class FAQSection(_Payload):
    type: Literal["faq"] = "faq"
    question: str
    answer: str


class HowToStepSection(_Payload):
    type: Literal["how_to_step"] = "how_to_step"
    step: int
    title: str
    description: str


class KeyTakeawaysSection(_Payload):
    type: Literal["key_takeaways"] = "key_takeaways"
    facts: list[str] = Field(default_factory=list)


class UnknownSection(_Payload):
    """A section whose ``type`` this version of the package does not model.

    Its fields are kept in ``model_extra``.
    """

    type: str


_SECTION_TYPES = frozenset(
    {"intro", "heading", "table", "faq", "how_to_step", "key_takeaways"}
)


def _section_tag(value: Any) -> str:
    if isinstance(value, dict):
        kind = value.get("type")
    else:
        kind = getattr(value, "type", None)
    return kind if isinstance(kind, str) and kind in _SECTION_TYPES else "unknown"


ContentSection = Annotated[
    Union[
        Annotated[IntroSection, pydantic.Tag("intro")],
        Annotated[HeadingSection, pydantic.Tag("heading")],
        Annotated[TableSection, pydantic.Tag("table")],
        Annotated[FAQSection, pydantic.Tag("faq")],
        Annotated[HowToStepSection, pydantic.Tag("how_to_step")],
        Annotated[KeyTakeawaysSection, pydantic.Tag("key_takeaways")],
        Annotated[UnknownSection, pydantic.Tag("unknown")],
    ],
    Discriminator(_section_tag),
]


class Citation(_Payload):
    text: str
    source_url: str


class StructuredContentMeta(_Payload):
    title: str
    description: str
    excerpt: Optional[str] = None


class StructuredContent(_Payload):
    """Section-by-section body of a post, used for rich rendering and schema.org output."""

    meta: Optional[StructuredContentMeta] = None
    sections: list[ContentSection] = Field(default_factory=list)
    citations: Optional[list[Citation]] = None


class FaqQuestion(_Payload):
    question: str
    answer: str


class Post(_Payload):
    """A project post with its rendered bodies, SEO metadata and author."""

    id: int
    title: str
    slug: str
    status: str = "published"
    post_type: str = ""
    post_format: str = ""
    primary_keyword: str = ""
    secondary_keywords: list[str] = Field(default_factory=list)
    excerpt: Optional[str] = None
    body_markdown: Optional[str] = None
    body_html: Optional[str] = None
    structured_content: Optional[StructuredContent] = None
    schema_json_ld: Optional[list[dict[str, Any]]] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    featured_image_url: Optional[str] = None
    ai_summary: Optional[str] = None
    faq_questions: list[FaqQuestion] = Field(default_factory=list)
    author: Optional[Author] = None
    published_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class Pagination(_Payload):
    total: int = 0
    limit: int = 50
    offset: int = 0
    has_more: bool = False


class PostsResponse(_Payload):
    posts: list[Post] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination)


class PostResponse(_Payload):
    """Envelope returned by the single-post endpoints."""

    post: Post
