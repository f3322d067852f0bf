"""
Posts component models.

Frontmatter is validated with pydantic (like the other domain entities);
query results are frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Frontmatter / Entities ---


class SeriesRef(BaseModel):
    id: str = Field(min_length=1)
    order: int = Field(ge=1)


class PostFrontmatter(BaseModel):
    """Validated frontmatter of one post. Unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=160)
    # Wall clock in the site timezone; kept as authored.
    pub_datetime: str | datetime | date = Field(alias="pubDatetime")
    mod_datetime: str | datetime | date | None = Field(default=None, alias="modDatetime")
    author: str = ""
    tags: list[str] = Field(default_factory=lambda: ["others"])
    featured: bool = False
    draft: bool = False
    og_image: str | None = Field(default=None, alias="ogImage")
    canonical_url: str | None = Field(default=None, alias="canonicalURL")
    hide_edit_post: bool = Field(default=False, alias="hideEditPost")
    series: SeriesRef | None = None

    @field_validator("tags")
    @classmethod
    def _tags_not_empty(cls, value: list[str]) -> list[str]:
        tags = [t.strip() for t in value if t and t.strip()]
        return tags or ["others"]

    @field_validator("canonical_url")
    @classmethod
    def _canonical_is_absolute(cls, value: str | None) -> str | None:
        if value is not None and not value.startswith(("http://", "https://")):
            raise ValueError("canonicalURL must be an absolute http(s) URL")
        return value


class BlogPost(BaseModel):
    """A loaded post. `id` is "<locale>/<path>/<slug>"."""

    id: str
    locale: str
    slug: str
    body: str = ""
    file_path: str | None = None
    data: PostFrontmatter

    @property
    def title(self) -> str:
        return self.data.title


# --- Load Errors ---


@dataclass(frozen=True)
class PostLoadError:
    """A content file that could not be turned into a post."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class LoadResult:
    posts: tuple[BlogPost, ...]
    errors: tuple[PostLoadError, ...] = ()


# --- Query Results ---


@dataclass(frozen=True)
class PostWithFallback:
    """A post served for `requested_locale`, possibly from another locale."""

    post: BlogPost
    requested_locale: str
    is_fallback: bool


@dataclass(frozen=True)
class NavigationPost:
    id: str
    title: str
    file_path: str | None


@dataclass(frozen=True)
class AdjacentPosts:
    previous: NavigationPost | None
    next: NavigationPost | None


@dataclass(frozen=True)
class Tag:
    tag: str
    tag_name: str


@dataclass(frozen=True)
class ReadingTime:
    minutes: int
    words: int
    display_text: str


@dataclass(frozen=True)
class Page:
    """One page of a paginated listing (1-based)."""

    items: tuple[Any, ...]
    number: int
    total_pages: int
    total_items: int
    has_previous: bool = False
    has_next: bool = False
    page_numbers: tuple[int, ...] = field(default_factory=tuple)
