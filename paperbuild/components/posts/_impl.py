"""
Markdown post loading and small text helpers.

Key behaviors:
- Posts live at <root>/<locale>/**/*.md with YAML frontmatter between
  "---" fences
- A bad file becomes a PostLoadError; it never aborts the whole load
- Slugs are kebab-case and keep non-ASCII letters (Georgian tags survive)
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import BlogPost, LoadResult, Page, PostFrontmatter, PostLoadError, ReadingTime

logger = logging.getLogger(__name__)

DEFAULT_WPM = 200

_FENCE = "---"
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_WORD = re.compile(r"[^\W_]+")


# --- Slugs ---


def slugify(text: str) -> str:
    """Kebab-case a string: "Hello World" -> "hello-world", "TypeScript" -> "type-script"."""
    text = _ACRONYM_BOUNDARY.sub(r"\1-\2", text)
    text = _CAMEL_BOUNDARY.sub(r"\1-\2", text)
    return "-".join(word.lower() for word in _WORD.findall(text))


def slugify_all(items: Iterable[str]) -> list[str]:
    return [slugify(item) for item in items]


def last_path_segment(path: str | None) -> str:
    """Last "/"-separated segment of a path or id; "" for empty input."""
    if not path:
        return ""
    return path.rstrip("/").split("/")[-1] or path


def get_post_path(post: BlogPost) -> str:
    """Site-relative URL path of a post: /<locale>/posts/<slug>/."""
    return f"/{post.locale}/posts/{post.slug}/"


# --- Reading time ---


def calculate_reading_time(content: str, words_per_minute: int = DEFAULT_WPM) -> ReadingTime:
    """Reading time rounded up to whole minutes, never below one."""
    if not content:
        return ReadingTime(minutes=1, words=0, display_text="1 min read")

    words = len(content.split())
    minutes = max(1, math.ceil(words / words_per_minute))
    return ReadingTime(
        minutes=minutes,
        words=words,
        display_text="1 min read" if minutes == 1 else f"{minutes} min read",
    )


def format_reading_time(result: ReadingTime) -> str:
    return f"{result.display_text} • {result.words:,} words"


# --- Pagination ---


def paginate(posts: Sequence[Any], page: int, per_page: int) -> Page:
    """Slice a listing into 1-based pages. Out-of-range pages are clamped."""
    total_pages = max(1, math.ceil(len(posts) / per_page))
    number = min(max(page, 1), total_pages)
    start = (number - 1) * per_page
    return Page(
        items=tuple(posts[start : start + per_page]),
        number=number,
        total_pages=total_pages,
        total_items=len(posts),
        has_previous=number > 1,
        has_next=number < total_pages,
        page_numbers=tuple(range(1, total_pages + 1)),
    )


# --- Frontmatter ---


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """
    Split a Markdown document into (frontmatter, body).

    Raises ValueError if the fence is unterminated or the YAML is not a mapping.
    """
    lines = text.lstrip("\ufeff").splitlines(keepends=True)
    if not lines or lines[0].strip() != _FENCE:
        return {}, text

    for index, line in enumerate(lines[1:], start=1):
        if line.strip() == _FENCE:
            raw = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            break
    else:
        raise ValueError("Frontmatter block is not terminated")

    try:
        data = yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in frontmatter: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Frontmatter must be a YAML mapping")
    return data, body.lstrip("\n")


def _post_id(
    path: Path, root: Path, locales: Iterable[str], default_locale: str
) -> tuple[str, str]:
    parts = list(path.relative_to(root).with_suffix("").parts)
    parts[-1] = slugify(parts[-1])
    if parts[0] in set(locales):
        locale = parts[0]
    else:
        locale = default_locale
        parts.insert(0, locale)
    return locale, "/".join(parts)


def load_post(
    path: Path,
    root: Path,
    *,
    locales: Iterable[str],
    default_locale: str,
    default_author: str = "",
) -> BlogPost | PostLoadError:
    """Load one Markdown file. Returns a PostLoadError instead of raising."""
    try:
        text = path.read_text(encoding="utf-8")
        data, body = split_frontmatter(text)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        return PostLoadError(code="UNREADABLE", message=f"{path}: {e}", field=str(path))

    data.setdefault("author", default_author)
    try:
        frontmatter = PostFrontmatter.model_validate(data)
    except ValidationError as e:
        return PostLoadError(code="INVALID_FRONTMATTER", message=f"{path}: {e}", field=str(path))

    locale, post_id = _post_id(path, root, locales, default_locale)
    return BlogPost(
        id=post_id,
        locale=locale,
        slug=last_path_segment(post_id),
        body=body,
        file_path=str(path),
        data=frontmatter,
    )


def load_posts(
    root: Path,
    *,
    locales: Iterable[str],
    default_locale: str,
    default_author: str = "",
) -> LoadResult:
    """Load every *.md file under root, collecting per-file errors."""
    locales = list(locales)
    posts: list[BlogPost] = []
    errors: list[PostLoadError] = []

    if not root.is_dir():
        logger.warning(f"Content directory {root} does not exist")
        return LoadResult(posts=())

    for path in sorted(root.rglob("*.md")):
        result = load_post(
            path,
            root,
            locales=locales,
            default_locale=default_locale,
            default_author=default_author,
        )
        if isinstance(result, PostLoadError):
            logger.error(f"Skipping post: {result.message}")
            errors.append(result)
        else:
            posts.append(result)

    return LoadResult(posts=tuple(posts), errors=tuple(errors))
