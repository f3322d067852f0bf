"""
SEO component - social preview URL and schema.org structured data.

JSON-LD dates are the resolved UTC instants of the wall-clock frontmatter
values, so search engines see the same moment the scheduler used.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any
from urllib.parse import urljoin

from paperbuild.components.posts import BlogPost, calculate_reading_time
from paperbuild.components.tzresolve import LocalDateTimeLike, resolve_instant
from paperbuild.rules.models import SiteRules

SCHEMA_CONTEXT = "https://schema.org"


def resolve_og_image_url(
    og_image: str | None,
    slug: str,
    site_url: str,
    *,
    dynamic_og_image: bool = True,
) -> str | None:
    """
    Absolute URL of a post's preview image.

    Priority: explicit frontmatter image (remote or site-relative), then the
    generated /posts/<slug>/index.png when dynamic images are enabled.
    """
    url = og_image or None
    if url is None and dynamic_og_image:
        url = f"/posts/{slug}/index.png"
    if url is None:
        return None
    return urljoin(site_url, url)


def _iso(value: LocalDateTimeLike, timezone: str) -> str:
    # Fallback 0 keeps output deterministic for unparseable values.
    utc_ms = resolve_instant(value, timezone, fallback_ms=0).utc_ms
    return datetime.fromtimestamp(utc_ms / 1000, UTC).isoformat().replace("+00:00", "Z")


def post_structured_data(post: BlogPost, rules: SiteRules, post_url: str) -> dict[str, Any]:
    """BlogPosting JSON-LD for one post."""
    data = post.data
    published = _iso(data.pub_datetime, rules.timezone)
    modified = _iso(data.mod_datetime, rules.timezone) if data.mod_datetime else published
    image = resolve_og_image_url(
        data.og_image,
        post.slug,
        rules.website,
        dynamic_og_image=rules.dynamic_og_image,
    )

    schema: dict[str, Any] = {
        "@context": SCHEMA_CONTEXT,
        "@type": "BlogPosting",
        "headline": data.title,
        "description": data.description,
        "author": {"@type": "Person", "name": data.author or rules.author},
        "publisher": {"@type": "Organization", "name": rules.title, "url": rules.website},
        "datePublished": published,
        "dateModified": modified,
        "mainEntityOfPage": {"@type": "WebPage", "@id": post_url},
        "url": post_url,
        "inLanguage": post.locale,
        "wordCount": calculate_reading_time(post.body, rules.reading_time_wpm).words,
        "keywords": ", ".join(data.tags),
    }
    if image:
        schema["image"] = {"@type": "ImageObject", "url": image}
    return schema


def breadcrumb_structured_data(items: list[tuple[str, str | None]]) -> dict[str, Any]:
    """BreadcrumbList JSON-LD from (name, url) pairs; the last item may omit its url."""
    elements: list[dict[str, Any]] = []
    for position, (name, url) in enumerate(items, start=1):
        element: dict[str, Any] = {"@type": "ListItem", "position": position, "name": name}
        if url:
            element["item"] = url
        elements.append(element)
    return {"@context": SCHEMA_CONTEXT, "@type": "BreadcrumbList", "itemListElement": elements}
