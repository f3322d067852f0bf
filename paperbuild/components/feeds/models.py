"""
Feeds component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class FeedItem:
    """One <item> of an RSS channel. Text fields are already escaped."""

    title: str
    link: str
    description: str
    pub_date: datetime
    categories: tuple[str, ...] = ()


@dataclass(frozen=True)
class SitemapEntry:
    """Entry for sitemap generation."""

    loc: str
    lastmod: str | None = None
    changefreq: str | None = None
    priority: float | None = None
