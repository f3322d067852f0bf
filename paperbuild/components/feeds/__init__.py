"""Feeds component - RSS, sitemap and robots.txt for published posts."""

from ._impl import MAX_DESCRIPTION_CHARS, escape_html, sanitize_description, strip_tags
from .component import (
    absolute_url,
    build_feed_items,
    build_robots_txt,
    build_rss,
    build_sitemap,
    build_sitemap_entries,
    render_rss_xml,
    render_sitemap_xml,
)
from .models import FeedItem, SitemapEntry

__all__ = [
    # Entry points
    "build_rss",
    "build_sitemap",
    "build_robots_txt",
    "build_feed_items",
    "build_sitemap_entries",
    "render_rss_xml",
    "render_sitemap_xml",
    "absolute_url",
    # Text helpers
    "MAX_DESCRIPTION_CHARS",
    "escape_html",
    "sanitize_description",
    "strip_tags",
    # Models
    "FeedItem",
    "SitemapEntry",
]
