"""
Feeds component - RSS channel, sitemap and robots.txt.

All three only ever see posts that passed the publication filter via
PostRepository.

Invariants:
- I1: Drafts and not-yet-due posts never appear in a feed or sitemap
- I2: Feed text is escaped; item descriptions carry no markup or URLs
- I3: RSS item count never exceeds rules.rss_limit
"""

from __future__ import annotations

from datetime import UTC, datetime
from email.utils import format_datetime

from paperbuild.components.posts import BlogPost, PostRepository, get_post_path
from paperbuild.components.tzresolve import LocalDateTimeLike, resolve_instant
from paperbuild.domain.sanitize import sanitize_markdown_urls
from paperbuild.rules.models import SiteRules

from ._impl import escape_html, sanitize_description
from .models import FeedItem, SitemapEntry


def _instant(value: LocalDateTimeLike, rules: SiteRules, fallback_ms: int) -> datetime:
    utc_ms = resolve_instant(value, rules.timezone, fallback_ms=fallback_ms).utc_ms
    return datetime.fromtimestamp(utc_ms / 1000, UTC)


def absolute_url(rules: SiteRules, path: str) -> str:
    return rules.website.rstrip("/") + "/" + path.lstrip("/")


# --- RSS ---


def build_feed_items(
    repo: PostRepository,
    rules: SiteRules,
    locale: str | None = None,
) -> list[FeedItem]:
    """Newest published posts (optionally one locale) as feed items."""
    posts = repo.get_by_locale(locale) if locale else repo.get_sorted()
    items: list[FeedItem] = []
    for post in posts[: rules.rss_limit]:
        items.append(
            FeedItem(
                title=escape_html(post.data.title),
                link=absolute_url(rules, get_post_path(post)),
                description=sanitize_description(sanitize_markdown_urls(post.data.description)),
                pub_date=_instant(post.data.pub_datetime, rules, repo.env.now_ms),
                categories=tuple(escape_html(tag) for tag in post.data.tags),
            )
        )
    return items


def render_rss_xml(
    items: list[FeedItem],
    rules: SiteRules,
    *,
    locale: str | None,
    build_date: datetime,
) -> str:
    """Render an RSS 2.0 channel."""
    feed_path = f"{locale}/rss.xml" if locale else "rss.xml"
    language = locale or rules.default_locale

    xml_parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">',
        "  <channel>",
        f"    <title>{escape_html(rules.title)}</title>",
        f"    <link>{escape_html(rules.website)}</link>",
        f"    <description>{escape_html(rules.description)}</description>",
        f"    <language>{escape_html(language)}</language>",
        f"    <lastBuildDate>{format_datetime(build_date, usegmt=True)}</lastBuildDate>",
        f'    <atom:link href="{escape_html(absolute_url(rules, feed_path))}" '
        'rel="self" type="application/rss+xml" />',
    ]

    for item in items:
        xml_parts.append("    <item>")
        xml_parts.append(f"      <title>{item.title}</title>")
        xml_parts.append(f"      <link>{escape_html(item.link)}</link>")
        xml_parts.append(f'      <guid isPermaLink="true">{escape_html(item.link)}</guid>')
        xml_parts.append(f"      <description>{item.description}</description>")
        xml_parts.append(f"      <pubDate>{format_datetime(item.pub_date, usegmt=True)}</pubDate>")
        for category in item.categories:
            xml_parts.append(f"      <category>{category}</category>")
        xml_parts.append("    </item>")

    xml_parts.append("  </channel>")
    xml_parts.append("</rss>")
    return "\n".join(xml_parts)


def build_rss(repo: PostRepository, rules: SiteRules, locale: str | None = None) -> str:
    """RSS feed for the whole site, or for one locale."""
    build_date = datetime.fromtimestamp(repo.env.now_ms / 1000, UTC)
    items = build_feed_items(repo, rules, locale)
    return render_rss_xml(items, rules, locale=locale, build_date=build_date)


# --- Sitemap ---


def _lastmod(post: BlogPost, rules: SiteRules, now_ms: int) -> str:
    stamp = post.data.mod_datetime or post.data.pub_datetime
    return _instant(stamp, rules, now_ms).strftime("%Y-%m-%d")


def build_sitemap_entries(repo: PostRepository, rules: SiteRules) -> list[SitemapEntry]:
    """Locale home pages followed by every published post."""
    entries = [
        SitemapEntry(loc=absolute_url(rules, f"{locale}/"), changefreq="daily", priority=1.0)
        for locale in rules.supported_locales
    ]
    for post in repo.get_sorted():
        entries.append(
            SitemapEntry(
                loc=absolute_url(rules, get_post_path(post)),
                lastmod=_lastmod(post, rules, repo.env.now_ms),
                changefreq="weekly",
                priority=0.8,
            )
        )
    return entries


def render_sitemap_xml(entries: list[SitemapEntry]) -> str:
    """
    Render sitemap entries to XML string.

    Args:
        entries: List of SitemapEntry objects

    Returns:
        Valid sitemap.xml content
    """
    xml_parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]

    for entry in entries:
        xml_parts.append("  <url>")
        xml_parts.append(f"    <loc>{escape_html(entry.loc)}</loc>")
        if entry.lastmod:
            xml_parts.append(f"    <lastmod>{entry.lastmod}</lastmod>")
        if entry.changefreq:
            xml_parts.append(f"    <changefreq>{entry.changefreq}</changefreq>")
        if entry.priority is not None:
            xml_parts.append(f"    <priority>{entry.priority}</priority>")
        xml_parts.append("  </url>")

    xml_parts.append("</urlset>")
    return "\n".join(xml_parts)


def build_sitemap(repo: PostRepository, rules: SiteRules) -> str:
    return render_sitemap_xml(build_sitemap_entries(repo, rules))


# --- Robots ---


def build_robots_txt(rules: SiteRules) -> str:
    return f"User-agent: *\nAllow: /\n\nSitemap: {absolute_url(rules, 'sitemap.xml')}\n"
