"""
Static build pipeline.

Loads rules and posts once, fixes "now" for the whole pass, then writes
feeds, sitemap, robots.txt and a JSON post index per locale.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from paperbuild.adapters.clock import SystemClock
from paperbuild.adapters.markdown_source import MarkdownPostSource
from paperbuild.app_shell.config import Settings
from paperbuild.components.feeds import absolute_url, build_robots_txt, build_rss, build_sitemap
from paperbuild.components.postfilter import ClockPort, FilterEnv, make_filter_env
from paperbuild.components.posts import (
    PostLoadError,
    PostRepository,
    calculate_reading_time,
    get_post_path,
)
from paperbuild.components.seo import post_structured_data
from paperbuild.components.tzresolve import resolve_instant
from paperbuild.rules.loader import load_rules
from paperbuild.rules.models import SiteRules

logger = logging.getLogger(__name__)


@dataclass
class BuildContext:
    rules: SiteRules
    source: MarkdownPostSource
    env: FilterEnv
    repo: PostRepository

    @classmethod
    def create(
        cls,
        settings: Settings,
        clock: ClockPort | None = None,
        rules: SiteRules | None = None,
    ) -> BuildContext:
        rules = rules or load_rules(settings.rules_path)
        source = MarkdownPostSource(settings.content_dir, rules)
        env = make_filter_env(
            rules,
            clock=clock or SystemClock(),
            is_development_mode=settings.is_development_mode,
        )
        repo = PostRepository(source, env, default_locale=rules.default_locale)
        return cls(rules=rules, source=source, env=env, repo=repo)


@dataclass
class BuildReport:
    written: list[Path] = field(default_factory=list)
    published_count: int = 0
    errors: list[PostLoadError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors


def post_index(ctx: BuildContext, locale: str) -> list[dict[str, Any]]:
    """Listing for one locale, with fallbacks for untranslated posts."""
    entries: list[dict[str, Any]] = []
    for item in ctx.repo.get_by_locale_with_fallback(locale):
        post = item.post
        url = absolute_url(ctx.rules, get_post_path(post))
        publish_ms = resolve_instant(
            post.data.pub_datetime, ctx.rules.timezone, fallback_ms=ctx.env.now_ms
        ).utc_ms
        entries.append(
            {
                "id": post.id,
                "slug": post.slug,
                "locale": post.locale,
                "isFallback": item.is_fallback,
                "title": post.data.title,
                "description": post.data.description,
                "url": url,
                "pubDatetime": datetime.fromtimestamp(publish_ms / 1000, UTC).isoformat(),
                "tags": post.data.tags,
                "featured": post.data.featured,
                "readingTime": calculate_reading_time(
                    post.body, ctx.rules.reading_time_wpm
                ).display_text,
                "structuredData": post_structured_data(post, ctx.rules, url),
            }
        )
    return entries


def _write(path: Path, content: str, report: BuildReport) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    report.written.append(path)
    logger.info(f"Wrote {path}")


def run_build(ctx: BuildContext, out_dir: Path, version: str = "local") -> BuildReport:
    report = BuildReport(errors=ctx.source.errors)
    rules = ctx.rules

    _write(out_dir / "rss.xml", build_rss(ctx.repo, rules), report)
    for locale in rules.supported_locales:
        _write(out_dir / locale / "rss.xml", build_rss(ctx.repo, rules, locale), report)
        index = post_index(ctx, locale)
        _write(
            out_dir / locale / "posts.json",
            json.dumps(index, ensure_ascii=False, indent=2),
            report,
        )

    _write(out_dir / "sitemap.xml", build_sitemap(ctx.repo, rules), report)
    _write(out_dir / "robots.txt", build_robots_txt(rules), report)

    health = {
        "status": "ok",
        "timestamp": datetime.fromtimestamp(ctx.env.now_ms / 1000, UTC).isoformat(),
        "version": version,
        "environment": "development" if ctx.env.is_development_mode else "production",
        "uptime": "static",
    }
    _write(out_dir / "api" / "health.json", json.dumps(health, indent=2), report)

    report.published_count = len(ctx.repo.get_all())
    logger.info(
        f"Build finished: {report.published_count} published posts, "
        f"{len(report.errors)} skipped files"
    )
    return report
