"""
Posts component - published-post queries over the content collection.

Every listing goes through the publication filter, so drafts and
not-yet-due scheduled posts never reach pages, feeds or sitemaps.

Invariants:
- I1: Only records passing `is_published` are returned
- I2: Sorted listings are newest first by modDatetime, else pubDatetime
- I3: Locale fallback yields at most one post per slug
"""

from __future__ import annotations

from collections.abc import Mapping

from paperbuild.components.postfilter import FilterEnv, is_published
from paperbuild.components.tzresolve import resolve_instant

from ._impl import paginate, slugify
from .models import AdjacentPosts, BlogPost, NavigationPost, Page, PostWithFallback, Tag
from .ports import PostSourcePort


class PostRepository:
    """Query surface used by pages, feeds and the sitemap."""

    def __init__(
        self,
        source: PostSourcePort,
        env: FilterEnv,
        *,
        default_locale: str = "en",
    ) -> None:
        self._source = source
        self._env = env
        self._default_locale = default_locale

    @property
    def env(self) -> FilterEnv:
        return self._env

    def _sort_seconds(self, post: BlogPost) -> int:
        stamp = post.data.mod_datetime or post.data.pub_datetime
        # Unparseable dates sort last rather than at "now".
        instant = resolve_instant(stamp, self._env.timezone, fallback_ms=0)
        return instant.utc_ms // 1000

    def get_all(self) -> list[BlogPost]:
        """All published posts, in source order."""
        return [post for post in self._source.list_posts() if is_published(post.data, self._env)]

    def get_sorted(self) -> list[BlogPost]:
        """All published posts, newest first."""
        return sorted(self.get_all(), key=self._sort_seconds, reverse=True)

    def get_by_locale(self, locale: str) -> list[BlogPost]:
        return [post for post in self.get_sorted() if post.locale == locale]

    def get_by_locale_with_fallback(
        self,
        target_locale: str,
        include_fallback: bool = True,
    ) -> list[PostWithFallback]:
        """
        Best available version of every slug for `target_locale`.

        A missing translation is filled from the default locale first,
        then from any other locale.
        """
        by_slug: dict[str, dict[str, BlogPost]] = {}
        for post in self.get_sorted():
            by_slug.setdefault(post.slug, {}).setdefault(post.locale, post)

        result: list[PostWithFallback] = []
        for versions in by_slug.values():
            if target_locale in versions:
                result.append(PostWithFallback(versions[target_locale], target_locale, False))
            elif include_fallback:
                post = versions.get(self._default_locale) or next(iter(versions.values()))
                result.append(PostWithFallback(post, target_locale, True))
        return result

    def has_translation(self, slug: str, locale: str) -> bool:
        return any(p.slug == slug and p.locale == locale for p in self.get_all())

    def get_translations(self, slug: str) -> dict[str, BlogPost]:
        """Map of locale to post for every published translation of `slug`."""
        return {p.locale: p for p in self.get_sorted() if p.slug == slug}

    def get_by_tag(self, tag: str) -> list[BlogPost]:
        """Posts carrying `tag` (compared as slugs)."""
        tag_slug = slugify(tag)
        return [p for p in self.get_sorted() if tag_slug in {slugify(t) for t in p.data.tags}]

    def get_featured(self) -> list[BlogPost]:
        return [p for p in self.get_sorted() if p.data.featured]

    def get_series(self, series_id: str, locale: str) -> list[PostWithFallback]:
        """Parts of a series in ascending order, with locale fallback."""
        parts = [
            entry
            for entry in self.get_by_locale_with_fallback(locale)
            if entry.post.data.series and entry.post.data.series.id == series_id
        ]
        return sorted(parts, key=lambda e: e.post.data.series.order)  # type: ignore[union-attr]

    def get_unique_tags(
        self,
        locale: str | None = None,
        translations: Mapping[str, Mapping[str, str]] | None = None,
    ) -> list[Tag]:
        """
        Unique tags across published posts, sorted by slug.

        Args:
            locale: Restrict to posts in this locale and translate names.
            translations: locale -> {tag slug: display name}.
        """
        posts = self.get_by_locale(locale) if locale else self.get_all()
        names = (translations or {}).get(locale or "", {})

        seen: dict[str, Tag] = {}
        for post in posts:
            for raw in post.data.tags:
                tag_slug = slugify(raw)
                if tag_slug not in seen:
                    seen[tag_slug] = Tag(tag=tag_slug, tag_name=names.get(tag_slug, raw))
        return sorted(seen.values(), key=lambda t: t.tag)

    def get_page(self, locale: str, page: int, per_page: int) -> Page:
        return paginate(self.get_by_locale(locale), page, per_page)


def get_adjacent_posts(posts: list[BlogPost], current_post_id: str) -> AdjacentPosts:
    """Previous/next neighbours of a post in an already ordered listing."""
    navigation = [NavigationPost(id=p.id, title=p.title, file_path=p.file_path) for p in posts]
    index = next((i for i, p in enumerate(navigation) if p.id == current_post_id), -1)
    if index == -1:
        return AdjacentPosts(previous=None, next=None)
    return AdjacentPosts(
        previous=navigation[index - 1] if index > 0 else None,
        next=navigation[index + 1] if index < len(navigation) - 1 else None,
    )
