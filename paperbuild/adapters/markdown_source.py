"""
Filesystem post source.

Reads the Markdown collection once and serves it from memory for the rest
of the build.
"""

from __future__ import annotations

from pathlib import Path

from paperbuild.components.posts import BlogPost, LoadResult, PostLoadError, load_posts
from paperbuild.rules.models import SiteRules


class MarkdownPostSource:
    def __init__(self, root: Path, rules: SiteRules) -> None:
        self._root = root
        self._rules = rules
        self._result: LoadResult | None = None

    def _load(self) -> LoadResult:
        if self._result is None:
            self._result = load_posts(
                self._root,
                locales=self._rules.supported_locales,
                default_locale=self._rules.default_locale,
                default_author=self._rules.author,
            )
        return self._result

    def list_posts(self) -> list[BlogPost]:
        return list(self._load().posts)

    @property
    def errors(self) -> list[PostLoadError]:
        return list(self._load().errors)

    def reload(self) -> None:
        self._result = None
