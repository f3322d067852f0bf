from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
import yaml

from paperbuild.adapters.clock import FrozenClock
from paperbuild.rules.models import SiteRules

PostWriter = Callable[..., Path]


def utc_ms(*args: int) -> int:
    """Epoch milliseconds of a UTC wall-clock time."""
    return int(datetime(*args, tzinfo=UTC).timestamp() * 1000)


@pytest.fixture
def rules() -> SiteRules:
    """Two-locale site in Tbilisi time (UTC+4, no DST)."""
    return SiteRules.model_validate(
        {
            "website": "https://blog.example.com",
            "title": "Example Blog",
            "author": "Site Author",
            "desc": "Notes & experiments",
            "timezone": "Asia/Tbilisi",
            "scheduledPostMargin": 15 * 60 * 1000,
            "postPerPage": 2,
            "rssLimit": 10,
            "defaultLocale": "en",
            "locales": {"en": "English", "ka": "ქართული"},
        }
    )


@pytest.fixture
def frozen_clock() -> FrozenClock:
    """2024-06-15 12:00 Tbilisi (08:00 UTC)."""
    return FrozenClock(utc_ms(2024, 6, 15, 8, 0, 0))


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    path = tmp_path / "blog"
    path.mkdir()
    return path


@pytest.fixture
def write_post(content_dir: Path) -> PostWriter:
    """
    Write a Markdown post under the content directory.

    Usage: write_post("en/hello.md", title="Hello", pubDatetime="2024-06-01T09:00:00")
    """

    def _write(relative: str, body: str = "Some body text.", **frontmatter: Any) -> Path:
        data: dict[str, Any] = {
            "title": "Untitled",
            "description": "A post",
            "pubDatetime": "2024-06-01T09:00:00",
        }
        data.update(frontmatter)
        path = content_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        text = "---\n" + yaml.safe_dump(data, allow_unicode=True) + "---\n\n" + body + "\n"
        path.write_text(text, encoding="utf-8")
        return path

    return _write
