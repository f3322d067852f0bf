"""
Preview server route tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from paperbuild.adapters.clock import FrozenClock
from paperbuild.api.deps import get_build_context
from paperbuild.api.main import create_app
from paperbuild.api.routes.health import StartupTracker, create_health_router
from paperbuild.app_shell.build import BuildContext
from paperbuild.app_shell.config import Settings
from paperbuild.rules.models import SiteRules

# --- Test Setup ---


@pytest.fixture
def ctx(content_dir: Path, write_post, rules: SiteRules, frozen_clock: FrozenClock) -> BuildContext:
    write_post("en/one.md", title="One", pubDatetime="2024-06-01T09:00:00")
    write_post("en/two.md", title="Two", pubDatetime="2024-06-02T09:00:00")
    write_post("en/three.md", title="Three", pubDatetime="2024-06-03T09:00:00")
    write_post("ka/two.md", title="ორი", pubDatetime="2024-06-02T09:00:00")
    write_post("en/draft.md", title="Draft", draft=True)
    write_post("en/tomorrow.md", title="Tomorrow", pubDatetime="2024-06-16T09:00:00")
    settings = Settings({"PAPERBUILD_CONTENT_DIR": str(content_dir)})
    return BuildContext.create(settings, frozen_clock, rules=rules)


@pytest.fixture
def app(ctx: BuildContext) -> FastAPI:
    app = create_app()
    app.dependency_overrides[get_build_context] = lambda: ctx
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


# --- Feeds ---


class TestFeedRoutes:
    def test_rss(self, client: TestClient) -> None:
        response = client.get("/rss.xml")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert "/en/posts/three/" in response.text
        assert "Draft" not in response.text
        assert "Tomorrow" not in response.text

    def test_locale_rss(self, client: TestClient) -> None:
        response = client.get("/ka/rss.xml")
        assert response.status_code == 200
        assert "/ka/posts/two/" in response.text
        assert "/en/posts/" not in response.text

    def test_unknown_locale_rss(self, client: TestClient) -> None:
        assert client.get("/fr/rss.xml").status_code == 404

    def test_sitemap(self, client: TestClient) -> None:
        response = client.get("/sitemap.xml")
        assert response.status_code == 200
        assert response.text.count("<url>") == 6

    def test_robots(self, client: TestClient) -> None:
        response = client.get("/robots.txt")
        assert response.status_code == 200
        assert "Sitemap: https://blog.example.com/sitemap.xml" in response.text


class TestPostsApi:
    def test_default_locale_first_page(self, client: TestClient) -> None:
        body = client.get("/api/posts").json()

        assert body["locale"] == "en"
        assert body["totalItems"] == 3
        assert body["totalPages"] == 2
        assert [item["slug"] for item in body["items"]] == ["three", "two"]

    def test_second_page(self, client: TestClient) -> None:
        body = client.get("/api/posts", params={"page": 2}).json()
        assert [item["slug"] for item in body["items"]] == ["one"]

    def test_locale_with_fallback(self, client: TestClient) -> None:
        body = client.get("/api/posts", params={"locale": "ka"}).json()
        items = body["items"]

        assert [(i["id"], i["isFallback"]) for i in items] == [
            ("en/three", True),
            ("ka/two", False),
        ]

    def test_item_carries_resolved_date(self, client: TestClient) -> None:
        item = client.get("/api/posts", params={"page": 2}).json()["items"][0]
        assert item["pubDatetime"] == "2024-06-01T05:00:00+00:00"
        assert item["structuredData"]["@type"] == "BlogPosting"

    def test_unknown_locale(self, client: TestClient) -> None:
        assert client.get("/api/posts", params={"locale": "fr"}).status_code == 404

    def test_invalid_page(self, client: TestClient) -> None:
        assert client.get("/api/posts", params={"page": 0}).status_code == 422


# --- Health ---


class TestHealth:
    @pytest.fixture(autouse=True)
    def reset_tracker(self) -> None:
        StartupTracker.reset()

    def test_health_document(self) -> None:
        app = FastAPI()
        app.include_router(
            create_health_router(
                version="1.0.0-test",
                clock=FrozenClock(1_718_438_400_000),
                is_development_mode=True,
            )
        )

        body = TestClient(app).get("/api/health.json").json()

        assert body["status"] == "ok"
        assert body["version"] == "1.0.0-test"
        assert body["environment"] == "development"
        assert body["timestamp"] == "2024-06-15T08:00:00+00:00"
        assert body["uptime"] == 0.0

    def test_uptime_after_start(self) -> None:
        StartupTracker.mark_started()
        assert StartupTracker.get_uptime_seconds() >= 0.0

    def test_app_exposes_health(self, client: TestClient) -> None:
        body = client.get("/api/health.json").json()
        assert body["status"] == "ok"
