"""
Post loading and repository query tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from paperbuild.adapters.clock import FrozenClock
from paperbuild.adapters.markdown_source import MarkdownPostSource
from paperbuild.components.postfilter import FilterEnv, make_filter_env
from paperbuild.components.posts import (
    BlogPost,
    PostFrontmatter,
    PostLoadError,
    PostRepository,
    calculate_reading_time,
    format_reading_time,
    get_adjacent_posts,
    get_post_path,
    last_path_segment,
    load_post,
    load_posts,
    paginate,
    slugify,
    slugify_all,
    split_frontmatter,
)
from paperbuild.rules.models import SiteRules

# --- Test Fakes ---


class MockPostSource:
    """In-memory post source."""

    def __init__(self, posts: list[BlogPost]) -> None:
        self.posts = posts

    def list_posts(self) -> list[BlogPost]:
        return list(self.posts)


def make_post(
    post_id: str,
    pub: str = "2024-01-01T09:00:00",
    **data: object,
) -> BlogPost:
    locale, _, rest = post_id.partition("/")
    frontmatter = {
        "title": data.pop("title", rest.title()),
        "description": "desc",
        "pubDatetime": pub,
        **data,
    }
    return BlogPost(
        id=post_id,
        locale=locale,
        slug=last_path_segment(post_id),
        body="one two three",
        file_path=f"{post_id}.md",
        data=PostFrontmatter.model_validate(frontmatter),
    )


@pytest.fixture
def env(rules: SiteRules, frozen_clock: FrozenClock) -> FilterEnv:
    return make_filter_env(rules, clock=frozen_clock, is_development_mode=False)


# --- Helpers ---


class TestSlugify:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("Hello World", "hello-world"),
            ("TypeScript", "type-script"),
            ("ASPNetCore", "asp-net-core"),
            ("  spaced   out  ", "spaced-out"),
            ("snake_case_words", "snake-case-words"),
            ("C# & .NET 8", "c-net-8"),
            ("ქართული ენა", "ქართული-ენა"),
        ],
    )
    def test_slugify(self, text: str, expected: str) -> None:
        assert slugify(text) == expected

    def test_slugify_all(self) -> None:
        assert slugify_all(["Hello World", "Dotnet"]) == ["hello-world", "dotnet"]

    def test_last_path_segment(self) -> None:
        assert last_path_segment("en/2024/my-post") == "my-post"
        assert last_path_segment("en/posts/") == "posts"
        assert last_path_segment("") == ""
        assert last_path_segment(None) == ""


class TestReadingTime:
    def test_empty_content(self) -> None:
        result = calculate_reading_time("")
        assert result.minutes == 1
        assert result.words == 0

    def test_rounds_up(self) -> None:
        result = calculate_reading_time("word " * 201, words_per_minute=200)
        assert result.minutes == 2
        assert result.display_text == "2 min read"

    def test_format(self) -> None:
        result = calculate_reading_time("word " * 1500, words_per_minute=200)
        assert format_reading_time(result) == "8 min read • 1,500 words"


class TestPaginate:
    def test_pages(self) -> None:
        page = paginate(list(range(5)), 2, 2)
        assert page.items == (2, 3)
        assert page.total_pages == 3
        assert page.has_previous is True
        assert page.has_next is True
        assert page.page_numbers == (1, 2, 3)

    def test_out_of_range_is_clamped(self) -> None:
        assert paginate(list(range(5)), 99, 2).number == 3
        assert paginate(list(range(5)), 0, 2).number == 1

    def test_empty_listing_has_one_page(self) -> None:
        page = paginate([], 1, 4)
        assert page.total_pages == 1
        assert page.items == ()


# --- Frontmatter ---


class TestSplitFrontmatter:
    def test_split(self) -> None:
        data, body = split_frontmatter("---\ntitle: Hi\n---\n\nBody\n")
        assert data == {"title": "Hi"}
        assert body == "Body\n"

    def test_no_frontmatter(self) -> None:
        assert split_frontmatter("Just text") == ({}, "Just text")

    def test_byte_order_mark(self) -> None:
        data, _ = split_frontmatter("\ufeff---\ntitle: Hi\n---\nBody")
        assert data == {"title": "Hi"}

    def test_unterminated(self) -> None:
        with pytest.raises(ValueError, match="not terminated"):
            split_frontmatter("---\ntitle: Hi\nBody")

    def test_not_a_mapping(self) -> None:
        with pytest.raises(ValueError, match="mapping"):
            split_frontmatter("---\n- a\n- b\n---\nBody")


class TestPostFrontmatter:
    def test_aliases_and_defaults(self) -> None:
        data = PostFrontmatter.model_validate(
            {"title": "T", "description": "D", "pubDatetime": "2024-06-01T09:00:00"}
        )
        assert data.pub_datetime == "2024-06-01T09:00:00"
        assert data.tags == ["others"]
        assert data.draft is False

    def test_blank_tags_fall_back(self) -> None:
        data = PostFrontmatter.model_validate(
            {"title": "T", "description": "D", "pubDatetime": "x", "tags": ["", "  "]}
        )
        assert data.tags == ["others"]

    def test_relative_canonical_rejected(self) -> None:
        with pytest.raises(ValueError):
            PostFrontmatter.model_validate(
                {"title": "T", "description": "D", "pubDatetime": "x", "canonicalURL": "/p"}
            )

    def test_title_too_long(self) -> None:
        with pytest.raises(ValueError):
            PostFrontmatter.model_validate(
                {"title": "x" * 101, "description": "D", "pubDatetime": "x"}
            )


# --- Loading ---


class TestLoadPosts:
    def test_locale_from_folder(self, content_dir: Path, write_post) -> None:
        path = write_post("ka/nested/My Post.md", title="სათაური")
        post = load_post(path, content_dir, locales=["en", "ka"], default_locale="en")

        assert isinstance(post, BlogPost)
        assert post.locale == "ka"
        assert post.id == "ka/nested/my-post"
        assert post.slug == "my-post"

    def test_default_locale_prefix(self, content_dir: Path, write_post) -> None:
        path = write_post("loose.md")
        post = load_post(path, content_dir, locales=["en", "ka"], default_locale="en")

        assert isinstance(post, BlogPost)
        assert post.id == "en/loose"

    def test_default_author(self, content_dir: Path, write_post) -> None:
        path = write_post("en/a.md")
        post = load_post(
            path, content_dir, locales=["en"], default_locale="en", default_author="Site"
        )
        assert isinstance(post, BlogPost)
        assert post.data.author == "Site"

    def test_invalid_frontmatter(self, content_dir: Path, write_post) -> None:
        path = write_post("en/bad.md", title="")
        result = load_post(path, content_dir, locales=["en"], default_locale="en")

        assert isinstance(result, PostLoadError)
        assert result.code == "INVALID_FRONTMATTER"

    def test_bad_file_does_not_abort_load(self, content_dir: Path, write_post) -> None:
        write_post("en/good.md")
        (content_dir / "en" / "broken.md").write_text("---\ntitle: [\n", encoding="utf-8")

        result = load_posts(content_dir, locales=["en"], default_locale="en")

        assert [p.id for p in result.posts] == ["en/good"]
        assert len(result.errors) == 1
        assert result.errors[0].code == "UNREADABLE"

    def test_missing_directory(self, tmp_path: Path) -> None:
        result = load_posts(tmp_path / "nope", locales=["en"], default_locale="en")
        assert result.posts == ()

    def test_unquoted_yaml_timestamp(self, content_dir: Path) -> None:
        path = content_dir / "en" / "ts.md"
        path.parent.mkdir(parents=True)
        path.write_text(
            "---\ntitle: T\ndescription: D\npubDatetime: 2024-06-01 09:00:00\n---\nBody",
            encoding="utf-8",
        )
        post = load_post(path, content_dir, locales=["en"], default_locale="en")
        assert isinstance(post, BlogPost)
        assert post.data.pub_datetime.hour == 9  # type: ignore[union-attr]

    def test_markdown_source_caches_until_reload(
        self, content_dir: Path, write_post, rules: SiteRules
    ) -> None:
        write_post("en/one.md")
        source = MarkdownPostSource(content_dir, rules)
        assert len(source.list_posts()) == 1

        write_post("en/two.md")
        assert len(source.list_posts()) == 1

        source.reload()
        assert len(source.list_posts()) == 2


# --- Repository ---


class TestPostRepository:
    def test_get_all_applies_filter(self, env: FilterEnv) -> None:
        posts = [
            make_post("en/live"),
            make_post("en/draft", draft=True),
            make_post("en/future", pub="2099-01-01T00:00:00"),
        ]
        repo = PostRepository(MockPostSource(posts), env)
        assert [p.id for p in repo.get_all()] == ["en/live"]

    def test_development_mode_shows_future(self, rules: SiteRules, frozen_clock) -> None:
        env = make_filter_env(rules, clock=frozen_clock, is_development_mode=True)
        posts = [make_post("en/future", pub="2099-01-01T00:00:00"), make_post("en/d", draft=True)]
        repo = PostRepository(MockPostSource(posts), env)
        assert [p.id for p in repo.get_all()] == ["en/future"]

    def test_sorted_newest_first_by_mod_then_pub(self, env: FilterEnv) -> None:
        posts = [
            make_post("en/old", pub="2024-01-01T00:00:00"),
            make_post("en/new", pub="2024-03-01T00:00:00"),
            make_post("en/updated", pub="2023-01-01T00:00:00", modDatetime="2024-05-01T00:00:00"),
        ]
        repo = PostRepository(MockPostSource(posts), env)
        assert [p.id for p in repo.get_sorted()] == ["en/updated", "en/new", "en/old"]

    def test_by_locale(self, env: FilterEnv) -> None:
        posts = [make_post("en/a"), make_post("ka/a")]
        repo = PostRepository(MockPostSource(posts), env)
        assert [p.id for p in repo.get_by_locale("ka")] == ["ka/a"]

    def test_locale_fallback(self, env: FilterEnv) -> None:
        posts = [
            make_post("en/shared", pub="2024-02-01T00:00:00"),
            make_post("ka/shared", pub="2024-02-01T00:00:00"),
            make_post("en/only-en", pub="2024-01-01T00:00:00"),
        ]
        repo = PostRepository(MockPostSource(posts), env)

        result = repo.get_by_locale_with_fallback("ka")

        assert [(r.post.id, r.is_fallback) for r in result] == [
            ("ka/shared", False),
            ("en/only-en", True),
        ]
        assert repo.get_by_locale_with_fallback("ka", include_fallback=False)[0].post.id == (
            "ka/shared"
        )

    def test_translations(self, env: FilterEnv) -> None:
        posts = [make_post("en/a"), make_post("ka/a"), make_post("en/b")]
        repo = PostRepository(MockPostSource(posts), env)

        assert repo.has_translation("a", "ka") is True
        assert repo.has_translation("b", "ka") is False
        assert set(repo.get_translations("a")) == {"en", "ka"}

    def test_by_tag_compares_slugs(self, env: FilterEnv) -> None:
        posts = [make_post("en/a", tags=["Type Script"]), make_post("en/b", tags=["python"])]
        repo = PostRepository(MockPostSource(posts), env)
        assert [p.id for p in repo.get_by_tag("type-script")] == ["en/a"]

    def test_unique_tags_translated(self, env: FilterEnv) -> None:
        posts = [
            make_post("ka/a", tags=["dotnet", "Web Dev"]),
            make_post("ka/b", tags=["web-dev"]),
        ]
        repo = PostRepository(MockPostSource(posts), env)

        tags = repo.get_unique_tags("ka", {"ka": {"dotnet": "დოტნეტი"}})

        assert [(t.tag, t.tag_name) for t in tags] == [
            ("dotnet", "დოტნეტი"),
            ("web-dev", "Web Dev"),
        ]

    def test_featured(self, env: FilterEnv) -> None:
        posts = [make_post("en/a", featured=True), make_post("en/b")]
        repo = PostRepository(MockPostSource(posts), env)
        assert [p.id for p in repo.get_featured()] == ["en/a"]

    def test_series_ordered_with_fallback(self, env: FilterEnv) -> None:
        posts = [
            make_post("en/part-two", series={"id": "intro", "order": 2}),
            make_post("en/part-one", series={"id": "intro", "order": 1}),
            make_post("ka/part-two", series={"id": "intro", "order": 2}),
            make_post("en/other"),
        ]
        repo = PostRepository(MockPostSource(posts), env)

        parts = repo.get_series("intro", "ka")

        assert [(p.post.id, p.is_fallback) for p in parts] == [
            ("en/part-one", True),
            ("ka/part-two", False),
        ]

    def test_get_page(self, env: FilterEnv) -> None:
        posts = [make_post(f"en/p{i}", pub=f"2024-01-0{i}T00:00:00") for i in range(1, 6)]
        repo = PostRepository(MockPostSource(posts), env)

        page = repo.get_page("en", 1, 2)

        assert [p.id for p in page.items] == ["en/p5", "en/p4"]
        assert page.total_items == 5

    def test_unparseable_date_sorts_last(self, env: FilterEnv) -> None:
        posts = [make_post("en/weird", pub="someday"), make_post("en/normal")]
        repo = PostRepository(MockPostSource(posts), env)
        assert [p.id for p in repo.get_sorted()] == ["en/normal", "en/weird"]


class TestNavigation:
    def test_adjacent(self) -> None:
        posts = [make_post("en/a"), make_post("en/b"), make_post("en/c")]
        result = get_adjacent_posts(posts, "en/b")
        assert result.previous is not None and result.previous.id == "en/a"
        assert result.next is not None and result.next.id == "en/c"

    def test_edges_and_missing(self) -> None:
        posts = [make_post("en/a"), make_post("en/b")]
        assert get_adjacent_posts(posts, "en/a").previous is None
        assert get_adjacent_posts(posts, "en/b").next is None
        missing = get_adjacent_posts(posts, "en/zzz")
        assert missing.previous is None and missing.next is None

    def test_post_path(self) -> None:
        assert get_post_path(make_post("ka/2024/hello")) == "/ka/posts/hello/"
