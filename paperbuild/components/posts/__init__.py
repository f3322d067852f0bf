"""
Posts component - content loading and published-post queries.
"""

from ._impl import (
    calculate_reading_time,
    format_reading_time,
    get_post_path,
    last_path_segment,
    load_post,
    load_posts,
    paginate,
    slugify,
    slugify_all,
    split_frontmatter,
)
from .component import PostRepository, get_adjacent_posts
from .models import (
    AdjacentPosts,
    BlogPost,
    LoadResult,
    NavigationPost,
    Page,
    PostFrontmatter,
    PostLoadError,
    PostWithFallback,
    ReadingTime,
    SeriesRef,
    Tag,
)
from .ports import PostSourcePort

__all__ = [
    # Repository
    "PostRepository",
    "get_adjacent_posts",
    # Loading
    "load_post",
    "load_posts",
    "split_frontmatter",
    # Helpers
    "calculate_reading_time",
    "format_reading_time",
    "get_post_path",
    "last_path_segment",
    "paginate",
    "slugify",
    "slugify_all",
    # Models
    "AdjacentPosts",
    "BlogPost",
    "LoadResult",
    "NavigationPost",
    "Page",
    "PostFrontmatter",
    "PostLoadError",
    "PostWithFallback",
    "ReadingTime",
    "SeriesRef",
    "Tag",
    # Ports
    "PostSourcePort",
]
