"""
Preview routes for feeds, sitemap, robots.txt and the post index.

Every request builds a fresh context so edits under the content
directory show up without a restart, and "now" moves with the clock.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import PlainTextResponse, Response

from paperbuild.api.deps import get_build_context
from paperbuild.app_shell.build import BuildContext, post_index
from paperbuild.components.feeds import build_robots_txt, build_rss, build_sitemap
from paperbuild.components.posts import paginate

router = APIRouter()

XML_MEDIA_TYPE = "application/xml; charset=utf-8"


def _require_locale(ctx: BuildContext, locale: str) -> str:
    if locale not in ctx.rules.supported_locales:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown locale")
    return locale


@router.get("/rss.xml")
def rss(ctx: BuildContext = Depends(get_build_context)) -> Response:
    return Response(content=build_rss(ctx.repo, ctx.rules), media_type=XML_MEDIA_TYPE)


@router.get("/sitemap.xml")
def sitemap(ctx: BuildContext = Depends(get_build_context)) -> Response:
    return Response(content=build_sitemap(ctx.repo, ctx.rules), media_type=XML_MEDIA_TYPE)


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots(ctx: BuildContext = Depends(get_build_context)) -> str:
    return build_robots_txt(ctx.rules)


@router.get("/api/posts")
def list_posts(
    locale: str | None = None,
    page: int = Query(default=1, ge=1),
    ctx: BuildContext = Depends(get_build_context),
) -> dict[str, Any]:
    """Paginated post index for a locale (defaults to the site locale)."""
    locale = _require_locale(ctx, locale or ctx.rules.default_locale)
    result = paginate(post_index(ctx, locale), page, ctx.rules.post_per_page)
    return {
        "locale": locale,
        "page": result.number,
        "totalPages": result.total_pages,
        "totalItems": result.total_items,
        "items": result.items,
    }


@router.get("/{locale}/rss.xml")
def locale_rss(locale: str, ctx: BuildContext = Depends(get_build_context)) -> Response:
    _require_locale(ctx, locale)
    return Response(content=build_rss(ctx.repo, ctx.rules, locale), media_type=XML_MEDIA_TYPE)
