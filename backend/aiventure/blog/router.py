# backend/aiventure/blog/router.py

"""
ブログ用の FastAPI ルーター定義。

- GET /api/blog          記事一覧（JSON）
- GET /blog/{slug}       記事ページ（サーバーサイドレンダリングした HTML）
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from aiventure.utils.config import EnvVarMissingError
from aiventure.web.settings import SiteSettings, get_site_settings

from .schemas import BlogPostListResponse
from .service import BlogService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["blog"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


def get_blog_service() -> BlogService:
    try:
        return BlogService()
    except EnvVarMissingError as exc:
        logger.error("Notion is not configured: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="NOTION_API_KEY not configured",
        ) from exc


@router.get(
    "/api/blog",
    response_model=BlogPostListResponse,
    summary="公開済みブログ記事の一覧",
)
def list_posts(
    response: Response,
    service: BlogService = Depends(get_blog_service),
    settings: SiteSettings = Depends(get_site_settings),
) -> BlogPostListResponse:
    try:
        posts = service.fetch_posts()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to fetch blog posts from Notion.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch blog posts",
        ) from exc

    response.headers["Cache-Control"] = f"public, max-age={settings.api_cache_ttl}"
    return BlogPostListResponse(count=len(posts), data=posts)


@router.get("/blog/{slug}", response_class=HTMLResponse, include_in_schema=False)
def render_post(
    slug: str,
    request: Request,
    service: BlogService = Depends(get_blog_service),
    settings: SiteSettings = Depends(get_site_settings),
) -> HTMLResponse:
    """
    記事ページを HTML で返す。見つからない場合は 404 の HTML ページ。

    Notion 側の障害時は 500 の JSON を返す（他の API と同じエラー形式）。
    """
    try:
        post = service.get_post(slug)
        nodes = service.get_post_content(post) if post is not None else []
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to render blog post %s.", slug)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load blog post",
        ) from exc

    if post is None:
        return templates.TemplateResponse(
            request,
            "not_found.html",
            {"slug": slug, "site_url": settings.site_url},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    return templates.TemplateResponse(
        request,
        "post.html",
        {"post": post, "nodes": nodes, "site_url": settings.site_url},
        headers={"Cache-Control": f"public, max-age={settings.api_cache_ttl}"},
    )
