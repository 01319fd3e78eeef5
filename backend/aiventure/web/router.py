# backend/aiventure/web/router.py

"""
API ルートに一致しなかったリクエストの最終処理。

1. www なしホスト → SITE_URL へ 301
2. 短縮パス → /pages/*.html へ 301
3. /api/* → 404 JSON
4. それ以外 → STATIC_DIR 配下の静的ファイル（StaticFiles, html=True）
"""

import logging
import os
from functools import lru_cache
from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .settings import SiteSettings, get_site_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["site"])

REDIRECTS = {
    "/tools": "/pages/all-tools.html",
    "/blog": "/pages/blog.html",
    "/about": "/pages/about.html",
    "/contact": "/pages/contact.html",
    "/submit": "/pages/submit.html",
    "/advertise": "/pages/advertise.html",
    "/categories": "/pages/categories.html",
    "/guides": "/pages/guides.html",
    "/newsletter": "/pages/newsletter.html",
    "/new": "/pages/new-additions.html",
    "/top": "/pages/top-rated.html",
}

FALLTHROUGH_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


@lru_cache()
def get_static_files(static_dir: Path) -> StaticFiles:
    """
    static_dir を配信する StaticFiles。ディレクトリは index.html を返す。

    起動時にディレクトリが無くてもよい（その場合はすべて 404）。
    """
    return StaticFiles(directory=static_dir, html=True, check_dir=False)


def _static_path(full_path: str) -> str:
    # StaticFiles.get_path と同じ正規化（"" は "."）
    return os.path.normpath(os.path.join(*full_path.split("/")))


@router.api_route("/{full_path:path}", methods=FALLTHROUGH_METHODS, include_in_schema=False)
async def fallthrough(
    full_path: str,
    request: Request,
    settings: SiteSettings = Depends(get_site_settings),
) -> Response:
    path = "/" + full_path

    if request.url.hostname == settings.bare_host:
        return RedirectResponse(f"{settings.site_url}{path}", status_code=status.HTTP_301_MOVED_PERMANENTLY)

    target = REDIRECTS.get(path)
    if target is not None:
        origin = f"{request.url.scheme}://{request.url.netloc}"
        return RedirectResponse(f"{origin}{target}", status_code=status.HTTP_301_MOVED_PERMANENTLY)

    if path.startswith("/api/"):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="API endpoint not found")

    # 静的アセットはメソッドに関係なく GET として返す
    scope = request.scope
    if request.method not in ("GET", "HEAD"):
        scope = {**scope, "method": "GET"}

    try:
        return await get_static_files(settings.static_dir).get_response(_static_path(full_path), scope)
    except StarletteHTTPException as exc:
        if exc.status_code != status.HTTP_404_NOT_FOUND:
            raise
        logger.debug("No static asset for %s", path)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found") from exc
