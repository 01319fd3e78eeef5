# backend/aiventure/notion/router.py

"""
ディレクトリ公開 API の FastAPI ルーター定義。

- GET /api/tools
- GET /api/tools/{id}
- GET /api/categories
- GET /api/stats
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from aiventure.utils.config import EnvVarMissingError
from aiventure.web.settings import SiteSettings, get_site_settings

from .schemas import (
    CategoryListResponse,
    DirectoryStatsResponse,
    ToolDetailResponse,
    ToolFilters,
    ToolListResponse,
)
from .service import NotionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["directory"])


def get_notion_service() -> NotionService:
    """
    NotionService を生成する。

    NOTE:
    - テストでは dependency_overrides で差し替える。
    - NOTION_API_KEY 未設定はデプロイ不備として 500 にする。
    """
    try:
        return NotionService()
    except EnvVarMissingError as exc:
        logger.error("Notion is not configured: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="NOTION_API_KEY not configured",
        ) from exc


def _set_cache_headers(response: Response, settings: SiteSettings) -> None:
    response.headers["Cache-Control"] = f"public, max-age={settings.api_cache_ttl}"


@router.get(
    "/tools",
    response_model=ToolListResponse,
    summary="ツール一覧を取得",
    description="category / pricing / featured で絞り込み、sort で並べ替え、search と limit を適用する。",
)
def list_tools(
    response: Response,
    filters: ToolFilters = Depends(),
    service: NotionService = Depends(get_notion_service),
    settings: SiteSettings = Depends(get_site_settings),
) -> ToolListResponse:
    try:
        tools = service.fetch_tools(filters)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to fetch tools from Notion.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch tools",
        ) from exc

    _set_cache_headers(response, settings)
    return ToolListResponse(count=len(tools), data=tools)


@router.get(
    "/tools/{tool_id:int}",
    response_model=ToolDetailResponse,
    summary="ツールを 1 件取得",
)
def get_tool(
    tool_id: int,
    response: Response,
    service: NotionService = Depends(get_notion_service),
    settings: SiteSettings = Depends(get_site_settings),
) -> ToolDetailResponse:
    try:
        tool = service.get_tool(tool_id)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to fetch tool %s from Notion.", tool_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch tool",
        ) from exc

    if tool is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tool not found")

    _set_cache_headers(response, settings)
    return ToolDetailResponse(data=tool)


@router.get(
    "/categories",
    response_model=CategoryListResponse,
    summary="カテゴリごとのツール件数",
)
def list_categories(
    response: Response,
    service: NotionService = Depends(get_notion_service),
    settings: SiteSettings = Depends(get_site_settings),
) -> CategoryListResponse:
    try:
        categories = service.fetch_categories()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to build categories from Notion.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch categories",
        ) from exc

    _set_cache_headers(response, settings)
    return CategoryListResponse(data=categories)


@router.get(
    "/stats",
    response_model=DirectoryStatsResponse,
    summary="ディレクトリ全体の統計情報",
)
def get_stats(
    response: Response,
    service: NotionService = Depends(get_notion_service),
    settings: SiteSettings = Depends(get_site_settings),
) -> DirectoryStatsResponse:
    try:
        stats = service.fetch_stats()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Failed to build stats from Notion.")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch stats",
        ) from exc

    _set_cache_headers(response, settings)
    return DirectoryStatsResponse(data=stats)
