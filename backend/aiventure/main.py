# backend/aiventure/main.py

"""
バックエンドアプリケーションのエントリーポイント。

- /api/tools, /api/categories, /api/stats  （Notion のツール一覧）
- /api/newsletter, /api/contact, /api/advertise, /api/submit-tool
- /api/blog, /blog/{slug}
- リダイレクト・静的ファイル（最後に評価）
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from aiventure.blog.router import router as blog_router
from aiventure.notion.router import router as directory_router
from aiventure.submissions.router import router as submissions_router
from aiventure.submissions.store import InMemoryRecordStore, RecordStore
from aiventure.web.cors import CORS_HEADERS, install_cors
from aiventure.web.router import router as site_router

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def _install_error_handlers(app: FastAPI) -> None:
    """
    すべてのエラーを {"success": false, "error": ...} 形式で返すようにする。
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected invalid request to %s: %s", request.url.path, exc.errors())
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error while serving %s", request.url.path)
        # このレスポンスは CORS ミドルウェアを通らない
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", CORS_HEADERS)


def create_app(record_store: Optional[RecordStore] = None) -> FastAPI:
    """
    FastAPI アプリケーションファクトリ。

    :param record_store: フォーム送信の保存先。省略時はこのアプリ専用の InMemoryRecordStore。
    """
    app = FastAPI(title="Aiventure Backend")
    app.state.record_store = record_store or InMemoryRecordStore()

    install_cors(app)
    _install_error_handlers(app)

    @app.get("/health", tags=["health"])
    def health_check() -> dict:
        """
        簡易ヘルスチェックエンドポイント。
        """
        return {"status": "ok"}

    # ルーター登録（site_router はキャッチオールなので必ず最後）
    app.include_router(directory_router)
    app.include_router(submissions_router)
    app.include_router(blog_router)
    app.include_router(site_router)

    return app


# uvicorn 実行時のエントリーポイント
app = create_app()
