# backend/aiventure/web/cors.py

"""
すべてのレスポンスに CORS ヘッダーを付与するミドルウェア。

OPTIONS はパスに関係なく空のレスポンスで即座に返す。
"""

from typing import Awaitable, Callable

from fastapi import FastAPI, Request, Response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def install_cors(app: FastAPI) -> None:
    @app.middleware("http")
    async def add_cors_headers(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        response = await call_next(request)
        for name, value in CORS_HEADERS.items():
            response.headers.setdefault(name, value)
        return response
