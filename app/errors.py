# app/errors.py

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# --------- 例外クラス ---------


class SitemapError(Exception):
    """API 呼び出し元に見せてよいエラーの基底クラス。"""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputError(SitemapError):
    """必須フィールドが無い / 空文字。"""

    status_code = 400


class NotFoundError(SitemapError):
    """sitemap を最後まで辿っても URL が 1 件も取れなかった。"""

    status_code = 404


class FetchError(SitemapError):
    """
    リモート（sitemap / robots.txt）取得時のネットワークエラー・タイムアウト・非 2xx。
    レスポンスがあった場合は status_code / status_text を保持する。
    """

    def __init__(
        self,
        message: str,
        upstream_status: Optional[int] = None,
        status_text: Optional[str] = None,
    ):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.status_text = status_text


class ParseError(SitemapError):
    """サニタイズ後も XML として読めなかった。"""


# --------- ハンドラ ---------


async def sitemap_error_handler(request: Request, exc: SitemapError) -> JSONResponse:
    if isinstance(exc, (FetchError, ParseError)):
        # 上流のステータス文言があればそれを優先して見せる
        reason = getattr(exc, "status_text", None) or exc.message
        logger.warning("[errors] %s %s -> %s", request.method, request.url.path, reason)
        return JSONResponse(status_code=exc.status_code, content={"error": f"Failure: {reason}"})

    logger.info("[errors] %s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """ボディが JSON でない等。FastAPI 標準の 422 ではなく 400 に揃える。"""
    logger.info("[errors] invalid request body: %s", exc.errors())
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": str(exc.errors())},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # スタックトレースはログにだけ出す
    logger.exception("[errors] unhandled exception: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Critical Server Error", "details": str(exc)},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SitemapError, sitemap_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
