# services/crawler.py

from __future__ import annotations

import logging
from typing import AsyncIterator, Optional

import httpx

from app.config import settings
from app.errors import FetchError

logger = logging.getLogger(__name__)


def default_headers() -> dict:
    return {
        "User-Agent": settings.user_agent,
        "Accept": "application/xml,text/xml,text/plain;q=0.9,*/*;q=0.8",
    }


def create_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """
    sitemap / robots.txt 取得用の AsyncClient を作る。
    transport はテストで MockTransport を差し込むためのもの。
    """
    return httpx.AsyncClient(
        headers=default_headers(),
        follow_redirects=True,
        timeout=settings.sitemap_timeout,
        transport=transport,
    )


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """FastAPI の依存性。リクエストごとにクライアントを開いて閉じる。"""
    async with create_client() as client:
        yield client


async def fetch_text(client: httpx.AsyncClient, url: str, timeout: float) -> str:
    """
    単純な GET。リトライは入れていない。
    ネットワークエラー・タイムアウト・非 2xx はすべて FetchError にする。
    """
    try:
        resp = await client.get(url, timeout=timeout)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(
            f"{url} returned {e.response.status_code}",
            upstream_status=e.response.status_code,
            status_text=e.response.reason_phrase,
        ) from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise FetchError(f"{url}: {str(e) or type(e).__name__}") from e
    return resp.text


async def fetch_head_text(
    client: httpx.AsyncClient,
    url: str,
    timeout: float,
    max_bytes: int,
) -> Optional[str]:
    """
    200 のときだけ本文の先頭 max_bytes バイトを返す（それ以外は None）。
    巨大な sitemap を丸ごと落とさずに中身を嗅ぐための関数。
    charset が未知のエンコーディングなら httpx の既定（utf-8）で読む。
    """
    async with client.stream("GET", url, timeout=timeout) as resp:
        if resp.status_code != 200:
            return None
        body = b""
        async for chunk in resp.aiter_bytes():
            body += chunk
            if len(body) >= max_bytes:
                break
    return body[:max_bytes].decode(resp.encoding or "utf-8", errors="replace")
