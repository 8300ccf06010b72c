# agents/discovery_agent.py

from __future__ import annotations

import asyncio
import logging
import re
from typing import List, Optional

import httpx

from app.config import settings
from app.errors import FetchError
from services.crawler import fetch_head_text, fetch_text

logger = logging.getLogger(__name__)

# robots.txt の "Sitemap: https://..." 行
_SITEMAP_LINE = re.compile(r"Sitemap:\s*(https?://\S+)", re.IGNORECASE)
_HAS_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")

# discover_all() で「sitemap らしい」と判定するマーカー
SITEMAP_MARKER = "<sitemap"


def normalize_base_url(base_url: str) -> str:
    """前後の空白と末尾の / を落とし、スキームが無ければ https:// を付ける。"""
    url = base_url.strip().rstrip("/")
    if not _HAS_SCHEME.match(url):
        url = "https://" + url
    return url


async def _fetch_robots(client: httpx.AsyncClient, base_url: str) -> Optional[str]:
    """robots.txt を取得する。取れなければ None（エラーは握りつぶす）。"""
    robots_url = f"{base_url}/robots.txt"
    try:
        return await fetch_text(client, robots_url, timeout=settings.robots_timeout)
    except FetchError as e:
        logger.info("[discovery] robots.txt not available: %s", e)
        return None


def sitemaps_from_robots(robots_text: str) -> List[str]:
    """robots.txt 内の Sitemap: 行をすべて、出現順に返す。"""
    return [m.group(1) for m in _SITEMAP_LINE.finditer(robots_text)]


async def _probe_status(client: httpx.AsyncClient, url: str) -> bool:
    # HEAD を弾くサーバがあるので GET で確認する
    try:
        resp = await client.get(url, timeout=settings.probe_timeout)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.info("[discovery] probe failed: %s (%s)", url, e)
        return False
    return resp.status_code == 200


async def _probe_content(client: httpx.AsyncClient, url: str) -> bool:
    """200 かつ本文の先頭に sitemap マーカーがあるときだけ True。"""
    try:
        head = await fetch_head_text(
            client,
            url,
            timeout=settings.discover_all_timeout,
            max_bytes=settings.probe_max_bytes,
        )
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.info("[discovery] probe failed: %s (%s)", url, e)
        return False
    return head is not None and SITEMAP_MARKER in head


async def discover(client: httpx.AsyncClient, base_url: str) -> Optional[str]:
    """
    ドメインから sitemap の URL を 1 つだけ推定する。

    1) robots.txt の最初の Sitemap: 行
    2) よくあるパスを順番に GET して、最初に 200 を返したもの
    どれも駄目なら None（呼び出し側で /sitemap.xml を付けて最後の悪あがきをする）。
    """
    base_url = normalize_base_url(base_url)
    logger.info("[discovery] discover start base_url=%s", base_url)

    robots_text = await _fetch_robots(client, base_url)
    if robots_text:
        found = sitemaps_from_robots(robots_text)
        if found:
            logger.info("[discovery] found in robots.txt: %s", found[0])
            return found[0]

    for path in settings.well_known_paths:
        candidate = f"{base_url}{path}"
        if await _probe_status(client, candidate):
            logger.info("[discovery] found well-known path: %s", candidate)
            return candidate

    logger.info("[discovery] nothing found for %s", base_url)
    return None


async def discover_all(client: httpx.AsyncClient, base_url: str) -> List[str]:
    """
    robots.txt の Sitemap: 行すべて＋よくあるパスの並列チェックで、
    見つかった sitemap URL を重複なしで返す。

    discover() と違い、よくあるパスは「200 が返ったか」だけでなく
    本文に <sitemap が含まれるかまで確認する。
    """
    base_url = normalize_base_url(base_url)
    logger.info("[discovery] discover_all start base_url=%s", base_url)

    sitemaps: List[str] = []

    robots_text = await _fetch_robots(client, base_url)
    if robots_text:
        sitemaps.extend(sitemaps_from_robots(robots_text))

    candidates = [f"{base_url}{path}" for path in settings.extended_well_known_paths]
    accepted = await asyncio.gather(*(_probe_content(client, c) for c in candidates))
    sitemaps.extend(c for c, ok in zip(candidates, accepted) if ok)

    # 順序を保ったまま重複を除く
    result = list(dict.fromkeys(sitemaps))
    logger.info("[discovery] discover_all done base_url=%s found=%s", base_url, len(result))
    return result
