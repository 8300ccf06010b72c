# agents/sitemap_agent.py

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional

import httpx

from app.config import settings
from app.errors import FetchError
from models.sitemap_models import ChildSitemapResult, SitemapDocument
from services.crawler import fetch_text
from services.sitemap_parser import parse_sitemap_xml

logger = logging.getLogger(__name__)


async def fetch_sitemap(client: httpx.AsyncClient, url: str) -> SitemapDocument:
    """
    sitemap を取得して SitemapDocument に変換する。
    取得失敗は FetchError、XML として読めなければ ParseError。
    """
    logger.info("[sitemap_agent] Fetching sitemap: %s", url)

    # ----- 1) 取得 -----
    text = await fetch_text(client, url, timeout=settings.sitemap_timeout)
    if not text or not text.strip():
        raise FetchError("Sitemap response is empty or not text")

    # ----- 2) サニタイズ＋パース -----
    document = parse_sitemap_xml(text)

    logger.info(
        "[sitemap_agent] Parsed: %s (kind=%s, entries=%s)",
        url,
        document.kind,
        len(document.entries),
    )
    return document


async def _fetch_child(client: httpx.AsyncClient, url: str) -> ChildSitemapResult:
    """子 sitemap 1 件分。失敗しても例外は投げず、error に詰めて返す。"""
    try:
        document = await fetch_sitemap(client, url)
    except Exception as e:
        logger.warning("[sitemap_agent] Child sitemap failed: %s: %s", url, e)
        return ChildSitemapResult(url=url, error=str(e))
    return ChildSitemapResult(url=url, document=document)


def dedupe(urls: List[str]) -> List[str]:
    """最初に出てきた順を保ったまま重複を除く。"""
    return list(dict.fromkeys(urls))


async def resolve_index(
    client: httpx.AsyncClient,
    document: SitemapDocument,
    max_children: Optional[int] = None,
) -> List[str]:
    """
    sitemapindex に並んだ子 sitemap を並列に取得し、URL を1つのリストにまとめる。

    - 子 sitemap は先頭 max_children 件（デフォルト 15）だけ処理し、残りは無視
    - 子の失敗は個別に吸収し、全体は失敗させない
    - 子がさらに sitemapindex でも辿らない（1 階層のみ）
    """
    limit = settings.max_child_sitemaps if max_children is None else max_children

    child_urls = document.locations()
    if len(child_urls) > limit:
        logger.info(
            "[sitemap_agent] index has %s children, processing first %s",
            len(child_urls),
            limit,
        )
    targets = child_urls[:limit]

    results: List[ChildSitemapResult] = await asyncio.gather(
        *(_fetch_child(client, url) for url in targets)
    )

    urls: List[str] = []
    failed = 0
    for res in results:
        if not res.ok:
            failed += 1
            continue
        if res.document.kind == "urlset":
            urls.extend(res.document.locations())

    logger.info(
        "[sitemap_agent] resolved index children=%s failed=%s urls=%s",
        len(targets),
        failed,
        len(urls),
    )
    return dedupe(urls)


async def collect_urls(client: httpx.AsyncClient, document: SitemapDocument) -> List[str]:
    """index なら resolve_index、urlset ならそのまま loc を返す。それ以外は空。"""
    if document.kind == "index":
        return await resolve_index(client, document)
    if document.kind == "urlset":
        return dedupe(document.locations())
    return []
