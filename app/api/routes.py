# app/api/routes.py
from __future__ import annotations

import logging
from typing import List, Optional

import httpx
from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from agents.discovery_agent import discover_all
from app.errors import InputError
from app.graph.lg_workflow import run_workflow
from models.site_models import SiteAnalysis
from services.crawler import get_http_client

logger = logging.getLogger(__name__)

router = APIRouter()


# --------- Request / Response モデル ---------


class AnalyzeSitemapRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sitemap_url: Optional[str] = Field(None, alias="sitemapUrl")


class AnalyzeSitemapResponse(BaseModel):
    urls: List[str]


class DiscoverSitemapsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base_url: Optional[str] = Field(None, alias="baseUrl")


class DiscoverSitemapsResponse(BaseModel):
    sitemaps: List[str]


class SiteStructureResponse(SiteAnalysis):
    progress_messages: List[str] = []


def _require(value: Optional[str], message: str) -> str:
    """未指定・空白だけの入力は 400。"""
    if value is None or not value.strip():
        raise InputError(message)
    return value.strip()


# --------- エンドポイント ---------


@router.post("/analyze-sitemap", response_model=AnalyzeSitemapResponse)
async def api_analyze_sitemap(
    payload: AnalyzeSitemapRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
) -> AnalyzeSitemapResponse:
    """
    sitemap（またはドメイン）から重複なしの URL リストを返すメインAPI。

    1) .xml で終わらなければ sitemap を探す
    2) sitemap を取得・パース
    3) sitemapindex なら子 sitemap を展開
    """
    sitemap_url = _require(payload.sitemap_url, "Sitemap URL is required")
    logger.info("[api.analyze-sitemap] start sitemap_url=%s", sitemap_url)

    state = await run_workflow(client, sitemap_url)

    logger.info("[api.analyze-sitemap] done urls=%s", len(state["urls"]))
    return AnalyzeSitemapResponse(urls=state["urls"])


@router.post("/discover-sitemaps", response_model=DiscoverSitemapsResponse)
async def api_discover_sitemaps(
    payload: DiscoverSitemapsRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
) -> DiscoverSitemapsResponse:
    """
    ドメインから見つかる sitemap をすべて返す。
    見つからなくてもエラーにはせず、空リストを返す。
    """
    base_url = _require(payload.base_url, "Base URL is required")
    logger.info("[api.discover-sitemaps] start base_url=%s", base_url)

    sitemaps = await discover_all(client, base_url)

    logger.info("[api.discover-sitemaps] done found=%s", len(sitemaps))
    return DiscoverSitemapsResponse(sitemaps=sitemaps)


@router.post("/site-structure", response_model=SiteStructureResponse)
async def api_site_structure(
    payload: AnalyzeSitemapRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
) -> SiteStructureResponse:
    """
    analyze-sitemap の URL リストから、パス階層ツリー・最大深さ・テーマ語まで
    まとめて計算して返す。
    """
    sitemap_url = _require(payload.sitemap_url, "Sitemap URL is required")
    logger.info("[api.site-structure] start sitemap_url=%s", sitemap_url)

    state = await run_workflow(client, sitemap_url, include_structure=True)

    logger.info(
        "[api.site-structure] done urls=%s depth=%s themes=%s",
        len(state["urls"]),
        state["max_depth"],
        len(state["themes"]),
    )
    return SiteStructureResponse(
        sitemap_url=state["sitemap_url"],
        url_count=len(state["urls"]),
        max_depth=state["max_depth"],
        tree=state["tree"],
        themes=state["themes"],
        progress_messages=state.get("progress_messages", []),
    )
