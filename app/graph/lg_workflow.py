# app/graph/lg_workflow.py
from __future__ import annotations

import logging

import httpx

from app.graph.lg_state import GraphState, create_initial_state
from app.graph import nodes

logger = logging.getLogger(__name__)


async def run_workflow(
    client: httpx.AsyncClient,
    sitemap_url: str,
    include_structure: bool = False,
) -> GraphState:
    """
    /api/analyze-sitemap, /api/site-structure 用の直列ワークフロー。

    discovery → fetch → resolve (→ structure → themes)
    """
    logger.info(
        "[lg_workflow] run_workflow start sitemap_url=%s include_structure=%s",
        sitemap_url,
        include_structure,
    )

    state = create_initial_state(sitemap_url=sitemap_url)

    # 1) sitemap の場所を決める
    state = await nodes.discovery_node(state, client)

    # 2) メイン sitemap を取得・パース
    state = await nodes.fetch_node(state, client)

    # 3) index なら子を展開してフラットな URL リストに
    state = await nodes.resolve_node(state, client)

    if include_structure:
        # 4) パス階層ツリー
        state = nodes.structure_node(state)

        # 5) テーマ語
        state = nodes.themes_node(state)

    logger.info(
        "[lg_workflow] run_workflow done sitemap_url=%s urls=%s current_node=%s",
        state.get("sitemap_url"),
        len(state.get("urls", [])),
        state.get("current_node"),
    )
    return state
