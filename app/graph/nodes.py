# app/graph/nodes.py
from __future__ import annotations

import logging
from typing import List

import httpx

from app.graph.lg_state import GraphState
from app.errors import NotFoundError
from agents.discovery_agent import discover, normalize_base_url
from agents.sitemap_agent import collect_urls, fetch_sitemap
from agents.theme_agent import extract_themes
from agents.tree_agent import build_tree, get_max_depth

from models.sitemap_models import SitemapDocument

logger = logging.getLogger(__name__)

NO_URLS_MESSAGE = (
    "No URLs successfully extracted. "
    "The site might be blocking us or the format is unusual."
)


def _log_progress(state: GraphState, node: str, message: str) -> GraphState:
    """
    進捗ログを state に積むユーティリティ。
    state は dict (GraphState) として扱う。
    """
    line = f"[{node}] {message}"

    messages: List[str] = list(state.get("progress_messages", []))
    messages.append(line)

    state["progress_messages"] = messages
    state["current_node"] = node

    logger.info(line)
    return state


# ---------- Discovery ノード ----------


async def discovery_node(state: GraphState, client: httpx.AsyncClient) -> GraphState:
    """
    入力が .xml で終わっていなければ robots.txt / よくあるパスから sitemap を探す。
    見つからなければ {base}/sitemap.xml を決め打ちで使う。
    """
    input_url: str = state["input_url"]
    base_url = normalize_base_url(input_url)

    if base_url.endswith(".xml"):
        state["sitemap_url"] = base_url
        return _log_progress(state, "discovery", f"skip: using {base_url}")

    state = _log_progress(state, "discovery", f"start: looking for sitemap of {base_url}")

    discovered = await discover(client, base_url)
    if discovered:
        state["sitemap_url"] = discovered
        return _log_progress(state, "discovery", f"done: found {discovered}")

    state["sitemap_url"] = f"{base_url}/sitemap.xml"
    return _log_progress(
        state, "discovery", f"done: nothing found, falling back to {state['sitemap_url']}"
    )


# ---------- Fetch ノード ----------


async def fetch_node(state: GraphState, client: httpx.AsyncClient) -> GraphState:
    """
    メインの sitemap を取得する。ここでの失敗（FetchError / ParseError）は
    そのまま呼び出し元に伝える。
    """
    sitemap_url: str = state["sitemap_url"]
    state = _log_progress(state, "fetch", f"start: {sitemap_url}")

    document = await fetch_sitemap(client, sitemap_url)
    state["document"] = document

    return _log_progress(
        state, "fetch", f"done: kind={document.kind} entries={len(document.entries)}"
    )


# ---------- Resolve ノード ----------


async def resolve_node(state: GraphState, client: httpx.AsyncClient) -> GraphState:
    """
    sitemapindex なら子 sitemap を展開し、フラットな URL リストを作る。
    1 件も取れなければ NotFoundError。
    """
    state = _log_progress(state, "resolve", "start: collecting URLs")

    document: SitemapDocument = state["document"]
    urls = await collect_urls(client, document)
    if not urls:
        raise NotFoundError(NO_URLS_MESSAGE)

    state["urls"] = urls
    return _log_progress(state, "resolve", f"done: {len(urls)} unique URLs")


# ---------- Structure ノード ----------


def structure_node(state: GraphState) -> GraphState:
    """URL リストからパス階層ツリーと最大深さを計算する。"""
    state = _log_progress(state, "structure", "start: building tree")

    tree = build_tree(state["urls"])
    state["tree"] = tree
    state["max_depth"] = get_max_depth(tree)

    return _log_progress(state, "structure", f"done: max_depth={state['max_depth']}")


# ---------- Themes ノード ----------


def themes_node(state: GraphState) -> GraphState:
    """URL リストからテーマ語ランキングを計算する（ツリーとは独立）。"""
    state = _log_progress(state, "themes", "start: extracting themes")

    themes = extract_themes(state["urls"])
    state["themes"] = themes

    return _log_progress(state, "themes", f"done: {len(themes)} themes")
