# agents/tree_agent.py

from __future__ import annotations

import logging
from functools import reduce
from typing import Iterable, List, Optional
from urllib.parse import urlsplit

from models.site_models import SiteTreeNode

logger = logging.getLogger(__name__)


def url_path_segments(url: str) -> Optional[List[str]]:
    """
    絶対 URL のパスを空でないセグメントに分割する。
    絶対 URL として読めなければ None。
    """
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return [p for p in parts.path.split("/") if p]


def _fold_url(root: SiteTreeNode, url: str) -> SiteTreeNode:
    segments = url_path_segments(url)
    if segments is None:
        logger.warning("[tree_agent] Invalid URL skipped: %s", url)
        return root

    current = root
    for segment in segments:
        current = current.child(segment)
    return root


def build_tree(urls: Iterable[str]) -> SiteTreeNode:
    """
    URL リストからパス階層ツリーを構築する。
    - /a/b/c なら root → a → b → c とたどり、無いノードは作る。
    - 不正な URL はスキップする（全体は失敗させない）。
    """
    return reduce(_fold_url, urls, SiteTreeNode())


def get_max_depth(node: SiteTreeNode) -> int:
    """ツリーの深さ。子が無ければ 0。"""
    if not node.children:
        return 0
    return 1 + max(get_max_depth(child) for child in node.children.values())
