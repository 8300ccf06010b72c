# models/site_models.py

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class SiteTreeNode(BaseModel):
    """
    URL パス階層の1ノード。
    - name: パスセグメント名（ルートは None）
    - children: セグメント名 → 子ノード
    """
    name: Optional[str] = None
    children: Dict[str, "SiteTreeNode"] = Field(default_factory=dict)

    def child(self, name: str) -> "SiteTreeNode":
        """name の子ノードを返す。無ければ作ってから返す。"""
        node = self.children.get(name)
        if node is None:
            node = SiteTreeNode(name=name)
            self.children[name] = node
        return node


class ThemeEntry(BaseModel):
    """URL パスから抽出したテーマ語と、その位置重み付きスコア。"""
    name: str
    score: int


class SiteAnalysis(BaseModel):
    """
    1 sitemap 分の分析結果。
    ツリーとテーマは同じ URL リストからそれぞれ独立に計算する。
    """

    sitemap_url: str
    url_count: int = 0
    max_depth: int = 0

    # パス階層ツリー（ルートノード）
    tree: SiteTreeNode = Field(default_factory=SiteTreeNode)

    # スコア降順のテーマ語
    themes: List[ThemeEntry] = Field(default_factory=list)
