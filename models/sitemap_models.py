# models/sitemap_models.py

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


# -----------------------------------------
# sitemap の種類
# -----------------------------------------
SitemapKind = Literal[
    "index",         # <sitemapindex>: 子 sitemap への参照リスト
    "urlset",        # <urlset>: 実際のページ URL リスト
    "unrecognized",  # それ以外（HTML が返ってきた等）
]


class SitemapEntry(BaseModel):
    """<sitemap> / <url> 1 件分。loc が無いエントリは location=None。"""

    location: Optional[str] = None


class SitemapDocument(BaseModel):
    """XML をパースして分類した結果。

    Attributes:
        kind (SitemapKind): index / urlset / unrecognized。
        entries (List[SitemapEntry]): エントリ一覧（unrecognized は常に空）。
    """

    kind: SitemapKind
    entries: List[SitemapEntry] = Field(default_factory=list)

    def locations(self) -> List[str]:
        """空でない location だけを出現順で返す。"""
        return [e.location for e in self.entries if e.location]


class ChildSitemapResult(BaseModel):
    """
    sitemapindex から辿った子 sitemap 1 件分の取得結果。
    document か error のどちらか一方だけが入る。
    """

    url: str
    document: Optional[SitemapDocument] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.document is not None
