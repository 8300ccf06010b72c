# services/sitemap_parser.py

from __future__ import annotations

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from app.errors import ParseError
from models.sitemap_models import SitemapDocument, SitemapEntry

logger = logging.getLogger(__name__)

# 既にエスケープ済みのエンティティ以外の & にマッチ
_BARE_AMPERSAND = re.compile(r"&(?!(?:amp|lt|gt|quot|apos);)")

# ルート要素名 → (kind, エントリ要素名)
_ROOT_KINDS = {
    "sitemapindex": ("index", "sitemap"),
    "urlset": ("urlset", "url"),
}


def sanitize_xml(text: str) -> str:
    """
    エスケープされていない & を &amp; に置き換える。
    実際の sitemap には `?a=1&b=2` がそのまま入っていることがよくある。
    """
    return _BARE_AMPERSAND.sub("&amp;", text)


def _root_element(soup: BeautifulSoup) -> Optional[Tag]:
    """XML 宣言やコメントを飛ばして最初の要素を返す。"""
    for node in soup.children:
        if isinstance(node, Tag):
            return node
    return None


def _entry_location(entry: Tag) -> Optional[str]:
    """
    <loc> が複数あれば先頭を採用する。
    無い / 空のときは None（呼び出し側で読み飛ばす）。
    """
    locs = entry.find_all("loc", recursive=False)
    if not locs:
        return None
    text = locs[0].get_text(strip=True)
    return text or None


def parse_sitemap_xml(text: str) -> SitemapDocument:
    """
    XML 文字列を解析して SitemapDocument を生成する。
    ※ ここではネットワークアクセスは行わない（fetch_text で取得済み前提）
    """
    try:
        soup = BeautifulSoup(sanitize_xml(text), "xml")
    except Exception as e:
        # bs4 / lxml どちらの例外も ParseError に揃える
        raise ParseError(f"Sitemap could not be parsed as XML: {e}") from e

    root = _root_element(soup)
    if root is None:
        raise ParseError("Sitemap could not be parsed as XML")

    kind_and_tag = _ROOT_KINDS.get(root.name)
    if kind_and_tag is None:
        logger.info("[sitemap_parser] unrecognized root element: %s", root.name)
        return SitemapDocument(kind="unrecognized")

    kind, entry_tag = kind_and_tag
    entries: List[SitemapEntry] = [
        SitemapEntry(location=_entry_location(entry))
        for entry in root.find_all(entry_tag, recursive=False)
    ]
    return SitemapDocument(kind=kind, entries=entries)
