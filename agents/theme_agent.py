# agents/theme_agent.py

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Optional

from agents.tree_agent import url_path_segments
from app.config import settings
from models.site_models import ThemeEntry

logger = logging.getLogger(__name__)

# ============================================================
# パラメータ
# ============================================================

# これ以下の長さのセグメント（en, jp, p など）は無視
MIN_SEGMENT_LENGTH = 3

# 先頭セグメントの重み。深くなるごとに 1 ずつ下がり、最低 1
TOP_LEVEL_WEIGHT = 4

STOP_WORDS = frozenset(
    [
        "a", "an", "the", "and", "or", "of",
        "in", "into", "on", "at", "to", "for", "from", "with", "by", "as",
        "is", "are", "was", "were", "be",
    ]
)

_WORD_SEPARATOR = re.compile(r"[-_]")
# 数値として読める語（10 進・指数表記・0x/0o/0b・Infinity）
_NUMERIC = re.compile(
    r"^(?:[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
    r"|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+"
    r"|[+-]?Infinity)$"
)


# ============================================================
# ユーティリティ
# ============================================================

def segment_weight(index: int) -> int:
    """index 番目（0 始まり）のセグメントの重み。"""
    return max(1, TOP_LEVEL_WEIGHT - index)


def _split_words(segment: str) -> List[str]:
    """セグメントを - / _ で単語に分け、ストップワード・数字・空文字を落とす。"""
    words = []
    for word in _WORD_SEPARATOR.split(segment):
        if not word or word.lower() in STOP_WORDS or _NUMERIC.match(word):
            continue
        words.append(word)
    return words


def _fold_url(scores: Dict[str, float], url: str) -> Dict[str, float]:
    segments = url_path_segments(url)
    if segments is None:
        return scores

    segments = [s for s in segments if len(s) >= MIN_SEGMENT_LENGTH]
    for index, segment in enumerate(segments):
        weight = segment_weight(index)
        for word in _split_words(segment):
            key = word.lower()
            scores[key] = scores.get(key, 0) + weight
    return scores


# ============================================================
# メインロジック
# ============================================================

def extract_themes(urls: Iterable[str], limit: Optional[int] = None) -> List[ThemeEntry]:
    """
    URL パスからテーマ語を抽出し、スコア順に上位 limit 件（デフォルト 30）を返す。

    - 上位の階層ほど重く数える（/shop/... の shop は 4、3 階層目は 2）
    - 同点は最初に出てきた語が先（sorted は安定ソート）
    """
    if limit is None:
        limit = settings.max_themes

    scores: Dict[str, float] = {}
    for url in urls:
        scores = _fold_url(scores, url)

    ranked = sorted(scores.items(), key=lambda kv: kv[1], reverse=True)[:limit]

    logger.info("[theme_agent] words=%s returned=%s", len(scores), len(ranked))
    return [ThemeEntry(name=name, score=int(round(score))) for name, score in ranked]
