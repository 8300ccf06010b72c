# app/config.py

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    アプリ全体で使う設定クラス。
    .env から環境変数を読み込み、属性として参照できるようにする。
    """

    # ---------- HTTP クライアント ----------
    # 一部サイトは bot っぽい UA を弾くので、ブラウザ寄りの UA をデフォルトにする
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36 sitemap-architect/0.1"
    )

    # ---------- タイムアウト（秒） ----------
    robots_timeout: float = 5.0
    probe_timeout: float = 3.0
    discover_all_timeout: float = 4.0
    sitemap_timeout: float = 10.0

    # ---------- Discovery ----------
    # discover() が順番に試すパス
    well_known_paths: List[str] = [
        "/sitemap.xml",
        "/sitemap_index.xml",
        "/wp-sitemap.xml",
    ]
    # discover_all() が並列に試すパス
    extended_well_known_paths: List[str] = [
        "/sitemap.xml",
        "/sitemap_index.xml",
        "/wp-sitemap.xml",
        "/sitemap_pages.xml",
        "/sitemap_posts.xml",
    ]
    # discover_all() で中身を確認するときに読む最大バイト数
    probe_max_bytes: int = 10_000

    # ---------- Index Resolver ----------
    # 巨大な sitemapindex 対策。これを超えた子 sitemap は無視する
    max_child_sitemaps: int = 15

    # ---------- Theme Extractor ----------
    max_themes: int = 30

    # ---------- サーバ ----------
    host: str = "0.0.0.0"
    port: int = 3001

    # ---------- ログ ----------
    log_level: str = "INFO"

    # ---------- Pydantic Settings 設定 ----------
    model_config = SettingsConfigDict(
        env_file=".env",            # .env を読む
        env_file_encoding="utf-8",
        extra="ignore",             # 定義外の環境変数があっても無視（エラーにしない）
    )


@lru_cache
def get_settings() -> Settings:
    """Settings をシングルトン的に使うためのヘルパ。"""
    return Settings()


# 他のモジュールからは `from app.config import settings` で利用
settings = get_settings()
