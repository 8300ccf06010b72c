"""Shared fixtures: an in-memory fake website served through httpx.MockTransport."""

import asyncio
from typing import Dict, List, Tuple, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from services.crawler import create_client, get_http_client

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

Page = Union[str, Tuple[int, str], httpx.Response, Exception]


def urlset_xml(urls: List[str]) -> str:
    entries = "".join(f"<url><loc>{u}</loc></url>" for u in urls)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset xmlns="{SITEMAP_NS}">{entries}</urlset>'


def index_xml(sitemaps: List[str]) -> str:
    entries = "".join(f"<sitemap><loc>{u}</loc></sitemap>" for u in sitemaps)
    return f'<?xml version="1.0" encoding="UTF-8"?><sitemapindex xmlns="{SITEMAP_NS}">{entries}</sitemapindex>'


class FakeSite:
    """
    URL -> response mapping. A page is either a body (served with 200),
    a (status, body) tuple, a ready-made httpx.Response (for custom headers),
    or an exception instance to raise.
    Anything not registered answers 404.
    """

    def __init__(self):
        self.pages: Dict[str, Page] = {}
        self.requested: List[str] = []

    def add(self, url: str, page: Page) -> "FakeSite":
        self.pages[url] = page
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        page = self.pages.get(url, (404, "not found"))
        if isinstance(page, Exception):
            raise page
        if isinstance(page, httpx.Response):
            return page
        if isinstance(page, tuple):
            status, body = page
        else:
            status, body = 200, page
        return httpx.Response(status, text=body)

    def client(self) -> httpx.AsyncClient:
        return create_client(transport=httpx.MockTransport(self.handler))

    def run(self, func, *args, **kwargs):
        """Run an async ``func(client, *args)`` against this site."""

        async def _main():
            async with self.client() as client:
                return await func(client, *args, **kwargs)

        return asyncio.run(_main())


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def api(site):
    """TestClient whose outgoing HTTP goes to the fake site."""

    async def _override():
        async with site.client() as client:
            yield client

    app.dependency_overrides[get_http_client] = _override
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
