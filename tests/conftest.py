import json
from typing import Any, Callable, Dict, List, Optional, Union

import pytest

from blog_sitemap.config import SitemapConfig


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(
        self,
        status_code: int = 200,
        payload: Any = None,
        text: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        reason: str = "OK",
    ):
        self.status_code = status_code
        self.reason = reason
        self.headers = headers or {}
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        return json.loads(self.text)


Handler = Union[FakeResponse, Exception, Callable[[str], FakeResponse]]


class FakeSession:
    """Routes GET requests to canned responses by URL prefix and records calls."""

    def __init__(self, routes: Dict[str, Handler]):
        self.routes = routes
        self.calls: List[Dict[str, Any]] = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return None

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": dict(headers or {}), "timeout": timeout})
        for prefix, handler in self.routes.items():
            if url.startswith(prefix):
                if isinstance(handler, Exception):
                    raise handler
                if callable(handler):
                    return handler(url)
                return handler
        raise AssertionError(f"Unexpected request to {url}")

    def urls(self, prefix: str = "") -> List[str]:
        return [call["url"] for call in self.calls if call["url"].startswith(prefix)]


@pytest.fixture
def config(tmp_path):
    return SitemapConfig(
        base_url="https://example.com",
        api_base="https://example.com/wp-json",
        output_path=str(tmp_path / "dist" / "sitemap-blog.xml"),
    )


POSTS_URL = "https://example.com/wp-json/wp/v2/posts"
CATEGORIES_URL = "https://example.com/wp-json/wp/v2/categories"
FEED_URL = "https://example.com/feed/"


def api_post(slug: str, category: Optional[str] = "news", modified: str = "2024-01-15T00:00:00"):
    post = {"slug": slug, "link": f"https://example.com/{category}/{slug}/", "modified": modified}
    if category:
        post["_embedded"] = {"wp:term": [[{"slug": category, "taxonomy": "category"}]]}
    return post


def rss_document(*links: str) -> str:
    items = "".join(
        f"<item><title>T</title><link>{link}</link>"
        "<pubDate>Mon, 15 Jan 2024 10:00:00 +0000</pubDate></item>"
        for link in links
    )
    return f'<?xml version="1.0"?><rss version="2.0"><channel><title>Blog</title>{items}</channel></rss>'
