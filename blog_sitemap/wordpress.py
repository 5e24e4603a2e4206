"""WordPress REST API client helpers."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

import requests

from .config import SitemapConfig
from .models import DEFAULT_CATEGORY_SLUG, Category, Post

logger = logging.getLogger(__name__)

CATEGORY_PAGE_SIZE = 100


class SourceUnavailable(RuntimeError):
    """The WordPress API could not provide posts."""


class CategoryFetchFailed(RuntimeError):
    """The WordPress API could not provide categories."""


def create_session(config: SitemapConfig) -> requests.Session:
    """Return a session carrying the headers shared by every request."""
    session = requests.Session()
    session.headers.update(
        {
            "User-Agent": config.user_agent,
            "Accept-Language": "en-US,en;q=0.9",
        }
    )
    return session


def build_url(config: SitemapConfig, pathname: str, params: Optional[Dict] = None) -> str:
    if not pathname.startswith("/"):
        pathname = "/" + pathname
    query = urlencode(params or {})
    return f"{config.api_base}{pathname}{'?' + query if query else ''}"


def build_headers(config: SitemapConfig) -> Dict[str, str]:
    headers = {
        "Accept": "application/json",
        "User-Agent": config.user_agent,
        "Accept-Language": "en-US,en;q=0.9",
    }
    authorization = config.auth_header()
    if authorization:
        headers["Authorization"] = authorization
    return headers


def fetch_json(
    session: requests.Session,
    config: SitemapConfig,
    pathname: str,
    params: Optional[Dict] = None,
) -> Tuple[List[Any], requests.Response]:
    """GET a WordPress endpoint and return its JSON array and the response."""
    api_url = build_url(config, pathname, params)
    logger.debug("Requesting %s", api_url)
    try:
        response = session.get(
            api_url, headers=build_headers(config), timeout=config.timeout
        )
    except requests.RequestException as exc:
        raise SourceUnavailable(f"WordPress API request failed - {api_url} - {exc}") from exc

    if not response.ok:
        body = response.text or ""
        raise SourceUnavailable(
            f"WordPress API {response.status_code}: {response.reason} - {api_url} - {body[:200]}"
        )

    try:
        data = response.json()
    except ValueError as exc:
        raise SourceUnavailable(f"WordPress API returned invalid JSON - {api_url}") from exc

    if not isinstance(data, list):
        raise SourceUnavailable(f"WordPress API returned a non-array payload - {api_url}")

    return data, response


def _total_pages(response: requests.Response) -> Optional[int]:
    raw = response.headers.get("X-WP-TotalPages")
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def _parse_modified(value: Any) -> Optional[date]:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable modification date %r", value)
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def _parse_published(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _embedded_category_slug(item: Dict[str, Any]) -> str:
    try:
        term = item["_embedded"]["wp:term"][0][0]
    except (KeyError, IndexError, TypeError):
        return DEFAULT_CATEGORY_SLUG
    if isinstance(term, dict) and term.get("slug"):
        return term["slug"]
    return DEFAULT_CATEGORY_SLUG


def post_from_api(item: Any) -> Optional[Post]:
    """Map a WordPress post object to a Post, or None when it has no slug."""
    if not isinstance(item, dict) or not item.get("slug"):
        return None
    return Post(
        slug=item["slug"],
        link=item.get("link"),
        modified=_parse_modified(item.get("modified")),
        published=_parse_published(item.get("date")),
        category_slug=_embedded_category_slug(item),
    )


def fetch_all_posts(session: requests.Session, config: SitemapConfig) -> List[Post]:
    """Page through /wp/v2/posts, newest first, up to config.post_limit posts."""
    posts: List[Post] = []
    page = 1
    total_pages = 1
    per_page = min(config.page_size, config.post_limit)

    while page <= total_pages and len(posts) < config.post_limit:
        data, response = fetch_json(
            session,
            config,
            "/wp/v2/posts",
            {
                "_embed": "true",
                "per_page": per_page,
                "page": page,
                "orderby": "date",
                "order": "desc",
            },
        )

        for item in data:
            post = post_from_api(item)
            if post is None:
                logger.debug("Skipping API post without slug on page %d", page)
                continue
            posts.append(post)

        header_pages = _total_pages(response)
        if header_pages is not None:
            total_pages = header_pages

        logger.debug(
            "Fetched page %d/%d (%d posts so far)", page, total_pages, len(posts)
        )
        if not data:
            break
        page += 1

    posts = posts[: config.post_limit]
    logger.info("Fetched %d posts from WordPress API", len(posts))
    return posts


def fetch_categories(session: requests.Session, config: SitemapConfig) -> List[Category]:
    """Return all categories, or an empty list when the API cannot provide them."""
    try:
        try:
            data, _ = fetch_json(
                session, config, "/wp/v2/categories", {"per_page": CATEGORY_PAGE_SIZE}
            )
        except SourceUnavailable as exc:
            raise CategoryFetchFailed(str(exc)) from exc

        categories = []
        for item in data:
            if not isinstance(item, dict) or not item.get("slug"):
                continue
            try:
                count = int(item.get("count") or 0)
            except (TypeError, ValueError):
                logger.debug("Skipping category %r with invalid count", item["slug"])
                continue
            categories.append(Category(slug=item["slug"], count=max(count, 0)))
    except CategoryFetchFailed as exc:
        logger.warning("Failed to fetch categories, continuing with posts only: %s", exc)
        return []

    logger.info("Fetched %d categories from WordPress API", len(categories))
    return categories
