"""RSS feed fallback for when the WordPress API is unavailable."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import List, Optional
from urllib.parse import urlparse

import requests

from .config import SitemapConfig
from .models import DEFAULT_CATEGORY_SLUG, Post

logger = logging.getLogger(__name__)

FEED_ACCEPT = "application/rss+xml,application/xml;q=0.9,*/*;q=0.8"

_ITEM_OPEN = re.compile(r"<item\b[^>]*>", re.IGNORECASE)
_LINK = re.compile(r"<link>([^<]+)</link>", re.IGNORECASE)
_PUB_DATE = re.compile(r"<pubDate>([^<]+)</pubDate>", re.IGNORECASE)
_CDATA = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)


class FeedUnusable(RuntimeError):
    """The RSS feed could not be fetched or held no usable posts."""


def feed_url(config: SitemapConfig) -> str:
    return f"{config.base_url.rstrip('/')}/feed/"


def _first_match(pattern: re.Pattern, fragment: str) -> Optional[str]:
    match = pattern.search(_CDATA.sub(r"\1", fragment))
    if not match:
        return None
    value = match.group(1).strip()
    return value or None


def _parse_pub_date(value: Optional[str]) -> datetime:
    if value:
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            logger.debug("Unparseable pubDate %r", value)
        else:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed.astimezone(timezone.utc)
    return datetime.now(timezone.utc)


def post_from_link(link: str, pub_date: Optional[str] = None) -> Optional[Post]:
    """Derive a Post from a permalink such as https://site/<category>/<slug>/."""
    segments = [part for part in urlparse(link).path.split("/") if part]
    if not segments:
        return None
    category_slug = segments[-2] if len(segments) >= 2 else DEFAULT_CATEGORY_SLUG
    return Post(
        slug=segments[-1],
        link=link,
        published=_parse_pub_date(pub_date),
        category_slug=category_slug,
    )


def parse_feed_items(xml: str) -> List[Post]:
    """Extract posts from raw RSS text without a full XML parse."""
    posts: List[Post] = []
    for fragment in _ITEM_OPEN.split(xml)[1:]:
        link = _first_match(_LINK, fragment)
        if not link:
            logger.debug("Skipping feed item without a link")
            continue
        try:
            post = post_from_link(link, _first_match(_PUB_DATE, fragment))
        except ValueError as exc:
            logger.debug("Skipping feed item with malformed link %s: %s", link, exc)
            continue
        if post is None:
            logger.debug("Skipping feed item with no slug in link %s", link)
            continue
        posts.append(post)
    return posts


def fetch_posts_from_rss(session: requests.Session, config: SitemapConfig) -> List[Post]:
    """Fetch the site's RSS feed and recover a minimal post list.

    Failures are logged and result in an empty list.
    """
    url = feed_url(config)
    logger.info("Fetching RSS feed fallback from %s", url)
    try:
        try:
            response = session.get(
                url,
                headers={"User-Agent": config.user_agent, "Accept": FEED_ACCEPT},
                timeout=config.timeout,
            )
        except requests.RequestException as exc:
            raise FeedUnusable(f"RSS request failed: {exc}") from exc

        if not response.ok:
            raise FeedUnusable(f"RSS returned {response.status_code}: {response.reason}")

        posts = parse_feed_items(response.text or "")
        if not posts:
            raise FeedUnusable("RSS contained no posts")
    except FeedUnusable as exc:
        logger.warning("RSS fallback failed: %s", exc)
        return []

    posts = posts[: config.post_limit]
    logger.info("Recovered %d posts from RSS feed", len(posts))
    return posts
