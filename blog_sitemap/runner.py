"""High-level orchestration for the blog sitemap build step."""

from __future__ import annotations

import contextlib
import enum
import logging
from dataclasses import dataclass
from typing import List, Optional

import requests
from jinja2 import TemplateError

from . import SUCCESS
from .config import SitemapConfig
from .feeds import fetch_posts_from_rss
from .models import Post
from .renderers import render, render_empty_sitemap
from .wordpress import (
    SourceUnavailable,
    create_session,
    fetch_all_posts,
    fetch_categories,
)
from .writer import write_sitemap

logger = logging.getLogger(__name__)


class NoPostsAvailable(RuntimeError):
    """Neither the API nor the RSS feed produced any posts."""


class Outcome(str, enum.Enum):
    SUCCESS = "success"
    DEGRADED = "degraded"


@dataclass
class RunResult:
    """Returned data after executing a run."""

    outcome: Outcome
    output_path: str
    source: Optional[str] = None
    post_count: int = 0
    category_count: int = 0
    size_bytes: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.SUCCESS


def _collect_posts(session: requests.Session, config: SitemapConfig):
    """Return (posts, source, api_error) trying the API first, then RSS."""
    posts: List[Post] = []
    api_error: Optional[SourceUnavailable] = None

    try:
        posts = fetch_all_posts(session, config)
    except SourceUnavailable as exc:
        api_error = exc
        logger.warning("WP API fetch failed, will try RSS fallback: %s", exc)

    if posts:
        return posts, "api", api_error

    logger.warning("No posts from API, trying RSS feed fallback...")
    posts = fetch_posts_from_rss(session, config)
    return posts, ("rss" if posts else None), api_error


def _write_empty(config: SitemapConfig, error: str) -> RunResult:
    logger.warning("Continuing build without blog sitemap")
    size = write_sitemap(config.output_path, render_empty_sitemap())
    logger.log(SUCCESS, "Created empty blog sitemap as fallback")
    return RunResult(
        outcome=Outcome.DEGRADED,
        output_path=config.output_path,
        size_bytes=size,
        error=error,
    )


def _generate(session: requests.Session, config: SitemapConfig) -> RunResult:
    logger.info("Fetching blog posts from WordPress API...")
    posts, source, api_error = _collect_posts(session, config)

    categories = fetch_categories(session, config)

    if not posts:
        if api_error is not None:
            raise NoPostsAvailable(
                f"No posts returned. API error: {api_error}. RSS fallback was also empty."
            )
        raise NoPostsAvailable(
            "No posts returned from WordPress (API and RSS fallback empty)"
        )

    content = render(posts, categories, config.base_url)
    size = write_sitemap(config.output_path, content)

    label = "RSS fallback" if source == "rss" else "WP API"
    logger.log(
        SUCCESS,
        "Generated %s (%d categories, %d posts, %d bytes) via %s",
        config.output_path,
        len(categories),
        len(posts),
        size,
        label,
    )
    return RunResult(
        outcome=Outcome.SUCCESS,
        output_path=config.output_path,
        source=source,
        post_count=len(posts),
        category_count=len(categories),
        size_bytes=size,
    )


def execute(
    config: SitemapConfig, session: Optional[requests.Session] = None
) -> RunResult:
    """Fetch posts and categories, then write the sitemap.

    A session is created for the run when none is supplied. No failure
    propagates; every error ends in a degraded result with an empty sitemap.
    """
    try:
        with contextlib.ExitStack() as stack:
            if session is None:
                session = stack.enter_context(create_session(config))
            return _generate(session, config)
    except (NoPostsAvailable, OSError, TemplateError) as exc:
        logger.error("Failed to generate blog sitemap: %s", exc)
        return _write_empty(config, str(exc))
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error while generating blog sitemap.")
        return _write_empty(config, str(exc) or type(exc).__name__)
