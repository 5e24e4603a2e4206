"""Configuration loading for the sitemap generator."""

from __future__ import annotations

import base64
import dataclasses
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://boxentertainment.ae"
DEFAULT_API_BASE = "https://boxentertainment.ae/wp-json"
DEFAULT_POST_LIMIT = 100
PAGE_SIZE = 100  # WordPress caps per_page at 100
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (compatible; BoxEntertainmentSitemap/1.0; +https://boxentertainment.ae)"
)
DEFAULT_OUTPUT_PATH = "dist/sitemap-blog.xml"

_MASKED = "***MASKED***"


@dataclass
class SitemapConfig:
    """Runtime options for a single sitemap run."""

    base_url: str = DEFAULT_BASE_URL
    api_base: str = DEFAULT_API_BASE
    post_limit: int = DEFAULT_POST_LIMIT
    page_size: int = PAGE_SIZE
    user_agent: str = DEFAULT_USER_AGENT
    bearer_token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    output_path: str = DEFAULT_OUTPUT_PATH
    timeout: Optional[float] = None

    def auth_header(self) -> Optional[str]:
        """Return the Authorization header value for API requests, if any."""
        if self.bearer_token:
            return f"Bearer {self.bearer_token}"
        if self.username and self.password:
            creds = f"{self.username}:{self.password}".encode("utf-8")
            return "Basic " + base64.b64encode(creds).decode("ascii")
        return None

    def masked(self) -> Dict[str, Any]:
        config_dict = dataclasses.asdict(self)
        for key in ("bearer_token", "password"):
            if config_dict.get(key):
                config_dict[key] = _MASKED
        return config_dict


def _parse_post_limit(raw: Optional[str]) -> int:
    if not raw:
        return DEFAULT_POST_LIMIT
    try:
        value = float(raw)
    except ValueError:
        logger.debug("Ignoring non-numeric post limit %r", raw)
        return DEFAULT_POST_LIMIT
    if not math.isfinite(value) or int(value) < 1:
        logger.debug("Ignoring out-of-range post limit %r", raw)
        return DEFAULT_POST_LIMIT
    return int(value)


def resolve_config(environ: Mapping[str, str], **overrides: Any) -> SitemapConfig:
    """Build a SitemapConfig from environment-style variables.

    Empty values count as unset. ``WP_API_BASE`` takes precedence over
    ``VITE_WP_API_BASE``. Keyword overrides (e.g. ``output_path``) are
    applied last.
    """
    base_url = environ.get("SITEMAP_BASE_URL") or DEFAULT_BASE_URL
    api_base = (
        environ.get("WP_API_BASE")
        or environ.get("VITE_WP_API_BASE")
        or DEFAULT_API_BASE
    )

    config = SitemapConfig(
        base_url=base_url.rstrip("/"),
        api_base=api_base.rstrip("/"),
        post_limit=_parse_post_limit(environ.get("VITE_PRERENDER_BLOG_LIMIT")),
        user_agent=environ.get("WP_USER_AGENT") or DEFAULT_USER_AGENT,
        bearer_token=environ.get("WP_API_TOKEN") or None,
        username=environ.get("WP_API_USER") or None,
        password=environ.get("WP_API_PASSWORD") or None,
    )
    return dataclasses.replace(config, **overrides)

