"""Shared data models for blog_sitemap."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

DEFAULT_CATEGORY_SLUG = "blog"


@dataclass
class Post:
    """A published blog post, from either the API or the RSS feed."""

    slug: str
    link: Optional[str] = None
    modified: Optional[date] = None
    published: Optional[datetime] = None
    category_slug: str = DEFAULT_CATEGORY_SLUG


@dataclass
class Category:
    """A blog category and the number of posts filed under it."""

    slug: str
    count: int = 0


@dataclass
class SitemapEntry:
    location: str
    lastmod: date
    changefreq: str
    priority: float
