"""Rendering helpers for the blog sitemap."""

from __future__ import annotations

import datetime
from typing import Iterable, List, Optional

from .models import Category, Post, SitemapEntry
from .templating import get_environment

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"

CATEGORY_CHANGEFREQ = "weekly"
CATEGORY_PRIORITY = 0.7
POST_CHANGEFREQ = "monthly"
POST_PRIORITY = 0.6


def utc_today() -> datetime.date:
    return datetime.datetime.now(datetime.timezone.utc).date()


def build_entries(
    posts: Iterable[Post],
    categories: Iterable[Category],
    base_url: str,
    today: datetime.date,
) -> List[SitemapEntry]:
    """Map categories and posts to sitemap entries, categories first."""
    base_url = base_url.rstrip("/")
    entries: List[SitemapEntry] = []

    for category in categories:
        if category.count <= 0:
            continue
        entries.append(
            SitemapEntry(
                location=f"{base_url}/blog/{category.slug}",
                lastmod=today,
                changefreq=CATEGORY_CHANGEFREQ,
                priority=CATEGORY_PRIORITY,
            )
        )

    for post in posts:
        if not post.slug:
            continue
        entries.append(
            SitemapEntry(
                location=f"{base_url}/{post.category_slug}/{post.slug}",
                lastmod=post.modified or today,
                changefreq=POST_CHANGEFREQ,
                priority=POST_PRIORITY,
            )
        )

    return entries


def render_sitemap(entries: Iterable[SitemapEntry]) -> str:
    """Render sitemap entries into the urlset XML document."""
    template = get_environment().get_template("sitemap.xml.j2")
    return template.render(namespace=SITEMAP_NAMESPACE, entries=list(entries))


def render(
    posts: Iterable[Post],
    categories: Iterable[Category],
    base_url: str,
    today: Optional[datetime.date] = None,
) -> str:
    return render_sitemap(
        build_entries(posts, categories, base_url, today or utc_today())
    )


def render_empty_sitemap() -> str:
    return render_sitemap([])
