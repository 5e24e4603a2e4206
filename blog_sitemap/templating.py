"""Jinja2 environment for blog_sitemap templates."""

from __future__ import annotations

import datetime
from importlib import resources

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

_ENV: Environment | None = None


def _isodate(value: datetime.date | datetime.datetime) -> str:
    """Format a date or datetime as YYYY-MM-DD."""
    if isinstance(value, datetime.datetime):
        value = value.date()
    return value.isoformat()


def get_environment() -> Environment:
    """Return a cached Jinja environment configured for package templates."""
    global _ENV
    if _ENV is None:
        template_dir = resources.files(__package__) / "templates"
        loader = FileSystemLoader(str(template_dir))
        _ENV = Environment(
            loader=loader,
            autoescape=select_autoescape(["xml", "xml.j2"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        _ENV.filters["isodate"] = _isodate
    return _ENV
