"""Persisting the rendered sitemap."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def write_sitemap(path: str, content: str) -> int:
    """Overwrite ``path`` with ``content`` and return the number of bytes written."""
    location = Path(path)
    if location.parent and not location.parent.exists():
        location.parent.mkdir(parents=True, exist_ok=True)

    data = content.encode("utf-8")
    location.write_bytes(data)
    logger.debug("Wrote %d bytes to %s", len(data), location)
    return len(data)
