"""Generate a blog sitemap from a WordPress site."""

import logging

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

__all__ = ["SUCCESS"]
