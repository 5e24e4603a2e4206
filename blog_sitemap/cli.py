"""Command-line interface for the blog sitemap generator."""

from __future__ import annotations

import argparse
import logging
import os
import pprint
from pathlib import Path
from typing import List, Optional

from . import SUCCESS
from .config import DEFAULT_OUTPUT_PATH, resolve_config
from .runner import execute

logger = logging.getLogger(__name__)

LEVEL_ICONS = {
    logging.DEBUG: "·",
    logging.INFO: "📝",
    SUCCESS: "✓",
    logging.WARNING: "⚠️ ",
    logging.ERROR: "❌",
    logging.CRITICAL: "❌",
}


class IconFormatter(logging.Formatter):
    """Formatter that prefixes each record with an icon for its level."""

    def format(self, record: logging.LogRecord) -> str:
        record.icon = LEVEL_ICONS.get(record.levelno, "")
        return super().format(record)


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Generate the blog sitemap from the WordPress API or RSS feed."
    )
    parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT_PATH,
        help="Path of the sitemap file to write.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Request timeout in seconds (default: no explicit timeout).",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Optional path to a log file.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 1 when the sitemap had to be degraded to an empty one.",
    )
    return parser


def configure_logging(level_name: str, log_file: Optional[str] = None) -> None:
    """Initialise logging according to options."""
    log_level = getattr(logging, level_name.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Unsupported log level: {level_name}")

    formatter = IconFormatter("%(asctime)s %(icon)s %(levelname)s %(name)s: %(message)s")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.setLevel(log_level)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    if log_file:
        log_path = Path(log_file)
        if log_path.parent and not log_path.parent.exists():
            log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logger.debug(
            "Logger initialised with level %s and file output to %s",
            level_name.upper(),
            log_path,
        )
    else:
        logger.debug(
            "Logger initialised with console output at level %s", level_name.upper()
        )


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(args.log_level, args.log_file)
        config = resolve_config(
            os.environ, output_path=args.output, timeout=args.timeout
        )
    except ValueError as exc:
        parser.error(str(exc))

    logger.info("Active Configuration:\n%s", pprint.pformat(config.masked()))

    try:
        result = execute(config)
    except Exception:  # noqa: BLE001
        logger.exception("Unexpected error during execution.")
        return 1

    if not result.ok and args.strict:
        return 1
    return 0
