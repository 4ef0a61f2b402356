from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: int | str = "INFO") -> None:
    """Configure stdlib logging with a consistent, project-wide format."""
    if isinstance(level, str):
        level = level.strip().upper()

    root_logger = logging.getLogger()
    if root_logger.handlers:
        # Avoid duplicate handlers if called multiple times (e.g., uvicorn + CLI).
        root_logger.setLevel(level)
        return

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
