from __future__ import annotations

import logging
from typing import Iterable, Optional

from indegoatlas.config.models import LoggingSettings


# Per-request connection chatter from the HTTP stack drowns out fetch summaries at INFO.
NOISY_LOGGERS = ("urllib3", "requests")


def configure_logging(settings: LoggingSettings, *, quiet: Iterable[str] = NOISY_LOGGERS) -> None:
    level = getattr(logging, settings.level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Invalid log level: {settings.level}")

    handlers: Optional[list[logging.Handler]] = None
    if settings.file is not None:
        settings.file.parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(settings.file, encoding="utf-8"), logging.StreamHandler()]

    logging.basicConfig(level=level, format=settings.format, handlers=handlers)

    for name in quiet:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
