"""Logging bootstrap.

Modules log through `logging.getLogger(__name__)`; entry points call
`init_logging` once. Output goes to stderr through Rich so that stdout stays
clean for `--raw` JSON.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from companyinfo.core.config import AppSettings

_INITIALIZED: bool = False


def init_logging(level: str | None = None, *, settings: AppSettings | None = None) -> None:
    global _INITIALIZED

    settings = settings or AppSettings()
    log_level_str = (level or settings.log_level).upper()
    log_level = getattr(logging, log_level_str, logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # Chatty transport internals stay at WARNING unless explicitly debugging.
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))
    logging.getLogger("httpcore").setLevel(max(log_level, logging.WARNING))

    if _INITIALIZED:
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root_logger.addHandler(handler)

    _INITIALIZED = True
