from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from slacklite.config.schema import AppConfig

NO_SESSION = "-"

LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss} | {level:<5} | session={extra[session]} | "
    "{name}:{function}:{line} - {message}"
)


def setup_logging(config: AppConfig) -> None:
    """Send gateway logs to stderr at ``config.log_level``.

    Every record carries ``extra["session"]``; request handling runs inside
    ``session_context`` so tool-call logs name the SSE session they came from.
    """
    logger.remove()
    logger.configure(extra={"session": NO_SESSION})
    logger.add(
        sys.stderr,
        level=config.log_level.upper(),
        format=LOG_FORMAT,
        backtrace=False,
        diagnose=False,
    )


def session_context(session_id: str):
    return logger.contextualize(session=session_id)
