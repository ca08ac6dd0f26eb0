"""Logging for the CLI and the API server, built on loguru.

Records are tagged with a short ``component`` (``sessions``, ``workspace``,
``github``, ...) taken from the emitting module, so a CLI run reads as a
compact trail of account, workspace and build events.  Stdlib loggers
(uvicorn, httpx) are bridged into the same sink.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from branchlift.runtime.settings import BranchliftSettings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> "
    "<level>{level: <7}</level> "
    "<cyan>{extra[component]: <10}</cyan> "
    "<level>{message}</level>"
)

# Per-request chatter from the GitHub client and the access log.  Let it
# through only when branchlift itself runs at DEBUG.
_CHATTY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def _tag_component(record: Any) -> None:
    name = record["name"] or ""
    if name.startswith("branchlift."):
        component = name.rsplit(".", 1)[-1]
    else:
        component = name.split(".", 1)[0]
    record["extra"].setdefault("component", component)


class _InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, tagged with the stdlib logger name."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        component = record.name.split(".", 1)[0]
        logger.bind(component=component).opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(settings: BranchliftSettings, *, sink: Any = sys.stderr, replace: bool = True) -> int:
    """Install the branchlift sink and bridge stdlib logging into loguru.

    ``settings.log_level`` sets the threshold; ``settings.log_format`` picks
    the coloured console line or one JSON object per record.  With
    ``replace=False`` existing loguru sinks are kept, which lets tests attach
    their own before the CLI or app runs.

    Returns the loguru handler id of the new sink.
    """
    level = settings.log_level.upper()

    if replace:
        logger.remove()
    logger.configure(patcher=_tag_component)

    if settings.log_format == "json":
        handler_id = logger.add(sink, level=level, serialize=True)
    else:
        handler_id = logger.add(sink, level=level, format=CONSOLE_FORMAT)

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    chatty_level = logging.DEBUG if level == "DEBUG" else logging.WARNING
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(chatty_level)

    logger.debug("Logging ready (level={}, format={})", level, settings.log_format)
    return handler_id
