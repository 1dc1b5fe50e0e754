"""Localizer bot structured logging module.

Every module logs through a structlog logger bound to its own name:

    logger = get_module_logger()
    logger.warning("string_not_translated", key=key, language=tag)

Events are rendered as JSON in production and as coloured console lines in
development. Under pytest nothing is emitted; tests patch the module level
`logger` objects to assert on events.
"""

import inspect
import logging
import sys
from typing import Any, List, MutableMapping

import structlog
from structlog.stdlib import BoundLogger
from structlog.typing import Processor

from .config import settings

SILENT_LEVEL = logging.CRITICAL + 1


def _is_test_environment() -> bool:
    """Detect if running in a test environment."""
    return "pytest" in sys.modules


def _add_build_info(
    _logger: Any, _method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Stamp events with the deployed commit."""
    event_dict.setdefault("git_sha", settings.GIT_SHA)
    return event_dict


def _build_processors(production: bool) -> List[Processor]:
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if production:
        processors.append(_add_build_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def _configure_silent() -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", level=SILENT_LEVEL, force=True)
    logging.root.setLevel(SILENT_LEVEL)


def configure_logging(log_level: str | None = None) -> BoundLogger:
    """Configure structured logging for the application.

    Args:
        log_level: Standard logging level name. Defaults to settings.LOG_LEVEL.

    Returns:
        Root structlog logger.
    """
    if _is_test_environment():
        _configure_silent()
        return structlog.stdlib.get_logger()

    structlog.configure(
        processors=_build_processors(settings.is_production),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    level_name = (log_level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level_name, logging.INFO),
    )
    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def get_module_logger() -> BoundLogger:
    """Logger bound to the calling module.

    The last dotted part of the module name becomes the `component` field
    ("coverage", "merger") and the full name the `module_path` field.
    """
    frame = inspect.currentframe()
    caller = frame.f_back if frame is not None else None
    module = inspect.getmodule(caller) if caller is not None else None

    if module is None:
        return logger.bind(component="unknown")

    return logger.bind(
        component=module.__name__.rsplit(".", 1)[-1],
        module_path=module.__name__,
    )
