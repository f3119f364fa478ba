"""Structured logging for boundrand, scoped to the ``boundrand`` logger tree.

boundrand is linked into larger programs, so it never touches the root
logger or structlog's global configuration. Every logger returned by
:func:`get_logger` is a structlog ``BoundLogger`` wrapping a stdlib logger
under ``boundrand.*``. Events are filtered by that stdlib logger's level
before anything else runs, so an unconfigured process drops debug events
and hands the rest to whatever handlers the host installed.

:func:`configure_logging` attaches one JSON (or console) handler to the
``boundrand`` logger and stops propagation, so sampler events are rendered
once, by structlog's ProcessorFormatter.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    'LOGGER_NAME',
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'get_logger',
    'remove_log_hook',
    'reset_logging',
]

LOGGER_NAME = 'boundrand'

# Marks the handler configure_logging() installed, so reconfiguring replaces only it
_HANDLER_MARK = '_boundrand_handler'


def _qualify(name: str | None) -> str:
    """Place ``name`` under the ``boundrand`` logger tree."""
    if not name or name == LOGGER_NAME:
        return LOGGER_NAME
    if name.startswith(LOGGER_NAME + '.'):
        return name
    return f'{LOGGER_NAME}.{name}'


def _get_shared_processors() -> list[Any]:
    """Processors run for both structlog events and stdlib records on boundrand loggers."""
    import structlog

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.stdlib.ExtraAdder(),
        _create_hook_processor(),
    ]


def _get_structlog_processors() -> list[Any]:
    """Level filter first, so hooks and formatting only see events that will be emitted."""
    import structlog

    return [
        structlog.stdlib.filter_by_level,
        *_get_shared_processors(),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]


def _get_renderer(json_output: bool = True) -> Any:
    import structlog

    if json_output:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _remove_own_handlers(package_logger: logging.Logger) -> None:
    for handler in list(package_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            package_logger.removeHandler(handler)


def configure_logging(
    level: str = 'INFO',
    *,
    json_output: bool = True,
) -> None:
    """Send boundrand events to stderr at ``level``.

    Only the ``boundrand`` logger is touched: the root logger, its handlers
    and structlog's global configuration are left as the host program set
    them. Calling this again replaces the previous boundrand handler.

    Args:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL").
        json_output: If True, emit JSON logs. If False, use colored console output.
    """
    import structlog

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_get_shared_processors(),
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _get_renderer(json_output),
        ],
    )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_MARK, True)

    package_logger = logging.getLogger(LOGGER_NAME)
    _remove_own_handlers(package_logger)
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.propagate = False


def reset_logging() -> None:
    """Undo :func:`configure_logging`: drop its handler and hand events back to the host."""
    package_logger = logging.getLogger(LOGGER_NAME)
    _remove_own_handlers(package_logger)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger under the ``boundrand`` tree.

    Args:
        name: Logger name; prefixed with ``boundrand.`` unless already there.
            None gives the ``boundrand`` logger itself.

    Returns:
        A structlog BoundLogger wrapping the stdlib logger of that name.
    """
    import structlog

    return structlog.wrap_logger(
        logging.getLogger(_qualify(name)),
        processors=_get_structlog_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )


# --- Logging Hooks ---

_log_hooks: list[Callable[[dict[str, Any]], None]] = []


def add_log_hook(hook: Callable[[dict[str, Any]], None]) -> None:
    """Register a hook to be called for each emitted boundrand event.

    Hooks receive a copy of the event dict, e.g. to count rejections or
    collect uniformity reports.
    """
    _log_hooks.append(hook)


def remove_log_hook(hook: Callable[[dict[str, Any]], None]) -> None:
    if hook in _log_hooks:
        _log_hooks.remove(hook)


def clear_log_hooks() -> None:
    _log_hooks.clear()


def _create_hook_processor() -> Callable[[Any, str, dict[str, Any]], dict[str, Any]]:
    def hook_processor(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        for hook in _log_hooks:
            try:
                hook(event_dict.copy())
            except Exception:
                pass  # a failing hook must not break the sampler
        return event_dict

    return hook_processor
