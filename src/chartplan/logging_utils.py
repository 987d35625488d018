"""Logging configuration and error reporting helpers."""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Any, TypeVar

from chartplan.errors import ChartPlanError

DEFAULT_LOGGER_NAME = "chartplan"
DEFAULT_LOG_LEVEL = logging.INFO
DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_T = TypeVar("_T")


def parse_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}.")
    return value


def configure_logging(
    level: int | str = DEFAULT_LOG_LEVEL,
    *,
    logger_name: str = DEFAULT_LOGGER_NAME,
    fmt: str = DEFAULT_LOG_FORMAT,
    force: bool = False,
) -> logging.Logger:
    level = parse_level(level)
    logging.basicConfig(level=level, format=fmt, force=force)
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    return logger


def get_user_message(exc: BaseException) -> str:
    if isinstance(exc, ChartPlanError):
        return exc.user_message
    return f"Unexpected error: {exc}"


# Context keys worth showing next to the user message, in this order.
SUMMARY_CONTEXT_KEYS = ("plot_type", "stage", "rule", "geometry", "component")


def summarize_context(exc: BaseException) -> str:
    if not isinstance(exc, ChartPlanError):
        return ""
    parts = [
        f"{key}={exc.context[key]}"
        for key in SUMMARY_CONTEXT_KEYS
        if exc.context.get(key) is not None
    ]
    return ", ".join(parts)


def log_exception(
    logger: logging.Logger,
    exc: BaseException,
    *,
    show_traceback: bool = False,
) -> str:
    """Log the user-facing message, tagged with the chart it concerns."""
    user_message = get_user_message(exc)
    summary = summarize_context(exc)
    if summary:
        user_message = f"{user_message} [{summary}]"
    logger.error(user_message)
    if isinstance(exc, ChartPlanError) and exc.context:
        logger.debug("Error context: %s", exc.context)
    if show_traceback:
        logger.error("Detailed traceback:", exc_info=exc)
    else:
        logger.debug("Detailed traceback:", exc_info=exc)
    return user_message


def run_with_error_handling(
    func: Callable[..., _T],
    *args: Any,
    logger: logging.Logger,
    show_traceback: bool = False,
    **kwargs: Any,
) -> _T:
    try:
        return func(*args, **kwargs)
    except Exception as exc:
        log_exception(logger, exc, show_traceback=show_traceback)
        raise


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_LOG_FORMAT",
    "parse_level",
    "configure_logging",
    "get_user_message",
    "SUMMARY_CONTEXT_KEYS",
    "summarize_context",
    "log_exception",
    "run_with_error_handling",
]
