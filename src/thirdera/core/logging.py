"""Structured logging configuration for the Third Era rules engine.

The engine logs through structlog. Derivation binds the actor being
derived and the running pipeline stage into the context, so every event
raised while computing an actor says whose numbers and which step it
belongs to. Rules enums are rendered as their plain values.

Example:
    >>> from thirdera.core.logging import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Actor derived", ac=18)
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from enum import Enum
from functools import partial
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


def render_rule_values(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Replace rules enums in an event with their plain values.

    Lists of enums, such as applied condition ids or speed reasons, are
    rendered element by element.

    Args:
        logger: The wrapped logger instance.
        method_name: Name of the logging method called.
        event_dict: The event dictionary to modify.

    Returns:
        The event dictionary with enum values unwrapped.
    """
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
        elif isinstance(value, list) and any(isinstance(entry, Enum) for entry in value):
            event_dict[key] = [
                entry.value if isinstance(entry, Enum) else entry for entry in value
            ]
    return event_dict


def stage_name(stage: Callable[..., Any]) -> str:
    """Readable name of a pipeline stage, looking through partials."""
    while isinstance(stage, partial):
        stage = stage.func
    return getattr(stage, "__name__", type(stage).__name__)


@contextmanager
def actor_context(actor_id: str, actor_name: str, kind: str) -> Iterator[None]:
    """Tag every event logged inside the block with the actor being derived."""
    with structlog.contextvars.bound_contextvars(
        actor_id=actor_id, actor=actor_name, actor_kind=str(kind)
    ):
        yield


@contextmanager
def stage_context(stage: Callable[..., Any]) -> Iterator[None]:
    """Tag every event logged inside the block with the running stage."""
    with structlog.contextvars.bound_contextvars(stage=stage_name(stage)):
        yield


def configure_logging(
    *,
    level: str = "INFO",
    json_format: bool = False,
) -> None:
    """Configure engine-wide logging.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, output logs in JSON format for production.

    Example:
        >>> configure_logging(level="DEBUG", json_format=False)
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        render_rule_values,
        structlog.processors.StackInfoRenderer(),
    ]

    if json_format:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a configured logger instance.

    Args:
        name: Optional name for the logger (typically __name__).

    Returns:
        A configured structlog BoundLogger instance.
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables that will be included in all subsequent logs.

    Useful for tagging every derivation of an update batch, e.g. with the
    identifier of the document change that triggered the recompute.

    Args:
        **kwargs: Key-value pairs to bind to the logging context.

    Example:
        >>> bind_context(batch_id="update-42")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "actor_context",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "render_rule_values",
    "stage_context",
    "stage_name",
]
