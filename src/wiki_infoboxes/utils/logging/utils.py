# ABOUTME: Logger utilities with context binding and pipeline step decorators
# ABOUTME: Provides get_logger function and decorators for consistent structured logging

import functools
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

# Type variable for decorated functions
F = TypeVar("F", bound=Callable[..., Any])


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger instance with automatic module detection.

    Args:
        name: Logger name, auto-detected from caller if None

    Returns:
        Configured structlog logger instance
    """
    if name is None:
        import inspect

        frame = inspect.currentframe()
        if frame and frame.f_back:
            # Get the module name of the caller
            name = frame.f_back.f_globals.get("__name__", "unknown")

    return structlog.get_logger(name or "wiki_infoboxes")


def generate_operation_id() -> str:
    """Generate a unique operation ID for tracking requests."""
    return str(uuid.uuid4())[:8]


def log_pipeline_step(step_name: str) -> Callable[[F], F]:
    """Decorator to log async pipeline steps with their duration and outcome.

    Args:
        step_name: Name of the pipeline step

    Returns:
        Decorated async function with step logging
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            logger = get_logger(func.__module__)
            bound_logger = logger.bind(step=step_name, step_id=generate_operation_id())

            bound_logger.info(f"Starting pipeline step: {step_name}")
            start_time = time.time()

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                duration = time.time() - start_time
                bound_logger.error(
                    f"Failed pipeline step: {step_name}",
                    duration_seconds=round(duration, 3),
                    error=str(e),
                    error_type=type(e).__name__,
                    success=False,
                )
                raise

            duration = time.time() - start_time
            result_info = {}
            if hasattr(result, "__len__"):
                result_info["result_count"] = len(result)

            bound_logger.info(
                f"Completed pipeline step: {step_name}",
                duration_seconds=round(duration, 3),
                success=True,
                **result_info,
            )
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


class LogContext:
    """Context manager for binding logger context."""

    def __init__(self, logger: structlog.stdlib.BoundLogger, **context):
        self.logger = logger
        self.context = context
        self.bound_logger = None

    def __enter__(self) -> structlog.stdlib.BoundLogger:
        self.bound_logger = self.logger.bind(**self.context)
        return self.bound_logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None and self.bound_logger is not None:
            self.bound_logger.error("Context operation failed", error=str(exc_val), error_type=exc_type.__name__)


def with_template_context(template_name: str, template_title: str) -> LogContext:
    """Create a logging context for work on a single infobox template.

    Args:
        template_name: Short template name (e.g. "chembox")
        template_title: Full wiki title of the template

    Returns:
        LogContext manager with template context
    """
    logger = get_logger()
    return LogContext(logger, template=template_name, template_title=template_title)


def with_pipeline_context(pipeline_name: str, **context) -> LogContext:
    """Create a logging context for pipeline operations.

    Args:
        pipeline_name: Name of the pipeline
        **context: Additional context to bind

    Returns:
        LogContext manager with pipeline context
    """
    logger = get_logger()
    operation_id = generate_operation_id()
    return LogContext(logger, pipeline=pipeline_name, operation_id=operation_id, **context)
