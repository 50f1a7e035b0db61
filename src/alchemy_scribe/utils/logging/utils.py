# ABOUTME: Logger helpers: module loggers, timed pipeline steps and outbound HTTP call logging
# ABOUTME: Every decorator reports duration_seconds, success and error_type in the same shape

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

F = TypeVar("F", bound=Callable[..., Any])

DEFAULT_LOGGER_NAME = "alchemy_scribe"


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after ``name`` or the calling module."""
    if name is None:
        caller = inspect.currentframe()
        if caller is not None and caller.f_back is not None:
            name = caller.f_back.f_globals.get("__name__")

    name = name or DEFAULT_LOGGER_NAME
    return structlog.get_logger(name, logger_name=name)


def generate_operation_id() -> str:
    """Short random id tying together the log lines of one run or call."""
    return uuid.uuid4().hex[:8]


class _Timed:
    """Times a block and logs its outcome on the given bound logger."""

    def __init__(self, logger: structlog.stdlib.BoundLogger, label: str):
        self.logger = logger
        self.label = label
        self.details: dict[str, Any] = {}
        self._started = 0.0

    def __enter__(self) -> "_Timed":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        elapsed = round(time.perf_counter() - self._started, 3)
        if exc_type is None:
            self.logger.info(f"{self.label} succeeded", duration_seconds=elapsed, success=True, **self.details)
        else:
            self.logger.error(
                f"{self.label} failed",
                duration_seconds=elapsed,
                error=str(exc_val),
                error_type=exc_type.__name__,
                success=False,
            )


def _find_url(args: tuple, kwargs: dict) -> str | None:
    candidates = [kwargs.get("url"), *args]
    for value in candidates:
        if isinstance(value, str) and value.startswith(("http://", "https://")):
            return value
    return None


def log_api_call(api_name: str, **context) -> Callable[[F], F]:
    """Log an async outbound request: target URL, timing and body size.

    Args:
        api_name: Remote service label, e.g. "wiki"
        **context: Extra fields bound to every line of the call
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            bound = get_logger(func.__module__).bind(
                api_name=api_name, call_id=generate_operation_id(), url=_find_url(args, kwargs), **context
            )
            bound.debug(f"Calling {api_name}")

            with _Timed(bound, f"Call to {api_name}") as timed:
                result = await func(*args, **kwargs)
                if isinstance(result, str | bytes):
                    timed.details["content_length"] = len(result)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def log_pipeline_step(step_name: str) -> Callable[[F], F]:
    """Log a synchronous step of the dataset pipeline with its result size."""

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            bound = get_logger(func.__module__).bind(step=step_name, pipeline="dataset_ingestion")
            bound.debug(f"Starting pipeline step: {step_name}")

            with _Timed(bound, f"Pipeline step {step_name}") as timed:
                result = func(*args, **kwargs)
                if hasattr(result, "__len__"):
                    timed.details["result_count"] = len(result)
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


class LogContext:
    """Binds run-level fields for the duration of a ``with`` block.

    An exception escaping the block is logged once with the bound fields and
    then propagates unchanged.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger, **context):
        self.logger = logger
        self.context = context
        self.bound_logger: structlog.stdlib.BoundLogger | None = None

    def __enter__(self) -> structlog.stdlib.BoundLogger:
        self.bound_logger = self.logger.bind(**self.context)
        return self.bound_logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None and self.bound_logger is not None:
            self.bound_logger.error("Run aborted", error=str(exc_val), error_type=exc_type.__name__)


def with_pipeline_context(pipeline_name: str, **context) -> LogContext:
    """Logging context for one pipeline run, tagged with a fresh operation id."""
    return LogContext(get_logger(), pipeline=pipeline_name, operation_id=generate_operation_id(), **context)
