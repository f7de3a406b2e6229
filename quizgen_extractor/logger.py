"""Logging utilities for quizgen-extractor."""

import logging
import sys
import time
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterator, Optional

# Request ID of the upload currently being processed
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class ContextLogger:
    """Logger wrapper that renders structured data into the message."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    @staticmethod
    def _format_extra_data(extra_data: Optional[dict[str, Any]]) -> str:
        """Format extra data as key=value pairs."""
        if not extra_data:
            return ""
        parts = [f"{k}={v}" for k, v in extra_data.items()]
        return " [" + ", ".join(parts) + "]"

    def _log(
        self,
        level: int,
        msg: str,
        extra_data: Optional[dict[str, Any]] = None,
        **kwargs,
    ):
        if not self.logger.isEnabledFor(level):
            return

        request_id = request_id_var.get()
        if request_id:
            # Copy so callers can reuse their dicts
            extra_data = dict(extra_data or {})
            extra_data["request_id"] = request_id

        self.logger.log(level, msg + self._format_extra_data(extra_data), **kwargs)

    def debug(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.DEBUG, msg, extra_data, **kwargs)

    def info(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.INFO, msg, extra_data, **kwargs)

    def warning(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.WARNING, msg, extra_data, **kwargs)

    def error(self, msg: str, extra_data: Optional[dict[str, Any]] = None, **kwargs):
        self._log(logging.ERROR, msg, extra_data, **kwargs)


def setup_logging(log_level: str = "INFO"):
    """Configure application logging.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR)
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def get_logger(name: str) -> ContextLogger:
    """Get a context-aware logger (name is typically __name__)."""
    return ContextLogger(logging.getLogger(name))


@contextmanager
def request_context(request_id: Optional[str] = None) -> Iterator[str]:
    """Bind a request ID to every log line emitted inside the block.

    Args:
        request_id: Incoming request ID. A new UUID is generated when missing.

    Yields:
        The request ID in effect
    """
    request_id = request_id or str(uuid.uuid4())
    token = request_id_var.set(request_id)
    try:
        yield request_id
    finally:
        request_id_var.reset(token)


def get_request_id() -> Optional[str]:
    """Get the current request ID from context."""
    return request_id_var.get()


class Timer:
    """Context manager measuring elapsed wall time in milliseconds."""

    def __init__(self, name: str):
        self.name = name
        self.start_time: Optional[float] = None
        self.elapsed_ms: Optional[int] = None

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        if self.start_time is not None:
            self.elapsed_ms = int((time.perf_counter() - self.start_time) * 1000)

    def get_elapsed_ms(self) -> int:
        """Elapsed milliseconds, live while the block is still running."""
        if self.elapsed_ms is not None:
            return self.elapsed_ms
        if self.start_time is not None:
            return int((time.perf_counter() - self.start_time) * 1000)
        return 0
