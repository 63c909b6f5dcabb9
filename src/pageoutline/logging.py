"""Logging utilities."""

from __future__ import annotations

import contextlib
import contextvars
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


_outline_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("pageoutline_outline_id", default="-")


class _ContextFilter(logging.Filter):
    """Inject the current outline id into log records."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        record.outline_id = _outline_id_var.get()  # type: ignore[attr-defined]
        return True


@contextlib.contextmanager
def outline_context(outline_id: str) -> Any:
    """Bind an outline id to every log record emitted inside the block.

    Each compression call gets its own id, so interleaved logs from concurrent
    invocations stay attributable.
    """

    token = _outline_id_var.set(outline_id)
    try:
        yield
    finally:
        _outline_id_var.reset(token)


def configure_logging(level: str = "INFO") -> None:
    """Configure application logging.

    Logs go to stderr so the CLI can print the outline itself on stdout.

    Args:
        level: Logging level name.
    """

    handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_time=True, show_level=True)
    handler.addFilter(_ContextFilter())

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s outline=%(outline_id)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(handler)
    else:
        for h in root.handlers:
            if isinstance(h, RichHandler):
                h.addFilter(_ContextFilter())
                h.setFormatter(formatter)


def get_logger(name: str) -> logging.Logger:
    """Get a module logger."""

    return logging.getLogger(name)
