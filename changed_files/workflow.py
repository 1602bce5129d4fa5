"""Logging helpers that speak the GitHub Actions workflow command syntax."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator
import logging
import sys

logger = logging.getLogger("changed_files")

_COMMANDS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class WorkflowCommandHandler(logging.StreamHandler):
    """Render records as ``::warning::msg`` style commands; INFO stays plain text."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = _COMMANDS.get(record.levelno)
        if command is None:
            return message
        return f"::{command}::{_escape_data(message)}"


def configure_logging(debug: bool = False) -> None:
    root = logging.getLogger("changed_files")
    for handler in list(root.handlers):
        if isinstance(handler, WorkflowCommandHandler):
            root.removeHandler(handler)

    handler = WorkflowCommandHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)


@contextmanager
def log_group(name: str) -> Iterator[None]:
    """Fold everything logged inside the block under a collapsible group."""
    logger.info("::group::%s", name)
    try:
        yield
    finally:
        logger.info("::endgroup::")
