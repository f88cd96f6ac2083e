"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
import logging
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def emit_json(data: Any) -> None:
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2))


def normalize_log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"--log-level 仅支持 {'|'.join(LOG_LEVELS)}: {value}")
    return level


def configure_logging(level: str) -> None:
    """Route stdlib logging through rich; safe to call more than once."""
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if isinstance(handler, RichHandler):
            handler.setLevel(level)
            return
    handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="[%X]"))
    handler.setLevel(level)
    root.addHandler(handler)


__all__ = ["LOG_LEVELS", "configure_logging", "emit_json", "normalize_log_level"]
