"""Shared utilities for CLI commands"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, NoReturn

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from etpl.errors import TemplateError

console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the etpl CLI.

    Log levels:
    - Normal: Only warnings/errors shown
    - Verbose (-v): INFO level
    - Debug (ETPL_DEBUG=1): DEBUG level - shows compile details
    """
    debug = bool(os.environ.get("ETPL_DEBUG"))
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console,
        show_time=verbose,
        show_path=debug,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger("etpl")
    logger.setLevel(level)
    logger.handlers = [handler]
    logger.propagate = False


def load_data(path: Path | None) -> dict[str, Any]:
    """Load a data context from a YAML or JSON file (JSON parses as YAML)."""
    if path is None:
        return {}
    if not path.exists():
        raise TemplateError(f"Data file not found: {path}")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TemplateError(f"Data file {path} must contain a mapping")
    return data


def parse_overrides(pairs: list[str] | None) -> dict[str, Any]:
    """Parse ``key=value`` pairs; values are decoded as JSON when possible."""
    result: dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, raw = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise TemplateError(f"Invalid --set value (expected key=value): {pair}")
        try:
            result[key] = json.loads(raw)
        except json.JSONDecodeError:
            result[key] = raw
    return result


def handle_error(error: Exception) -> NoReturn:
    """Report ``error`` on stderr and exit.

    Exit codes: template errors carry their own (2 for syntax errors);
    unreadable files, invalid config and malformed data exit 1.
    """
    if isinstance(error, TemplateError):
        message, exit_code = error.message, error.exit_code
    elif isinstance(error, OSError):
        if error.filename is None:
            message = str(error)
        else:
            message = f"{error.strerror}: {error.filename}"
        exit_code = 1
    elif isinstance(error, ValidationError):
        message = f"Invalid config ({error.error_count()} errors)\n{error}"
        exit_code = 1
    elif isinstance(error, yaml.YAMLError):
        message, exit_code = f"Malformed YAML\n{error}", 1
    else:
        typer.echo(f"Unexpected error: {error!r}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(exit_code)
