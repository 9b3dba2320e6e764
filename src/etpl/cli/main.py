"""etpl CLI Main Entry Point

Usage:
    etpl render page.tpl -d data.yaml            # Render to stdout
    etpl render page.tpl -d data.json -o out.txt # Render to file
    etpl render page.tpl --set name=World        # Override top-level keys
    etpl check page.tpl                          # Compile only
    etpl --version                               # Show version
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from etpl import __version__
from etpl.config import DEFAULT_CONFIG, EngineConfig, load_config
from etpl.template import Template

from .utils import handle_error, load_data, parse_overrides, setup_logging

log = logging.getLogger(__name__)

typer_app = typer.Typer(
    help="Render <% %> templates against YAML/JSON data.", no_args_is_help=True
)


def _load_config(path: Optional[Path]) -> EngineConfig:
    if path is None:
        return DEFAULT_CONFIG
    return load_config(path)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"etpl {__version__}")
        raise typer.Exit()


@typer_app.callback()
def cli(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Embedded-directive template engine."""


@typer_app.command()
def render(
    template: Path = typer.Argument(..., help="Template file to render."),
    data: Optional[Path] = typer.Option(
        None, "-d", "--data", help="YAML or JSON file with the data context."
    ),
    output: Optional[Path] = typer.Option(
        None, "-o", "--output", help="Write output to file instead of stdout."
    ),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Engine config YAML file."
    ),
    overrides: Optional[List[str]] = typer.Option(
        None, "--set", help="Override a top-level key (key=value, JSON values)."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging."),
) -> None:
    """Render TEMPLATE with a data context."""
    setup_logging(verbose)
    try:
        tpl = Template.from_file(template, config=_load_config(config))
        context = load_data(data)
        context.update(parse_overrides(overrides))
        log.info("Rendering %s with %d top-level keys", template, len(context))
        text = tpl.render(context)
    except Exception as e:
        handle_error(e)

    if output is None:
        typer.echo(text, nl=False)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        log.info("Wrote %s", output)


@typer_app.command()
def check(
    template: Path = typer.Argument(..., help="Template file to compile."),
    config: Optional[Path] = typer.Option(
        None, "-c", "--config", help="Engine config YAML file."
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logging."),
) -> None:
    """Compile TEMPLATE without rendering and report problems."""
    setup_logging(verbose)
    try:
        procedure = Template.from_file(template, config=_load_config(config)).compile()
    except Exception as e:
        handle_error(e)

    typer.echo(f"{template}: OK ({len(procedure.instructions)} instructions)")


def main() -> None:
    typer_app()


if __name__ == "__main__":
    main()
