"""Engine configuration.

Schema (etpl.yaml):
- open_delimiter / close_delimiter: directive delimiters (default ``<%`` / ``%>``)
- echo_marker: character after the open delimiter selecting echo (default ``=``)
- strict_undefined: unknown bare names in statements raise (default true)
- globals: extra names visible to statement expressions
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator


class EngineConfig(BaseModel):
    """Settings shared by the scanner, compiler and expression environment."""

    model_config = {"frozen": True}

    open_delimiter: str = Field(default="<%", description="Directive open delimiter")
    close_delimiter: str = Field(
        default="%>", description="Directive close delimiter"
    )
    echo_marker: str = Field(
        default="=", description="Marker after the open delimiter for echo directives"
    )
    strict_undefined: bool = Field(
        default=True,
        description="Raise on unknown bare names inside statement directives",
    )
    globals: dict[str, Any] = Field(
        default_factory=dict,
        description="Extra names visible to statement expressions",
    )

    @model_validator(mode="after")
    def check_delimiters(self) -> "EngineConfig":
        """Delimiters must be non-empty and distinguishable from each other."""
        if not self.open_delimiter or not self.close_delimiter:
            raise ValueError("delimiters must be non-empty")
        if self.open_delimiter == self.close_delimiter:
            raise ValueError("open and close delimiters must differ")
        if not self.echo_marker:
            raise ValueError("echo_marker must be non-empty")
        if self.echo_marker in (self.open_delimiter, self.close_delimiter):
            raise ValueError("echo_marker must differ from the delimiters")
        return self

    def directive_pattern(self) -> re.Pattern[str]:
        """Regex matching one directive: open, optional echo marker, body, close.

        The body is non-greedy and cannot cross a line break, so the first
        close delimiter always ends the directive.
        """
        return re.compile(
            "{open}({echo})?\\s*(.*?)\\s*{close}".format(
                open=re.escape(self.open_delimiter),
                echo=re.escape(self.echo_marker),
                close=re.escape(self.close_delimiter),
            )
        )


DEFAULT_CONFIG = EngineConfig()


def load_config(path: Path) -> EngineConfig:
    """Load an EngineConfig from a YAML file."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise TypeError(f"Config file {path} must contain a mapping")

    return EngineConfig(**data)
