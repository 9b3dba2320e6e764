"""etpl - embedded-directive text templates.

Literal text with ``<%= path %>`` echoes and ``<% statement %>`` control flow,
compiled once into a reusable renderer.
"""

from etpl.compiler import Compiler, compile_template
from etpl.config import EngineConfig, load_config
from etpl.errors import TemplateError, TemplateSyntaxError
from etpl.renderer import Procedure
from etpl.resolver import resolve
from etpl.template import Template

__version__ = "0.1.0"

__all__ = [
    # Core
    "Template",
    "Procedure",
    "Compiler",
    "compile_template",
    "resolve",
    # Config
    "EngineConfig",
    "load_config",
    # Errors
    "TemplateError",
    "TemplateSyntaxError",
]
