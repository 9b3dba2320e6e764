"""Jinja2 expression environment for statement directives."""

from typing import Any, Optional

from jinja2 import Environment, StrictUndefined, Undefined, pass_context
from jinja2.runtime import Context

from etpl.config import DEFAULT_CONFIG, EngineConfig
from etpl.resolver import resolve


@pass_context
def lookup(context: Context, path: str, default: Any = "") -> Any:
    """Resolve a path expression against the current scope.

    Same contract as the echo form, so ``lookup('a.b[0].c')`` inside a
    statement behaves exactly like ``<%= a.b[0].c %>``.

    Args:
        path: Path expression like ``a.b[0].c``.
        default: Returned instead of ``""`` when nothing is found.

    Example:
        <% if lookup('user.emails[0]') %>...<% end %>
    """
    value = resolve(context.get_all(), path)
    if isinstance(value, str) and value == "":
        return default
    return value


def get_expression_env(config: Optional[EngineConfig] = None) -> Environment:
    """Create the Jinja2 Environment used to compile statement expressions.

    Args:
        config: Engine configuration; decides the undefined policy and extra
            globals.

    Returns:
        Configured Jinja2 Environment.
    """
    config = config or DEFAULT_CONFIG

    env = Environment(
        undefined=StrictUndefined if config.strict_undefined else Undefined,
        autoescape=False,
    )

    env.globals["lookup"] = lookup
    env.globals["len"] = len
    env.globals.update(config.globals)

    return env
