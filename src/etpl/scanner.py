"""Scanner - splits template source into Literal/Expression/Statement instructions."""

from typing import List, Optional

from etpl.config import DEFAULT_CONFIG, EngineConfig
from etpl.ir import Expression, Instruction, Literal, Statement


def scan(source: str, config: Optional[EngineConfig] = None) -> List[Instruction]:
    """Scan ``source`` left to right into an ordered instruction list.

    Text between directives becomes ``Literal``; ``<%= path %>`` becomes
    ``Expression``; ``<% code %>`` becomes ``Statement``. Bodies are trimmed.
    An open delimiter with no close delimiter after it on the same line is
    left as literal text.

    Args:
        source: Raw template text.
        config: Engine configuration (delimiters and echo marker).

    Returns:
        Instructions in source order.
    """
    config = config or DEFAULT_CONFIG
    pattern = config.directive_pattern()

    instructions: List[Instruction] = []
    cursor = 0

    for match in pattern.finditer(source):
        if match.start() > cursor:
            instructions.append(Literal(source[cursor : match.start()], cursor))

        echo, body = match.group(1), match.group(2)
        if echo:
            instructions.append(Expression(body, match.start()))
        else:
            instructions.append(Statement(body, match.start()))

        cursor = match.end()

    if cursor < len(source):
        instructions.append(Literal(source[cursor:], cursor))

    return instructions
