"""Compiler - turns template source into a Procedure.

Two passes:
1. ``scan`` splits the source into Literal / Expression / Statement instructions.
2. Statements are parsed against a small closed grammar and assembled, with
   the literals and echoes between them, into a node tree the Procedure walks.

Statement grammar:
    if <expr>                  open a conditional block
    elif <expr>                extra branch of the innermost if
    else                       fallback branch of the innermost if
    for <name>[, ...] in <expr> repeat the body for each item
    end / endif / endfor       close the innermost block
    let <name> = <expr>        bind a name (``set`` is accepted too)
    echo <expr>                append the value of an expression
    # ...                      comment

``<expr>`` is a Jinja2 expression evaluated against the render scope.
A trailing ``:`` after if/elif/else/for is tolerated.
"""

import logging
import re
from typing import Any, List, Optional, Tuple

from jinja2 import Environment
from jinja2 import TemplateSyntaxError as JinjaSyntaxError

from etpl.config import DEFAULT_CONFIG, EngineConfig
from etpl.errors import TemplateSyntaxError
from etpl.extensions import get_expression_env
from etpl.ir import (
    EchoNode,
    Expression,
    ForNode,
    IfNode,
    Instruction,
    LetNode,
    Literal,
    Node,
    Statement,
)
from etpl.renderer import Procedure
from etpl.scanner import scan

log = logging.getLogger(__name__)

_NAME = r"[A-Za-z_][A-Za-z0-9_]*"

IF_STMT = re.compile(r"^if\s+(.+?):?$", re.DOTALL)
ELIF_STMT = re.compile(r"^elif\s+(.+?):?$", re.DOTALL)
ELSE_STMT = re.compile(r"^else:?$")
END_STMT = re.compile(r"^end(if|for)?$")
FOR_STMT = re.compile(r"^for\s+(.+?)\s+in\s+(.+?):?$", re.DOTALL)
LET_STMT = re.compile(rf"^(?:let|set)\s+({_NAME})\s*=\s*(.+)$", re.DOTALL)
ECHO_STMT = re.compile(r"^echo\s+(.+)$", re.DOTALL)
TARGET = re.compile(rf"^{_NAME}$")


class _Block:
    """An open if/for block while assembling."""

    def __init__(self, kind: str, node: Any, body: List[Node], offset: int):
        self.kind = kind
        self.node = node
        self.body = body
        self.offset = offset


class Compiler:
    """Compiles template source into a Procedure."""

    def __init__(self, config: Optional[EngineConfig] = None):
        """Initialize compiler.

        Args:
            config: Engine configuration. Defaults to ``<% %>`` delimiters and
                strict undefined names.
        """
        self.config = config or DEFAULT_CONFIG
        self.env: Environment = get_expression_env(self.config)

    def compile(self, source: str) -> Procedure:
        """Compile template source into a Procedure.

        Args:
            source: Raw template text.

        Returns:
            A callable mapping a data context to the rendered string.

        Raises:
            TemplateSyntaxError: On unknown statements, unbalanced blocks or
                malformed expressions.
        """
        instructions = scan(source, self.config)
        nodes = self._assemble(source, instructions)

        log.debug(
            "Compiled template: %d instructions, %d top-level nodes",
            len(instructions),
            len(nodes),
        )
        return Procedure(nodes, instructions)

    def _assemble(self, source: str, instructions: List[Instruction]) -> List[Node]:
        root: List[Node] = []
        stack: List[_Block] = []
        current = root

        for ins in instructions:
            if isinstance(ins, (Literal, Expression)):
                current.append(ins)
                continue

            code = ins.code
            if not code or code.startswith("#"):
                continue

            m = IF_STMT.match(code)
            if m:
                node = IfNode(branches=[(self._expr(m.group(1), ins, source), [])])
                current.append(node)
                stack.append(_Block("if", node, current, ins.offset))
                current = node.branches[-1][1]
                continue

            m = ELIF_STMT.match(code)
            if m:
                block = self._innermost(stack, "if", "elif", ins, source)
                if block.node.orelse is not None:
                    raise TemplateSyntaxError("'elif' after 'else'", ins.offset, source)
                block.node.branches.append((self._expr(m.group(1), ins, source), []))
                current = block.node.branches[-1][1]
                continue

            if ELSE_STMT.match(code):
                block = self._innermost(stack, "if", "else", ins, source)
                if block.node.orelse is not None:
                    raise TemplateSyntaxError("Duplicate 'else'", ins.offset, source)
                block.node.orelse = []
                current = block.node.orelse
                continue

            m = FOR_STMT.match(code)
            if m:
                node = ForNode(
                    targets=self._targets(m.group(1), ins, source),
                    iterable=self._expr(m.group(2), ins, source),
                )
                current.append(node)
                stack.append(_Block("for", node, current, ins.offset))
                current = node.body
                continue

            m = END_STMT.match(code)
            if m:
                if not stack:
                    raise TemplateSyntaxError(
                        f"'{code}' without an open block", ins.offset, source
                    )
                if m.group(1) and stack[-1].kind != m.group(1):
                    raise TemplateSyntaxError(
                        f"'{code}' closes a '{stack[-1].kind}' block",
                        ins.offset,
                        source,
                    )
                current = stack.pop().body
                continue

            m = LET_STMT.match(code)
            if m:
                current.append(
                    LetNode(m.group(1), self._expr(m.group(2), ins, source))
                )
                continue

            m = ECHO_STMT.match(code)
            if m:
                current.append(EchoNode(self._expr(m.group(1), ins, source)))
                continue

            raise TemplateSyntaxError(f"Unknown statement: {code!r}", ins.offset, source)

        if stack:
            block = stack[-1]
            raise TemplateSyntaxError(
                f"Unclosed '{block.kind}' block", block.offset, source
            )

        return root

    def _expr(self, text: str, ins: Statement, source: str) -> Any:
        """Compile a Jinja2 expression, keeping undefined values intact."""
        try:
            return self.env.compile_expression(text.strip(), undefined_to_none=False)
        except JinjaSyntaxError as e:
            raise TemplateSyntaxError(
                f"Invalid expression {text.strip()!r}: {e.message}", ins.offset, source
            ) from e

    @staticmethod
    def _targets(text: str, ins: Statement, source: str) -> Tuple[str, ...]:
        names = tuple(name.strip() for name in text.split(","))
        for name in names:
            if not TARGET.match(name):
                raise TemplateSyntaxError(
                    f"Invalid loop variable {name!r}", ins.offset, source
                )
        return names

    @staticmethod
    def _innermost(
        stack: List[_Block], kind: str, keyword: str, ins: Statement, source: str
    ) -> _Block:
        if not stack or stack[-1].kind != kind:
            raise TemplateSyntaxError(
                f"'{keyword}' outside of an '{kind}' block", ins.offset, source
            )
        return stack[-1]


def compile_template(source: str, config: Optional[EngineConfig] = None) -> Procedure:
    """Compile ``source`` with a fresh Compiler."""
    return Compiler(config).compile(source or "")
