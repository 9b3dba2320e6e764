"""Renderer - the compiled procedure that walks assembled nodes against a scope."""

from collections import ChainMap
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from etpl.ir import (
    EchoNode,
    Expression,
    ForNode,
    IfNode,
    Instruction,
    LetNode,
    Literal,
    Node,
)
from etpl.resolver import resolve


def stringify(value: Any) -> str:
    """String form of a value appended to output; ``None`` renders as ``""``."""
    if value is None:
        return ""
    return str(value)


class Scope:
    """One render frame: a ChainMap of bindings over the data context.

    ``namespace()`` is the string-keyed view handed to statement expressions.
    It is flattened at most once per frame and kept in step with ``bind``.
    """

    def __init__(self, chain: ChainMap, parent: Optional["Scope"] = None):
        self.chain = chain
        self.parent = parent
        self._namespace: Optional[Dict[str, Any]] = None

    def child(self) -> "Scope":
        return Scope(self.chain.new_child(), self)

    def bind(self, name: str, value: Any) -> None:
        self.chain[name] = value
        if self._namespace is not None:
            self._namespace[name] = value

    def namespace(self) -> Dict[str, Any]:
        if self._namespace is None:
            if self.parent is not None:
                names = dict(self.parent.namespace())
            else:
                # Jinja contexts take keyword names only; other keys stay reachable
                # through path resolution
                data = self.chain.maps[-1]
                names = {k: v for k, v in data.items() if isinstance(k, str)}
            names.update(self.chain.maps[0])
            self._namespace = names
        return self._namespace


class Procedure:
    """A reusable renderer mapping a data context to output text.

    Immutable after construction: every call gets its own scope and output
    accumulator, so one procedure can be shared between threads.
    """

    def __init__(self, nodes: List[Node], instructions: Sequence[Instruction]):
        self.nodes = nodes
        self.instructions = tuple(instructions)

    def __call__(self, data: Optional[Mapping] = None) -> str:
        """Render with ``data``; an absent context behaves as ``{}``.

        Raises:
            TypeError: If ``data`` is not a mapping.
        """
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise TypeError(
                f"Template data must be a mapping, got {type(data).__name__}"
            )

        # Local bindings live in the first map so the caller's data is never written
        scope = Scope(ChainMap({}, data))
        out: List[str] = []
        self._execute(self.nodes, scope, out)
        return "".join(out)

    def _execute(self, nodes: List[Node], scope: Scope, out: List[str]) -> None:
        for node in nodes:
            if isinstance(node, Literal):
                out.append(node.text)
            elif isinstance(node, Expression):
                out.append(stringify(resolve(scope.chain, node.path)))
            elif isinstance(node, EchoNode):
                out.append(stringify(self._evaluate(node.value, scope)))
            elif isinstance(node, LetNode):
                scope.bind(node.name, self._evaluate(node.value, scope))
            elif isinstance(node, IfNode):
                self._execute_if(node, scope, out)
            elif isinstance(node, ForNode):
                self._execute_for(node, scope, out)
            else:
                raise TypeError(f"Unknown node: {node!r}")

    def _execute_if(self, node: IfNode, scope: Scope, out: List[str]) -> None:
        for condition, body in node.branches:
            if self._evaluate(condition, scope):
                self._execute(body, scope, out)
                return
        if node.orelse is not None:
            self._execute(node.orelse, scope, out)

    def _execute_for(self, node: ForNode, scope: Scope, out: List[str]) -> None:
        iterable = self._evaluate(node.iterable, scope)
        if iterable is None:
            return

        for item in iterable:
            # Loop bindings shadow outer names for this iteration only
            frame = scope.child()
            _bind(frame, node.targets, item)
            self._execute(node.body, frame, out)

    @staticmethod
    def _evaluate(expression: Any, scope: Scope) -> Any:
        return expression(scope.namespace())


def _bind(frame: Scope, targets: Sequence[str], item: Any) -> None:
    if len(targets) == 1:
        frame.bind(targets[0], item)
        return

    values = tuple(item)
    if len(values) != len(targets):
        raise ValueError(
            f"Cannot unpack {len(values)} values into {len(targets)} loop names"
        )
    for name, value in zip(targets, values):
        frame.bind(name, value)
