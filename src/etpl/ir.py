"""Template IR - instructions produced by the scanner and nodes assembled from them."""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, Union


@dataclass
class Literal:
    """Raw text appended verbatim to the output."""

    text: str
    offset: int = 0


@dataclass
class Expression:
    """A path resolved against the scope and appended to the output."""

    path: str
    offset: int = 0


@dataclass
class Statement:
    """Trimmed body of a non-echo directive (e.g. ``for item in items``)."""

    code: str
    offset: int = 0


Instruction = Union[Literal, Expression, Statement]


@dataclass
class EchoNode:
    """Appends the value of a compiled expression."""

    value: Any  # jinja2 TemplateExpression


@dataclass
class LetNode:
    """Binds ``name`` in the current scope frame."""

    name: str
    value: Any


@dataclass
class ForNode:
    """Repeats ``body`` for each item of ``iterable``."""

    targets: Tuple[str, ...]
    iterable: Any
    body: List["Node"] = field(default_factory=list)


@dataclass
class IfNode:
    """Conditional block.

    ``branches`` holds (condition, body) pairs in source order; ``orelse`` is
    the ``else`` body, if any.
    """

    branches: List[Tuple[Any, List["Node"]]] = field(default_factory=list)
    orelse: Optional[List["Node"]] = None


Node = Union[Literal, Expression, EchoNode, LetNode, ForNode, IfNode]
