"""Resolver - looks up dotted/indexed paths inside a data context.

Supported paths:
- Object fields: ``a.b.c``
- Indexes: ``a[0][1]``
- Mixed: ``a.b[0].c``

Resolution never raises. Anything missing, malformed or out of range
resolves to the empty string.
"""

import re
from collections.abc import Mapping, Sequence
from typing import Any, List, Optional

_PATH_SPLIT = re.compile(r"\.|\[(\d+)\]", re.ASCII)

# Values that cannot be indexed into; reaching one mid-path short-circuits.
_SCALARS = (str, bytes, bytearray, int, float, complex, bool)

_MISSING = object()


def split_path(path: str) -> List[str]:
    """Split a path into field/index tokens, dropping empty fragments."""
    # re.split yields None for the unmatched group and "" at boundaries
    return [token for token in _PATH_SPLIT.split(path) if token]


def _index(token: str) -> Optional[int]:
    """Integer value of an ASCII digit token, or None."""
    if not (token.isascii() and token.isdigit()):
        return None
    try:
        return int(token)
    except ValueError:
        # longer than sys.get_int_max_str_digits()
        return None


def _step(value: Any, token: str) -> Any:
    try:
        if isinstance(value, Mapping):
            if token in value:
                return value[token]
            index = _index(token)
            if index is None:
                return _MISSING
            return value.get(index, _MISSING)

        if isinstance(value, Sequence):
            index = _index(token)
            if index is None or index >= len(value):
                return _MISSING
            return value[index]

        return getattr(value, token, _MISSING)
    except Exception:
        # Lookups run arbitrary __getitem__/property code; any failure is a miss
        return _MISSING


def resolve(context: Any, path: str) -> Any:
    """Resolve ``path`` against ``context``.

    Args:
        context: Mapping (or any object) to start from.
        path: Path expression like ``a.b[0].c``.

    Returns:
        The resolved value unchanged, or ``""`` when the path is empty or
        cannot be followed, or the value found is ``None``.

    Example:
        >>> resolve({"a": {"b": [{"c": 42}]}}, "a.b[0].c")
        42
    """
    if not path:
        return ""

    value = context
    for token in split_path(path):
        if value is None or value is _MISSING or isinstance(value, _SCALARS):
            return ""
        value = _step(value, token)

    if value is None or value is _MISSING:
        return ""
    return value
