"""Template entity - wraps source text and caches its compiled renderer."""

import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import Optional, Union

from etpl.compiler import Compiler
from etpl.config import EngineConfig
from etpl.renderer import Procedure

log = logging.getLogger(__name__)


class Template:
    """A template compiled lazily on first render.

    Example:
        >>> Template("Hello, <%= name %>!").render({"name": "World"})
        'Hello, World!'
    """

    def __init__(self, source: Optional[str] = None, config: Optional[EngineConfig] = None):
        self._source = source or ""
        self.config = config
        self.renderer: Optional[Procedure] = None
        self._lock = threading.Lock()

    @property
    def source(self) -> str:
        return self._source

    @classmethod
    def from_file(
        cls,
        path: Union[str, Path],
        config: Optional[EngineConfig] = None,
        encoding: str = "utf-8",
    ) -> "Template":
        """Load template text from a file."""
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"Template not found: {p}")
        return cls(p.read_text(encoding=encoding), config=config)

    def compile(self) -> Procedure:
        """Compile the source into a new Procedure. Never cached here."""
        return Compiler(self.config).compile(self._source)

    def render(self, data: Optional[Mapping] = None) -> str:
        """Render with ``data``, compiling once on first use.

        Args:
            data: Data context; ``None`` behaves as an empty mapping.

        Returns:
            Rendered text.
        """
        renderer = self.renderer
        if renderer is None:
            with self._lock:
                if self.renderer is None:
                    log.debug("Compiling template (%d chars)", len(self._source))
                    self.renderer = self.compile()
                renderer = self.renderer
        return renderer(data)

    def __repr__(self) -> str:
        state = "compiled" if self.renderer is not None else "uncompiled"
        return f"<Template {len(self._source)} chars, {state}>"
