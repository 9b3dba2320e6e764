"""Exception hierarchy for etpl."""

from typing import Optional


class TemplateError(Exception):
    """Base exception for template operations."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        self.message = message
        self.exit_code = exit_code
        super().__init__(message)


class TemplateSyntaxError(TemplateError):
    """Raised when a template cannot be assembled into a procedure.

    Carries the source offset of the offending directive when known, and
    derives a 1-based line number from it.
    """

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        source: Optional[str] = None,
    ) -> None:
        self.offset = offset
        self.lineno: Optional[int] = None
        if offset is not None and source is not None:
            self.lineno = source.count("\n", 0, offset) + 1
            message = f"{message} (line {self.lineno})"
        super().__init__(message, exit_code=2)
