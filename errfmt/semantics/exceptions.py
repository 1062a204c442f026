"""Custom exceptions for schema and template errors."""
from __future__ import annotations
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from errfmt.internals.report import Span


class TemplateError(Exception):
    """Base class for malformed message templates.

    ``offset`` is the index into ``template`` of the character that broke the
    scan, so callers can anchor a diagnostic inside the string literal.
    """
    def __init__(self, message: str, template: str, offset: int):
        super().__init__(f"{message} at offset {offset} in {template!r}")
        self.template = template
        self.offset = offset


class UnterminatedPlaceholderError(TemplateError):
    """Raised when a '{' opens a placeholder that is never closed."""
    def __init__(self, template: str, offset: int):
        super().__init__("unterminated placeholder", template, offset)


class StrayClosingBraceError(TemplateError):
    """Raised when a single '}' appears outside of any placeholder."""
    def __init__(self, template: str, offset: int):
        super().__init__("unmatched '}'", template, offset)


class SchemaSyntaxError(Exception):
    """Exception raised when the schema source cannot be built into an AST."""
    def __init__(self, message: str, span: Optional['Span'] = None):
        super().__init__(message)
        self.span = span
