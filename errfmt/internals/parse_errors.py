"""Shared parse exception handling for the pipeline and CLI."""
from __future__ import annotations

from lark import UnexpectedInput

from errfmt.internals.report import Reporter, Span
from errfmt.semantics.ast_builder import SchemaSyntaxError


def handle_parse_exception(exc: Exception, reporter: Reporter) -> bool:
    """Handle a parse exception by emitting diagnostics through the reporter.

    Args:
        exc: The exception to handle.
        reporter: Reporter for error/warning collection.

    Returns:
        True if the exception was handled, False otherwise.
    """
    from errfmt.internals import errors as er
    from errfmt.internals.parser import describe_parse_error

    if isinstance(exc, SchemaSyntaxError):
        er.emit(reporter, er.ERR.CE1000, exc.span, detail=str(exc))
        return True

    if isinstance(exc, UnexpectedInput):
        line = getattr(exc, "line", -1)
        col = getattr(exc, "column", -1)
        span = Span(line, col, line, col + 1) if line and line > 0 and col and col > 0 else None
        er.emit(reporter, er.ERR.CE1000, span, detail=describe_parse_error(exc))
        return True

    return False
