"""
AST Builder module for the errfmt schema language.

Exports:
    ASTBuilder: Main class for building typed AST from Lark parse trees
    Exceptions: Custom exceptions for AST building and template errors
"""
from errfmt.semantics.ast_builder.builder import ASTBuilder

from errfmt.semantics.exceptions import (
    SchemaSyntaxError,
    TemplateError,
    UnterminatedPlaceholderError,
    StrayClosingBraceError,
)

__all__ = [
    'ASTBuilder',
    'SchemaSyntaxError',
    'TemplateError',
    'UnterminatedPlaceholderError',
    'StrayClosingBraceError',
]
