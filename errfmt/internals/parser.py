"""Lark parser setup and AST construction."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

from lark import Lark, UnexpectedCharacters, UnexpectedInput, UnexpectedToken

from errfmt.semantics.ast_builder import ASTBuilder

GRAMMAR_PATH = Path(__file__).parent.parent / "grammar.lark"

# Cached parser (lazy initialized)
_schema_parser: Optional[Lark] = None


def get_schema_parser() -> Lark:
    global _schema_parser
    if _schema_parser is None:
        _schema_parser = Lark.open(
            str(GRAMMAR_PATH),
            parser="lalr",
            propagate_positions=True,
            maybe_placeholders=False,
            lexer="basic",
        )
    return _schema_parser


def describe_parse_error(e: UnexpectedInput) -> str:
    """One-line description of a Lark error, without Lark's context dump."""
    if isinstance(e, UnexpectedToken):
        found = "end of input" if e.token.type == "$END" else repr(str(e.token))
        expected = sorted(_pretty_terminal(t) for t in (e.accepts or e.expected))
        detail = f"unexpected {found}"
        if expected:
            detail += f", expected one of: {', '.join(expected)}"
        return detail
    if isinstance(e, UnexpectedCharacters):
        return f"unexpected character {e.char!r}"
    return str(e).splitlines()[0]


_ANON = re.compile(r"^__ANON_\d+$")

_PUNCT = {
    "LBRACE": "'{'", "RBRACE": "'}'", "LPAR": "'('", "RPAR": "')'",
    "LSQB": "'['", "RSQB": "']'", "COMMA": "','", "COLON": "':'",
    "SEMICOLON": "';'", "LESSTHAN": "'<'", "MORETHAN": "'>'",
    "EQUAL": "'='", "AMPERSAND": "'&'", "HASH": "'#'",
}


def _pretty_terminal(name: str) -> str:
    if name in _PUNCT:
        return _PUNCT[name]
    if _ANON.match(name):
        return "'::'"
    if name in ("NAME", "STRING", "NUMBER", "LIFETIME"):
        return name
    # Keyword terminals ("ENUM", "PUB", ...)
    return f"'{name.lower()}'"


def parse_to_ast(src: str, dump_parse: bool = False):
    """Parse schema source into an AST.

    Returns:
        Tuple of (schema, parse_tree).
    """
    tree = get_schema_parser().parse(src)
    if dump_parse:
        print(tree.pretty())

    return ASTBuilder(src).build(tree), tree
