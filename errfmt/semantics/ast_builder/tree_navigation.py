"""Tree navigation utilities for traversing Lark parse trees."""
from __future__ import annotations
from typing import Callable, List, Optional
from lark import Tree, Token


def first(children: List[object], pred: Callable) -> Optional[object]:
    """Find first child matching predicate."""
    for ch in children:
        if pred(ch):
            return ch
    return None


def first_name(children: List[object]) -> Optional[Token]:
    """Get first NAME token from children."""
    return first(children, lambda c: isinstance(c, Token) and c.type == "NAME")  # type: ignore[return-value]


def first_tree(children: List[object], data: str) -> Optional[Tree]:
    """Get first Tree child with specific data tag."""
    return first(children, lambda c: isinstance(c, Tree) and c.data == data)  # type: ignore[return-value]


def trees(children: List[object], data: Optional[str] = None) -> List[Tree]:
    """All Tree children, optionally restricted to one data tag."""
    return [c for c in children if isinstance(c, Tree) and (data is None or c.data == data)]


def source_text(source: str, t: Tree) -> str:
    """Exact source text covered by a tree with propagated positions."""
    return source[t.meta.start_pos:t.meta.end_pos]
