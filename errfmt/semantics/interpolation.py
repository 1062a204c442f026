"""Placeholder scanning and rewriting for display templates.

A template mixes literal text with ``{...}`` placeholders:

- ``{{`` and ``}}`` are escaped braces and are copied through untouched
- ``{name}`` / ``{name:trait}`` reference a field by name
- ``{}`` / ``{N}`` (optionally with ``:trait``) reference a field by position

Scanning yields the canonical rewritten template, where every positional
placeholder is renamed to a synthetic ``__N`` key, and the catalogue of keys
the template references, each mapped to the trait text after ``:``.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from errfmt.semantics.exceptions import StrayClosingBraceError, UnterminatedPlaceholderError

POSITIONAL_PREFIX = "__"

Catalogue = Dict[str, Optional[str]]


@dataclass(frozen=True)
class Placeholder:
    """One field reference found in a template."""
    key: str                 # Normalized key (e.g. "name", "__0")
    trait: Optional[str]     # Text after ':' or None when absent
    start: int               # Offset of the opening '{' in the raw template
    end: int                 # Offset just past the closing '}'
    implicit: bool = False   # Index came from the implicit counter ('{}' form)

    def render(self) -> str:
        if self.trait is None:
            return f"{{{self.key}}}"
        return f"{{{self.key}:{self.trait}}}"


@dataclass
class Interpolation:
    """Result of scanning one template."""
    text: str
    catalogue: Catalogue = field(default_factory=dict)
    placeholders: List[Placeholder] = field(default_factory=list)
    unterminated_at: Optional[int] = None  # Offset of a dropped '{' (lenient mode only)

    @property
    def keys(self) -> List[str]:
        return list(self.catalogue)


def positional_key(index: int | str) -> str:
    return f"{POSITIONAL_PREFIX}{index}"


def positional_index(key: str) -> Optional[int]:
    """Return N for a synthetic ``__N`` key, None for named keys."""
    if key.startswith(POSITIONAL_PREFIX) and _is_index(key[len(POSITIONAL_PREFIX):]):
        return int(key[len(POSITIONAL_PREFIX):])
    return None


def _is_index(name: str) -> bool:
    return name.isascii() and name.isdigit()


def parse_template(raw: str, strict: bool = False) -> Interpolation:
    """Scan ``raw`` left to right and rewrite its placeholders.

    The implicit counter only advances for placeholders without a name, so
    ``"{1} {} {0}"`` becomes ``"{__1} {__0} {__0}"``. A repeated key keeps the
    trait of its last occurrence in the catalogue.

    In lenient mode (the default) an unterminated placeholder swallows the rest
    of the string and is dropped, and a lone ``}`` is copied verbatim. With
    ``strict=True`` both raise a ``TemplateError`` carrying the offset.
    """
    out: List[str] = []
    catalogue: Catalogue = {}
    placeholders: List[Placeholder] = []
    unterminated_at: Optional[int] = None
    implicit_index = -1

    i = 0
    n = len(raw)
    while i < n:
        char = raw[i]

        if char == '}':
            if i + 1 < n and raw[i + 1] == '}':
                out.append('}}')
                i += 2
                continue
            if strict:
                raise StrayClosingBraceError(raw, i)
            out.append(char)
            i += 1
            continue

        if char != '{':
            out.append(char)
            i += 1
            continue

        # '{{' is an escaped brace, not a placeholder
        if i + 1 < n and raw[i + 1] == '{':
            out.append('{{')
            i += 2
            continue

        start = i
        i += 1
        name: List[str] = []
        trait: Optional[List[str]] = None
        closed = False

        while i < n:
            char = raw[i]
            i += 1
            if char == '}':
                closed = True
                break
            if char == ':' and trait is None:
                trait = []
                continue
            (name if trait is None else trait).append(char)

        if not closed:
            if strict:
                raise UnterminatedPlaceholderError(raw, start)
            unterminated_at = start
            break

        key = ''.join(name)
        implicit = not key
        if implicit:
            implicit_index += 1
            key = positional_key(implicit_index)
        elif _is_index(key):
            key = positional_key(key)

        placeholder = Placeholder(
            key=key,
            trait=''.join(trait) if trait else None,
            start=start,
            end=i,
            implicit=implicit,
        )
        out.append(placeholder.render())
        catalogue[key] = placeholder.trait
        placeholders.append(placeholder)

    return Interpolation(
        text=''.join(out),
        catalogue=catalogue,
        placeholders=placeholders,
        unterminated_at=unterminated_at,
    )


def parse(template: str) -> Tuple[str, Catalogue]:
    """Return ``(rewritten_template, catalogue)`` for ``template``; never raises."""
    result = parse_template(template)
    return result.text, result.catalogue
