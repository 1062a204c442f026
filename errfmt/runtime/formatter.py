"""Rendering of rewritten templates with Rust-style format traits.

Rewritten templates keep the trait text of each placeholder verbatim (``?``,
``#x``, ``>8.2e`` ...). ``TraitFormatter`` is a ``string.Formatter`` that maps
those traits onto Python's own formatting:

    ?  / #?        repr() / pprint.pformat()
    x? / X?        hex digits for integers, repr() otherwise
    x X o b        integer bases, '#' adds the 0x / 0o / 0b prefix
    e E            shortest scientific notation (1234.5 -> 1.2345e3)
    p              address of the object (id) in hex

Fill, alignment, sign, zero padding, width and precision follow Python's
format mini-language. Width or precision taken from arguments (``N$``, ``*``)
is not supported and raises ValueError.
"""
from __future__ import annotations

import pprint
import re
import string
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

_TRAIT = re.compile(r"""
    (?:(?P<fill>.)?(?P<align>[<^>]))?
    (?P<sign>[+-])?
    (?P<alternate>\#)?
    (?P<zero>0)?
    (?P<width>[0-9]+)?
    (?:\.(?P<precision>[0-9]+))?
    (?P<type>x\?|X\?|[?xXobeEp])?
""", re.VERBOSE | re.DOTALL)

_NUMBERS = (int, float, Decimal)


def parse_trait(trait: str) -> Dict[str, Optional[str]]:
    m = _TRAIT.fullmatch(trait)
    if m is None:
        raise ValueError(f"unsupported format trait {trait!r}")
    return m.groupdict()


def format_trait(value: Any, trait: str) -> str:
    """Format a single value according to a placeholder's trait text."""
    if not trait:
        return format(value, "")

    spec = parse_trait(trait)
    kind = spec["type"] or ""
    is_int = isinstance(value, int) and not isinstance(value, bool)

    if kind in ("?", "x?", "X?"):
        if kind != "?" and is_int:
            body = format(value, ("#" if spec["alternate"] else "") + kind[0])
        elif spec["precision"] is not None and isinstance(value, (float, Decimal)):
            body = format(value, f".{spec['precision']}f")
        elif spec["alternate"]:
            body = pprint.pformat(value)
        else:
            body = repr(value)
        return _pad(body, spec, numeric=is_int or isinstance(value, (float, Decimal)))

    if kind == "p":
        return _pad(f"{id(value):#x}", spec, numeric=False)

    if kind in ("e", "E"):
        return _pad(_exponent(value, spec, upper=kind == "E"), spec, numeric=True)

    if kind in ("x", "X", "o", "b"):
        text = format(value, _python_spec(spec, kind, precision=False))
        if kind == "X" and spec["alternate"]:
            text = text.replace("0X", "0x", 1)
        return text

    if isinstance(value, bool) or not isinstance(value, _NUMBERS):
        return format(str(value), _python_spec(spec, "", numeric=False))
    if is_int:
        return format(value, _python_spec(spec, "", precision=False))
    return format(value, _python_spec(spec, "f" if spec["precision"] is not None else ""))


def _python_spec(spec: Dict[str, Optional[str]], kind: str,
                 numeric: bool = True, precision: bool = True) -> str:
    parts = []
    if spec["align"]:
        parts.append((spec["fill"] or "") + spec["align"])
    if numeric:
        parts.append(spec["sign"] or "")
        parts.append("#" if spec["alternate"] else "")
        parts.append("0" if spec["zero"] else "")
    parts.append(spec["width"] or "")
    if precision and spec["precision"] is not None:
        parts.append("." + spec["precision"])
    parts.append(kind)
    return "".join(parts)


def _pad(body: str, spec: Dict[str, Optional[str]], numeric: bool) -> str:
    """Apply sign, fill/alignment and width to already rendered text."""
    if numeric and spec["sign"] == "+" and not body.startswith("-"):
        body = "+" + body
    width = int(spec["width"] or 0)
    if len(body) >= width:
        return body
    if spec["zero"] and not spec["align"] and numeric:
        sign = body[0] if body[:1] in "+-" else ""
        return sign + body[len(sign):].rjust(width - len(sign), "0")
    align = spec["align"] or (">" if numeric else "<")
    return format(body, f"{spec['fill'] or ' '}{align}{width}")


def _exponent(value: Any, spec: Dict[str, Optional[str]], upper: bool) -> str:
    if spec["precision"] is not None:
        text = format(value, f".{spec['precision']}e")
    else:
        exact = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
        text = format(exact.normalize(), "e")
    mantissa, _, exponent = text.partition("e")
    if exponent:
        text = f"{mantissa}e{int(exponent)}"
    return text.upper() if upper else text


class TraitFormatter(string.Formatter):
    def format_field(self, value: Any, format_spec: str) -> str:
        return format_trait(value, format_spec)


_FORMATTER = TraitFormatter()


def format_display(template: str, bindings: Mapping[str, Any]) -> str:
    """Render a rewritten template with values bound to its catalogue keys."""
    return _FORMATTER.vformat(template, (), bindings)
