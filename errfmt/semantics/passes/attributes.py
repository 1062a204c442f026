# semantics/passes/attributes.py
from __future__ import annotations
import keyword
from typing import Dict

from errfmt.internals.report import Reporter, Span
from errfmt.internals import errors as er
from errfmt.semantics.ast import EnumDef, FieldShape, Schema


def _loc(span: Span | None) -> str:
    return f"{span.line}:{span.col}" if span else "?"


def is_unusable_name(name: str) -> bool:
    """Keywords cannot be spelled in Python code; '__' names are mangled inside class bodies."""
    return keyword.iskeyword(name) or name.startswith("__")


class AttributePass:
    """
    Pass 1: declaration and attribute checks.

    Reports:
    - struct declarations (messages are derived for enums only)
    - duplicate enum names, duplicate variant names, duplicate named fields
    - variants without a usable #[error("...")] attribute
    - enum and variant names that cannot be used as Python names
    """

    def __init__(self, reporter: Reporter) -> None:
        self.reporter = reporter

    def run(self, schema: Schema) -> None:
        for struct in schema.structs:
            er.emit(self.reporter, er.ERR.CE1001, struct.name_span or struct.loc, name=struct.name)

        seen_enums: Dict[str, Span | None] = {}
        for enum in schema.enums:
            if enum.name in seen_enums:
                er.emit(self.reporter, er.ERR.CE1005, enum.name_span,
                        name=enum.name, prev_loc=_loc(seen_enums[enum.name]))
            else:
                seen_enums[enum.name] = enum.name_span
            if is_unusable_name(enum.name):
                er.emit(self.reporter, er.ERR.CE1007, enum.name_span, kind="enum", name=enum.name)
            self._check_enum(enum)

    def _check_enum(self, enum: EnumDef) -> None:
        seen_variants: Dict[str, Span | None] = {}

        for variant in enum.variants:
            if variant.name in seen_variants:
                er.emit(self.reporter, er.ERR.CE1004, variant.name_span,
                        variant=variant.name, enum=enum.name,
                        prev_loc=_loc(seen_variants[variant.name]))
            else:
                seen_variants[variant.name] = variant.name_span

            if is_unusable_name(variant.name):
                er.emit(self.reporter, er.ERR.CE1007, variant.name_span, kind="variant", name=variant.name)

            if variant.shape == FieldShape.NAMED:
                seen_fields = set()
                for f in variant.fields:
                    if f.name in seen_fields:
                        er.emit(self.reporter, er.ERR.CE1006, f.name_span, field=f.name, variant=variant.name)
                    seen_fields.add(f.name)

            attrs = variant.attributes_named("error")
            if not attrs:
                er.emit(self.reporter, er.ERR.CE1002, variant.name_span, variant=variant.name)
                continue

            for extra in attrs[1:]:
                er.emit(self.reporter, er.ERR.CW1001, extra.loc, variant=variant.name)

            if variant.message is None:
                er.emit(self.reporter, er.ERR.CE1003, attrs[0].loc)
