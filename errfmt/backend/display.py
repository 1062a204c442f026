"""Per-variant display arms.

A ``DisplayArm`` pairs a variant with its rewritten template and field
catalogue. It knows how each catalogue key binds back to a field of the
variant, which is all the code generator needs to emit the arm, and it can
also render the message directly from a tuple or mapping of field values.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence, Tuple

from errfmt.internals import errors as er
from errfmt.runtime.formatter import format_display
from errfmt.semantics.ast import EnumDef, EnumVariant, FieldShape
from errfmt.semantics.interpolation import Catalogue, parse_template, positional_index


def field_attr(index: int) -> str:
    """Attribute name that stores unnamed field ``index`` on generated classes."""
    return f"_{index}"


@dataclass
class DisplayArm:
    variant: EnumVariant

    # The rewritten template:
    # - named placeholders are untouched, e.g. `{name}`
    # - positional placeholders become `{__0}`, `{__1}`, ...; explicit indices are
    #   kept, implicit ones are numbered left to right
    text: str

    # Keys used in the template, each with the trait text that followed ':' (or None)
    catalogue: Catalogue

    @classmethod
    def parse(cls, template: str, variant: EnumVariant) -> DisplayArm:
        result = parse_template(template)
        return cls(variant=variant, text=result.text, catalogue=result.catalogue)

    def bindings(self) -> List[Tuple[str, str]]:
        """(catalogue key, field attribute) for every key, in template order."""
        out: List[Tuple[str, str]] = []
        for key in self.catalogue:
            out.append((key, self._attr_for(key)))
        return out

    def _attr_for(self, key: str) -> str:
        shape = self.variant.shape
        if shape == FieldShape.UNNAMED:
            index = positional_index(key)
            if index is not None and index < len(self.variant.fields):
                return field_attr(index)
        elif shape == FieldShape.NAMED:
            if positional_index(key) is None and key in self.variant.field_names:
                return key
        elif shape != FieldShape.UNIT:
            er.raise_internal_error("CE0002", shape=shape)
        er.raise_internal_error("CE0001", key=key, variant=self.variant.name)

    def render(self, values: Sequence[Any] | Mapping[str, Any] = ()) -> str:
        """Render the message from field values.

        Unnamed variants take a sequence indexed by position, named variants a
        mapping by field name, unit variants nothing.
        """
        bound = {}
        for key, _ in self.bindings():
            if self.variant.shape == FieldShape.UNNAMED:
                bound[key] = values[positional_index(key)]
            else:
                bound[key] = values[key]
        return format_display(self.text, bound)


def build_arms(enum: EnumDef) -> List[DisplayArm]:
    """One arm per variant; the schema must have passed semantic analysis."""
    arms = []
    for variant in enum.variants:
        message = variant.message
        if message is None:
            er.raise_internal_error("CE0003", variant=variant.name)
        arms.append(DisplayArm.parse(message.value, variant))
    return arms
