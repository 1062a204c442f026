"""PythonCodegen: emit a Python module from an analyzed schema.

Every enum becomes an exception class whose ``__str__`` dispatches over its
variants with a ``match`` statement. Variants become subclasses, reachable as
attributes of the enum class (``SomeError.Named``), that store their fields:

- unit variants take no arguments
- unnamed variants take positional arguments stored as ``_0``, ``_1``, ...
- named variants take their fields by name and store them under that name

Each arm binds the catalogue keys of its rewritten template to the fields and
hands both to ``errfmt.runtime.formatter.format_display``.
"""
from __future__ import annotations
from typing import Dict, List, Optional, Tuple

from errfmt.backend.display import DisplayArm, build_arms, field_attr
from errfmt.semantics.ast import EnumDef, EnumVariant, FieldShape, Schema


class PythonCodegen:
    def __init__(self, source_name: Optional[str] = None, header: bool = True) -> None:
        self.source_name = source_name
        self.header = header
        self.code_lines: List[str] = []
        self.indent_level = 0
        self.class_names: Dict[Tuple[str, str], str] = {}

    # ---- emission helpers ----

    def _indent(self) -> str:
        return "    " * self.indent_level

    def _emit(self, line: str = "") -> None:
        if line:
            self.code_lines.append(self._indent() + line)
        else:
            self.code_lines.append("")

    # ---- module ----

    def generate(self, schema: Schema) -> str:
        """Return the complete module source for `schema`."""
        self.code_lines = []
        self.indent_level = 0
        self._assign_class_names(schema)

        if self.header:
            from errfmt import __version__
            origin = f" from {self.source_name}" if self.source_name else ""
            self._emit(f"# Generated by errfmt {__version__}{origin}. Do not edit.")
        self._emit("from __future__ import annotations")
        self._emit()
        self._emit("from typing import Any")
        self._emit()
        self._emit("from errfmt.runtime.formatter import format_display")
        self._emit()
        self._emit(f"__all__ = {[enum.name for enum in schema.enums]!r}")

        for enum in schema.enums:
            self._emit_enum(enum)

        return "\n".join(self.code_lines) + "\n"

    def _emit_enum(self, enum: EnumDef) -> None:
        arms = build_arms(enum)

        self._emit()
        self._emit()
        self._emit(f"class {enum.name}(Exception):")
        self.indent_level += 1
        variants = ", ".join(v.name for v in enum.variants) or "none"
        self._emit(f'"""Tagged union `{enum.name}`. Variants: {variants}."""')
        self._emit()
        self._emit("__match_args__: tuple[str, ...] = ()")
        self._emit()
        self._emit("def __str__(self) -> str:")
        self.indent_level += 1
        if arms:
            self._emit("match self:")
            self.indent_level += 1
            for arm in arms:
                self._emit_arm(enum, arm)
            self.indent_level -= 1
        self._emit("return super().__str__()")
        self.indent_level -= 1
        self._emit()
        self._emit("def __repr__(self) -> str:")
        self.indent_level += 1
        self._emit('fields = ", ".join(f"{name}={getattr(self, name)!r}" for name in self.__match_args__)')
        self._emit('return f"{type(self).__qualname__}({fields})"')
        self.indent_level -= 2

        for variant in enum.variants:
            self._emit_variant(enum, variant)

        if enum.variants:
            self._emit()
            self._emit()
            for variant in enum.variants:
                self._emit(f"{enum.name}.{variant.name} = {self.class_names[enum.name, variant.name]}")

    def _emit_arm(self, enum: EnumDef, arm: DisplayArm) -> None:
        bindings = ", ".join(f"{key!r}: self.{attr}" for key, attr in arm.bindings())
        self._emit(f"case {enum.name}.{arm.variant.name}():")
        self.indent_level += 1
        self._emit(f"return format_display({arm.text!r}, {{{bindings}}})")
        self.indent_level -= 1

    def _emit_variant(self, enum: EnumDef, variant: EnumVariant) -> None:
        attrs = self._field_attrs(variant)

        self._emit()
        self._emit()
        self._emit(f"class {self.class_names[enum.name, variant.name]}({enum.name}):")
        self.indent_level += 1
        self._emit(f"__qualname__ = {enum.name + '.' + variant.name!r}")
        self._emit(f"__match_args__ = {tuple(attrs)!r}")
        self._emit()

        params = "".join(f", {a}: Any" for a in attrs)
        self._emit(f"def __init__(self{params}) -> None:")
        self.indent_level += 1
        self._emit(f"super().__init__({', '.join(attrs)})")
        for attr, f in zip(attrs, variant.fields):
            self._emit(f"self.{attr} = {attr}  # {' '.join(f.type_text.split())}")
        self.indent_level -= 2

    @staticmethod
    def _field_attrs(variant: EnumVariant) -> List[str]:
        if variant.shape == FieldShape.UNNAMED:
            return [field_attr(i) for i in range(len(variant.fields))]
        return list(variant.field_names)

    def _assign_class_names(self, schema: Schema) -> None:
        """Module-level names for variant classes, unique across enums.

        Enum `A_B` with variant `C` and enum `A` with variant `B_C` spell the
        same name, so later collisions (with each other or with an enum) get
        a numeric suffix.
        """
        self.class_names = {}
        taken = {enum.name for enum in schema.enums}
        for enum in schema.enums:
            for variant in enum.variants:
                base = name = f"_{enum.name}_{variant.name}"
                n = 1
                while name in taken:
                    n += 1
                    name = f"{base}_{n}"
                taken.add(name)
                self.class_names[enum.name, variant.name] = name
