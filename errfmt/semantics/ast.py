# semantics/ast.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from errfmt.internals.report import Span


@dataclass
class Node:
    loc: Optional[Span]


class FieldShape(str, Enum):
    UNIT = "unit"          # Variant
    UNNAMED = "unnamed"    # Variant(A, B)
    NAMED = "named"        # Variant { a: A, b: B }


# === Attributes ===

@dataclass
class AttrArg(Node):
    kind: str                        # "str", "num" or "path"
    value: str                       # Decoded text for strings, source text otherwise
    raw: str = ""                    # Literal exactly as written (strings only)

@dataclass
class Attribute(Node):
    name: str                        # e.g. "error", "derive"
    args: List[AttrArg] = field(default_factory=list)
    has_parens: bool = False         # False for bare #[name]


# === Declarations ===

@dataclass
class Field(Node):
    name: Optional[str]              # None for unnamed (tuple-like) fields
    type_text: str                   # Type as written in the schema, e.g. "Vec<u8>"
    name_span: Optional[Span] = None

@dataclass
class EnumVariant(Node):
    """Single variant in an enum definition."""
    name: str
    shape: FieldShape
    fields: List[Field] = field(default_factory=list)
    attributes: List[Attribute] = field(default_factory=list)
    name_span: Optional[Span] = None

    def attributes_named(self, name: str) -> List[Attribute]:
        return [a for a in self.attributes if a.name == name]

    @property
    def message(self) -> Optional[AttrArg]:
        """The string literal of the first #[error("...")] attribute, if well-formed."""
        attrs = self.attributes_named("error")
        if not attrs:
            return None
        args = attrs[0].args
        if len(args) == 1 and args[0].kind == "str":
            return args[0]
        return None

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields if f.name is not None]

@dataclass
class EnumDef(Node):
    """Enum definition with variants."""
    name: str
    variants: List[EnumVariant]
    attributes: List[Attribute] = field(default_factory=list)
    name_span: Optional[Span] = None

@dataclass
class StructDef(Node):
    """Struct declaration; kept only so it can be reported."""
    name: str
    attributes: List[Attribute] = field(default_factory=list)
    name_span: Optional[Span] = None

@dataclass
class Schema(Node):
    enums: List[EnumDef]
    structs: List[StructDef]
