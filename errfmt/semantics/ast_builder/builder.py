"""ASTBuilder: turns the Lark parse tree of a schema into typed AST nodes.

The grammar is deliberately close to Rust enum declarations, so the builder
mostly has to pick apart attributes and variant field lists. Types are not
interpreted; each field keeps the exact text it was declared with.
"""
from __future__ import annotations
from typing import List, Optional

from lark import Tree, Token

from errfmt.internals.report import span_of
from errfmt.semantics.ast import (
    AttrArg, Attribute, EnumDef, EnumVariant, Field, FieldShape, Schema, StructDef,
)
from errfmt.semantics.ast_builder.string_processing import parse_string_token
from errfmt.semantics.ast_builder.tree_navigation import (
    first_name, first_tree, source_text, trees,
)
from errfmt.semantics.exceptions import SchemaSyntaxError


class ASTBuilder:
    def __init__(self, source: str):
        self.source = source

    def build(self, tree: Tree) -> Schema:
        enums: List[EnumDef] = []
        structs: List[StructDef] = []

        for item in trees(tree.children, "item"):
            attributes = self._attributes(item)
            enum_node = first_tree(item.children, "enum_def")
            if enum_node is not None:
                enums.append(self._enum(enum_node, attributes, item))
                continue
            struct_node = first_tree(item.children, "struct_def")
            if struct_node is None:
                raise SchemaSyntaxError("item: expected enum or struct", span_of(item))
            name_tok = first_name(struct_node.children)
            structs.append(StructDef(
                loc=span_of(item),
                name=str(name_tok),
                attributes=attributes,
                name_span=span_of(name_tok),
            ))

        return Schema(loc=span_of(tree), enums=enums, structs=structs)

    # ---- declarations ----

    def _enum(self, t: Tree, attributes: List[Attribute], item: Tree) -> EnumDef:
        """enum_def: "enum" NAME "{" variant_list? "}" """
        name_tok = first_name(t.children)
        if name_tok is None:
            raise SchemaSyntaxError("enum_def: missing enum NAME", span_of(t))

        variants: List[EnumVariant] = []
        variant_list = first_tree(t.children, "variant_list")
        if variant_list is not None:
            variants = [self._variant(v) for v in trees(variant_list.children, "variant")]

        return EnumDef(
            loc=span_of(item),
            name=str(name_tok),
            variants=variants,
            attributes=attributes,
            name_span=span_of(name_tok),
        )

    def _variant(self, t: Tree) -> EnumVariant:
        """variant: attributes? NAME variant_fields?"""
        name_tok = first_name(t.children)
        if name_tok is None:
            raise SchemaSyntaxError("variant: missing variant NAME", span_of(t))

        shape = FieldShape.UNIT
        fields: List[Field] = []

        unnamed = first_tree(t.children, "unnamed_fields")
        named = first_tree(t.children, "named_fields")
        if unnamed is not None:
            shape = FieldShape.UNNAMED
            type_list = first_tree(unnamed.children, "type_list")
            if type_list is not None:
                fields = [
                    Field(loc=span_of(ty), name=None, type_text=source_text(self.source, ty))
                    for ty in trees(type_list.children)
                ]
        elif named is not None:
            shape = FieldShape.NAMED
            fields = [self._named_field(f) for f in trees(named.children, "named_field")]

        return EnumVariant(
            loc=span_of(t),
            name=str(name_tok),
            shape=shape,
            fields=fields,
            attributes=self._attributes(t),
            name_span=span_of(name_tok),
        )

    def _named_field(self, t: Tree) -> Field:
        """named_field: attributes? visibility? NAME ":" type_ref"""
        name_tok = first_name(t.children)
        type_node = [c for c in trees(t.children) if c.data not in ("attributes", "visibility")][-1]
        return Field(
            loc=span_of(t),
            name=str(name_tok),
            type_text=source_text(self.source, type_node),
            name_span=span_of(name_tok),
        )

    # ---- attributes ----

    def _attributes(self, t: Tree) -> List[Attribute]:
        group = first_tree(t.children, "attributes")
        if group is None:
            return []
        return [self._attribute(a) for a in trees(group.children, "attribute")]

    def _attribute(self, t: Tree) -> Attribute:
        """attribute: "#" "[" path attr_args? "]" """
        path = first_tree(t.children, "path")
        args_node = first_tree(t.children, "attr_args")
        args = [self._attr_arg(a) for a in trees(args_node.children)] if args_node is not None else []
        return Attribute(
            loc=span_of(t),
            name=self._path(path),
            args=args,
            has_parens=args_node is not None,
        )

    def _attr_arg(self, t: Tree) -> AttrArg:
        if t.data == "str_arg":
            tok: Token = t.children[0]
            return AttrArg(loc=span_of(tok), kind="str", value=parse_string_token(tok), raw=str(tok))
        if t.data == "num_arg":
            tok = t.children[0]
            return AttrArg(loc=span_of(tok), kind="num", value=str(tok))
        if t.data == "path_arg":
            return AttrArg(loc=span_of(t), kind="path", value=self._path(t.children[0]))
        if t.data == "kv_arg":
            return AttrArg(loc=span_of(t), kind="kv", value=source_text(self.source, t))
        raise SchemaSyntaxError(f"unknown attribute argument '{t.data}'", span_of(t))

    @staticmethod
    def _path(t: Optional[Tree]) -> str:
        if t is None:
            return ""
        return "::".join(str(c) for c in t.children if isinstance(c, Token))
