# semantics/passes/fields.py
from __future__ import annotations
from typing import Optional, Set

from errfmt.internals.report import Reporter, Span
from errfmt.internals import errors as er
from errfmt.runtime.formatter import parse_trait
from errfmt.semantics.ast import AttrArg, EnumVariant, FieldShape, Schema
from errfmt.semantics.ast_builder.string_processing import maps_directly
from errfmt.semantics.exceptions import StrayClosingBraceError, UnterminatedPlaceholderError
from errfmt.semantics.interpolation import Interpolation, Placeholder, parse_template, positional_index
from errfmt.semantics.passes.attributes import is_unusable_name

# Names that would clash with the generated __init__ or with Exception itself
RESERVED_FIELD_NAMES = frozenset({"self", "args", "with_traceback", "add_note"})


class FieldBindingPass:
    """
    Pass 2: check every message against the field shape of its variant.

    Templates are scanned in strict mode so malformed braces are reported
    instead of silently dropped. Each catalogue key must then resolve to a
    field: by position for unnamed fields, by name for named fields. Fields
    that the message never mentions are reported as warnings.
    """

    def __init__(self, reporter: Reporter) -> None:
        self.reporter = reporter

    def run(self, schema: Schema) -> None:
        for enum in schema.enums:
            for variant in enum.variants:
                self._check_field_names(variant)
                message = variant.message
                if message is None:
                    continue  # already reported by AttributePass
                interp = self._scan(variant, message)
                if interp is not None:
                    self._check_keys(variant, message, interp)

    def _check_field_names(self, variant: EnumVariant) -> None:
        for f in variant.fields:
            if f.name is not None and (is_unusable_name(f.name) or f.name in RESERVED_FIELD_NAMES):
                er.emit(self.reporter, er.ERR.CE2007, f.name_span, name=f.name, variant=variant.name)

    def _scan(self, variant: EnumVariant, message: AttrArg) -> Optional[Interpolation]:
        try:
            return parse_template(message.value, strict=True)
        except UnterminatedPlaceholderError as e:
            er.emit(self.reporter, er.ERR.CE2001, self._span_at(message, e.offset), variant=variant.name)
        except StrayClosingBraceError as e:
            er.emit(self.reporter, er.ERR.CE2002, self._span_at(message, e.offset), variant=variant.name)
        return None

    def _check_keys(self, variant: EnumVariant, message: AttrArg, interp: Interpolation) -> None:
        reported: Set[str] = set()
        used: Set[str] = set()

        for ph in interp.placeholders:
            used.add(ph.key)
            self._check_trait(variant, message, ph)
            if ph.key in reported:
                continue
            span = self._span_at(message, ph.start)
            index = positional_index(ph.key)

            if variant.shape == FieldShape.UNIT:
                er.emit(self.reporter, er.ERR.CE2003, span, variant=variant.name, key=ph.key)
            elif variant.shape == FieldShape.UNNAMED:
                if index is None:
                    er.emit(self.reporter, er.ERR.CE2005, span, variant=variant.name, key=ph.key)
                elif index >= len(variant.fields):
                    er.emit(self.reporter, er.ERR.CE2004, span,
                            index=index, variant=variant.name, count=len(variant.fields))
                else:
                    continue
            elif index is not None:
                er.emit(self.reporter, er.ERR.CE2006, span, variant=variant.name)
            elif ph.key not in variant.field_names:
                er.emit(self.reporter, er.ERR.CE2005, span, variant=variant.name, key=ph.key)
            else:
                continue
            reported.add(ph.key)

        self._check_unused(variant, used)

    def _check_trait(self, variant: EnumVariant, message: AttrArg, ph: Placeholder) -> None:
        if ph.trait is None:
            return
        try:
            parse_trait(ph.trait)
        except ValueError:
            er.emit(self.reporter, er.ERR.CE2008, self._span_at(message, ph.start),
                    trait=ph.trait, variant=variant.name)

    def _check_unused(self, variant: EnumVariant, used: Set[str]) -> None:
        used_positions = {positional_index(key) for key in used}
        for i, f in enumerate(variant.fields):
            if f.name is None:
                if i not in used_positions:
                    er.emit(self.reporter, er.ERR.CW2001, f.loc, field=str(i), variant=variant.name)
            elif f.name not in used:
                er.emit(self.reporter, er.ERR.CW2001, f.name_span or f.loc, field=f.name, variant=variant.name)

    @staticmethod
    def _span_at(message: AttrArg, offset: int) -> Optional[Span]:
        """Point at character `offset` of the decoded message when it lines up with the source."""
        if message.loc is None:
            return None
        if maps_directly(message.raw):
            return message.loc.shifted(1 + offset)
        return message.loc
