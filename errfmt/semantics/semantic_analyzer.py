# semantics/semantic_analyzer.py
from __future__ import annotations

from errfmt.internals.report import Reporter
from errfmt.semantics.ast import Schema
from errfmt.semantics.passes.attributes import AttributePass
from errfmt.semantics.passes.fields import FieldBindingPass


class SemanticAnalyzer:
    """
    Semantic analysis coordinator that runs all passes over a schema.

    Pass execution order:
      - Pass 1: Attribute checks (enum-only, #[error] presence and shape, duplicates)
      - Pass 2: Field binding (template syntax, key resolution, unused fields)

    Code generation must only run when the reporter holds no errors.
    """

    def __init__(self, reporter: Reporter) -> None:
        self.reporter = reporter

    def check(self, schema: Schema) -> None:
        AttributePass(self.reporter).run(schema)
        FieldBindingPass(self.reporter).run(schema)
