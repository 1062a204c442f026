"""Schema compilation: analysis, catalogue dump and module generation."""
from __future__ import annotations

from pathlib import Path

from errfmt.backend.codegen_py import PythonCodegen
from errfmt.backend.display import DisplayArm
from errfmt.compiler.config import ErrfmtConfig
from errfmt.internals import errors as er
from errfmt.internals.report import Reporter
from errfmt.semantics.ast import Schema
from errfmt.semantics.semantic_analyzer import SemanticAnalyzer

OUTPUT_SUFFIX = "_display.py"


def output_path_for(src_path: Path, config: ErrfmtConfig, out: str | None = None) -> Path:
    if out:
        return Path(out)
    return config.output_dir(src_path) / f"{src_path.stem}{OUTPUT_SUFFIX}"


def dump_catalogue(schema: Schema) -> None:
    """Print the rewritten template and field catalogue of every variant."""
    for enum in schema.enums:
        for variant in enum.variants:
            message = variant.message
            if message is None:
                continue
            arm = DisplayArm.parse(message.value, variant)
            print(f"{enum.name}::{variant.name}")
            print(f"  template:  {arm.text}")
            if not arm.catalogue:
                print("  catalogue: (empty)")
                continue
            entries = ", ".join(
                key if trait is None else f"{key}:{trait}" for key, trait in arm.catalogue.items()
            )
            print(f"  catalogue: {entries}")
    print()


def compile_schema(schema: Schema, src_path: Path, reporter: Reporter, args,
                   config: ErrfmtConfig) -> int:
    """Analyze `schema` and write its display module.

    Args:
        schema: Parsed schema AST.
        src_path: Path to the schema source file.
        reporter: Reporter for error/warning collection.
        args: Command line arguments.
        config: Loaded project configuration.

    Returns:
        Exit code (0=success, 1=warnings, 2=errors).
    """
    werror = args.werror or config.werror

    SemanticAnalyzer(reporter).check(schema)

    if args.dump_catalogue:
        dump_catalogue(schema)

    if reporter.has_errors or args.check:
        return reporter.exit_code(werror)
    if werror and reporter.has_warnings:
        return 2

    codegen = PythonCodegen(source_name=src_path.name, header=config.header and not args.no_header)
    module_source = codegen.generate(schema)

    out_path = output_path_for(src_path, config, args.out)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(module_source, encoding="utf-8")
    except OSError as e:
        er.emit(reporter, er.ERR.CE3001, None, path=str(out_path), reason=e.strerror or str(e))
        return 2

    print(f"Wrote {out_path} ({len(schema.enums)} enum(s))")
    return reporter.exit_code(werror)
