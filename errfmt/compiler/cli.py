"""CLI entry point and argument parsing."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from errfmt.internals.version import print_banner


def main(argv: list[str] | None = None) -> int:
    """Main compiler entry point."""
    print_banner()

    ap = argparse.ArgumentParser(prog="errfmt", description="Display-message compiler for error enums")

    ap.add_argument("source", nargs='?', help="Path to schema file (.errfmt)")
    ap.add_argument("--version", action="store_true", help="Show version and exit")
    ap.add_argument("-o", "--out", metavar="OUT",
                    help="Output module path (default: <source stem>_display.py)")
    ap.add_argument("--check", action="store_true",
                    help="Only analyze the schema; do not write a module")
    ap.add_argument("--dump-parse", action="store_true", help="Print raw Lark tree")
    ap.add_argument("--dump-ast", action="store_true", help="Print AST")
    ap.add_argument("--dump-catalogue", action="store_true",
                    help="Print each variant's rewritten template and field catalogue")
    ap.add_argument("--werror", action="store_true", help="Treat warnings as errors")
    ap.add_argument("--no-header", action="store_true",
                    help="Omit the 'Generated by errfmt' comment")
    ap.add_argument(
        "--traceback",
        action="store_true",
        help="Print full traceback on internal errors (for debugging)",
    )
    args = ap.parse_args(argv)

    if args.version:
        return 0

    if not args.source:
        print("error: source file required", file=sys.stderr)
        return 2

    from errfmt.compiler.config import ConfigError, load_config
    from errfmt.compiler.pipeline import compile_schema
    from errfmt.internals import errors as er
    from errfmt.internals.parser import parse_to_ast
    from errfmt.internals.parse_errors import handle_parse_exception
    from errfmt.internals.report import Reporter

    src_path = Path(args.source).resolve()

    try:
        src = src_path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"error: cannot read {src_path}: {e}", file=sys.stderr)
        return 2

    try:
        config = load_config(src_path.parent)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    reporter = Reporter(source=src, filename=str(src_path))

    try:
        schema, _tree = parse_to_ast(src, dump_parse=args.dump_parse)
    except Exception as exc:
        if handle_parse_exception(exc, reporter):
            reporter.print()
            print()
            return 2
        raise

    if args.dump_ast:
        print(schema)
        print()

    # Check for missing trailing newline
    if src and not src.endswith('\n'):
        er.emit(reporter, er.ERR.CW0001, None)

    try:
        result = compile_schema(schema, src_path, reporter, args, config)
    except RuntimeError as e:
        if args.traceback:
            raise
        print(f"internal error: {e}", file=sys.stderr)
        return 2

    reporter.print()
    return result


if __name__ == "__main__":
    raise SystemExit(main())
