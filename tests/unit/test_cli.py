import runpy

from errfmt.compiler.cli import main


def test_version_prints_banner(capsys):
    assert main(["--version"]) == 0
    assert "errfmt" in capsys.readouterr().out


def test_missing_source():
    assert main([]) == 2


def test_unreadable_source(tmp_path, capsys):
    assert main([str(tmp_path / "missing.errfmt")]) == 2
    assert "cannot read" in capsys.readouterr().err


def test_compiles_reference_schema(write_schema, some_error_source, capsys):
    path = write_schema(some_error_source)
    assert main([str(path)]) == 0

    out_path = path.resolve().with_name("errors_display.py")
    assert f"Wrote {out_path} (1 enum(s))" in capsys.readouterr().out

    ns = runpy.run_path(str(out_path))
    assert str(ns["SomeError"].Unnamed("x", 45)) == "hello 'x' 45"


def test_explicit_output_path(write_schema, some_error_source, tmp_path):
    path = write_schema(some_error_source)
    out = tmp_path / "gen" / "messages.py"
    assert main([str(path), "-o", str(out), "--no-header"]) == 0
    assert out.read_text().startswith("from __future__ import annotations")


def test_check_does_not_write(write_schema, some_error_source):
    path = write_schema(some_error_source)
    assert main([str(path), "--check"]) == 0
    assert not path.with_name("errors_display.py").exists()


def test_syntax_error_is_reported(write_schema, capsys):
    path = write_schema("enum E { A B }\n")
    assert main([str(path)]) == 2
    err = capsys.readouterr().err
    assert "error [CE1000]: syntax error: unexpected 'B'" in err
    assert ":1:12:" in err


def test_semantic_errors_block_generation(write_schema, capsys):
    path = write_schema('enum E {\n    A,\n}\n')
    assert main([str(path)]) == 2
    assert "error [CE1002]" in capsys.readouterr().err
    assert not path.with_name("errors_display.py").exists()


def test_warnings_exit_with_one_and_still_generate(write_schema):
    path = write_schema('enum E {\n    #[error("unused")]\n    A(i32),\n}\n')
    assert main([str(path)]) == 1
    assert path.with_name("errors_display.py").exists()


def test_werror_turns_warnings_into_failure(write_schema):
    path = write_schema('enum E {\n    #[error("unused")]\n    A(i32),\n}\n')
    assert main([str(path), "--werror"]) == 2
    assert not path.with_name("errors_display.py").exists()


def test_werror_from_config(write_schema, tmp_path):
    (tmp_path / "errfmt.toml").write_text("werror = true\n")
    path = write_schema('enum E {\n    #[error("unused")]\n    A(i32),\n}\n')
    assert main([str(path), "--check"]) == 2


def test_invalid_config(write_schema, tmp_path, capsys):
    (tmp_path / "errfmt.toml").write_text("bogus = 1\n")
    path = write_schema("enum E {}\n")
    assert main([str(path)]) == 2
    assert "Unknown errfmt option" in capsys.readouterr().err


def test_missing_trailing_newline_warns(write_schema, capsys):
    path = write_schema('enum E { #[error("x")] A }')
    assert main([str(path), "--check"]) == 1
    assert "warning [CW0001]" in capsys.readouterr().err


def test_dump_catalogue(write_schema, capsys):
    path = write_schema('enum E {\n    #[error("{1} {} {0:?}")]\n    A(i32, i32),\n    #[error("plain")]\n    B,\n}\n')
    assert main([str(path), "--check", "--dump-catalogue"]) == 0
    out = capsys.readouterr().out
    assert "E::A\n  template:  {__1} {__0} {__0:?}\n  catalogue: __1, __0:?\n" in out
    assert "E::B\n  template:  plain\n  catalogue: (empty)\n" in out


def test_dump_ast(write_schema, some_error_source, capsys):
    path = write_schema(some_error_source)
    assert main([str(path), "--check", "--dump-ast"]) == 0
    assert "EnumDef(" in capsys.readouterr().out


def test_write_failure_is_reported(write_schema, some_error_source, tmp_path, capsys):
    path = write_schema(some_error_source)
    blocker = tmp_path / "file"
    blocker.write_text("")
    assert main([str(path), "-o", str(blocker / "out.py")]) == 2
    assert "error [CE3001]" in capsys.readouterr().err
