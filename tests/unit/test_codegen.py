import pytest

from errfmt.backend.codegen_py import PythonCodegen
from errfmt.backend.display import DisplayArm, build_arms, field_attr
from errfmt.internals.parser import parse_to_ast
from errfmt.semantics.ast import EnumVariant, Field, FieldShape


class UnnamedStructValue:
    def __repr__(self):
        return "UnnamedStructValue"


def generate(src: str, **kwargs) -> str:
    schema, _ = parse_to_ast(src)
    return PythonCodegen(**kwargs).generate(schema)


def load(src: str) -> dict:
    namespace: dict = {}
    exec(compile(generate(src, source_name="errors.errfmt"), "errors_display.py", "exec"), namespace)
    return namespace


def test_reference_enum_messages(some_error_source):
    ns = load(some_error_source)
    SomeError = ns["SomeError"]
    assert ns["__all__"] == ["SomeError"]

    assert str(SomeError.Unit()) == "hello unit"
    assert str(SomeError.Unnamed(UnnamedStructValue(), 45)) == "hello UnnamedStructValue 45"
    assert str(SomeError.Named(message="world")) == "hello world"
    assert str(SomeError.Named("positional works too")) == "hello positional works too"


def test_variants_are_exceptions_of_the_enum(some_error_source):
    SomeError = load(some_error_source)["SomeError"]
    err = SomeError.Unnamed(1, 2)
    assert isinstance(err, SomeError)
    assert isinstance(err, Exception)
    assert SomeError.Unnamed.__qualname__ == "SomeError.Unnamed"
    assert err.args == (1, 2)
    assert (err._0, err._1) == (1, 2)

    with pytest.raises(SomeError) as exc_info:
        raise SomeError.Named(message="boom")
    assert str(exc_info.value) == "hello boom"


def test_repr_and_pattern_matching(some_error_source):
    SomeError = load(some_error_source)["SomeError"]
    assert repr(SomeError.Unit()) == "SomeError.Unit()"
    assert repr(SomeError.Unnamed("a", 1)) == "SomeError.Unnamed(_0='a', _1=1)"
    assert repr(SomeError.Named(message="m")) == "SomeError.Named(message='m')"

    match SomeError.Unnamed("a", 1):
        case SomeError.Named(message):
            matched = ("named", message)
        case SomeError.Unnamed(first, second):
            matched = ("unnamed", first, second)
    assert matched == ("unnamed", "a", 1)


def test_traits_and_escapes_render():
    ns = load('''
enum Io {
    #[error("{{code}} {0:#x} {1:?} {1:>5} {}")]
    Code(u32, String),
    #[error("{path:?} ({mode:#o})")]
    Open { path: String, mode: u32 },
}
''')
    Io = ns["Io"]
    assert str(Io.Code(255, "ab")) == "{code} 0xff 'ab'    ab 255"
    assert str(Io.Open(path="/tmp/x", mode=0o644)) == "'/tmp/x' (0o644)"


def test_same_variant_name_in_two_enums():
    ns = load('''
enum A { #[error("a")] Same }
enum B { #[error("b {0}")] Same(i32) }
''')
    assert str(ns["A"].Same()) == "a"
    assert str(ns["B"].Same(1)) == "b 1"
    assert not isinstance(ns["B"].Same(1), ns["A"])


def test_header_and_type_comments(some_error_source):
    text = generate(some_error_source, source_name="errors.errfmt")
    first = text.splitlines()[0]
    assert first.startswith("# Generated by errfmt ")
    assert first.endswith(" from errors.errfmt. Do not edit.")
    assert "self._0 = _0  # UnnamedStructValue" in text
    assert "self.message = message  # String" in text
    assert "return format_display('hello {__0:?} {__1}', {'__0': self._0, '__1': self._1})" in text

    text = generate(some_error_source, header=False)
    assert not text.startswith("#")
    assert text.startswith("from __future__ import annotations\n")


def test_empty_enum_still_generates():
    ns = load("enum Never {}\n")
    assert str(ns["Never"]("raw")) == "raw"


def test_display_arm_bindings_and_render():
    variant = EnumVariant(
        loc=None, name="Pair", shape=FieldShape.UNNAMED,
        fields=[Field(loc=None, name=None, type_text="i32"), Field(loc=None, name=None, type_text="i32")],
    )
    arm = DisplayArm.parse("{1} {} {0:?}", variant)
    assert arm.text == "{__1} {__0} {__0:?}"
    assert arm.bindings() == [("__1", "_1"), ("__0", "_0")]
    assert arm.render((3, 4)) == "4 3 3"
    assert field_attr(7) == "_7"


def test_display_arm_named_render():
    variant = EnumVariant(
        loc=None, name="Open", shape=FieldShape.NAMED,
        fields=[Field(loc=None, name="path", type_text="String")],
    )
    arm = DisplayArm.parse("open {path:?}", variant)
    assert arm.render({"path": "x"}) == "open 'x'"


def test_unbound_key_is_internal_error():
    variant = EnumVariant(loc=None, name="Unit", shape=FieldShape.UNIT)
    arm = DisplayArm.parse("{0}", variant)
    with pytest.raises(RuntimeError, match="CE0001"):
        arm.bindings()


def test_variant_without_message_is_internal_error():
    schema, _ = parse_to_ast("enum E { A }")
    with pytest.raises(RuntimeError, match="CE0003"):
        build_arms(schema.enums[0])


def test_variant_class_names_do_not_collide_across_enums():
    src = '''
enum A_B { #[error("first")] C }
enum A { #[error("second")] B_C }
enum _A_B_C { #[error("third")] D }
'''
    text = generate(src)
    assert "class _A_B_C(A_B):" not in text
    ns = load(src)
    assert str(ns["A_B"].C()) == "first"
    assert str(ns["A"].B_C()) == "second"
    assert str(ns["_A_B_C"].D()) == "third"
    assert isinstance(ns["A_B"].C(), ns["A_B"])
    assert isinstance(ns["A"].B_C(), ns["A"])
    assert ns["A_B"].C is not ns["A"].B_C
