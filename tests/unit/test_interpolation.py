import pytest

from errfmt.semantics.exceptions import StrayClosingBraceError, UnterminatedPlaceholderError
from errfmt.semantics.interpolation import (
    parse,
    parse_template,
    positional_index,
    positional_key,
)


@pytest.mark.parametrize("template", ["", "plain text", "no placeholders: at all!", "üñí ✓"])
def test_template_without_placeholders_is_unchanged(template):
    assert parse(template) == (template, {})


@pytest.mark.parametrize("template", ["{{", "}}", "a {{literal}} b", "{{{{}}}}"])
def test_escaped_braces_are_kept_and_not_catalogued(template):
    text, catalogue = parse(template)
    assert text == template
    assert catalogue == {}


def test_named_placeholders():
    assert parse("Hello, {name}!") == ("Hello, {name}!", {"name": None})
    assert parse("Hello, {name}! {age}") == ("Hello, {name}! {age}", {"name": None, "age": None})


def test_repeated_name_is_catalogued_once():
    assert parse("{name} and {name}") == ("{name} and {name}", {"name": None})


def test_explicit_positional_placeholders():
    assert parse("Hello, {0}! {1}") == ("Hello, {__0}! {__1}", {"__0": None, "__1": None})


def test_implicit_indices_are_zero_based_and_increasing():
    assert parse("{} {} {}") == ("{__0} {__1} {__2}", {"__0": None, "__1": None, "__2": None})


def test_explicit_indices_do_not_advance_implicit_counter():
    text, catalogue = parse("{1} {} {0}")
    assert text == "{__1} {__0} {__0}"
    assert set(catalogue) == {"__0", "__1"}

    # A later '{}' continues from the implicit counter, not from the largest explicit index
    text, _ = parse("{1} {} {0} {}")
    assert text == "{__1} {__0} {__0} {__1}"

    text, _ = parse("{5} {}")
    assert text == "{__5} {__0}"


def test_mixed_implicit_named_and_explicit():
    text, catalogue = parse("Hello, {}! {} {name} {0} {} {1} {1}")
    assert text == "Hello, {__0}! {__1} {name} {__0} {__2} {__1} {__1}"
    assert catalogue == {"__0": None, "__1": None, "name": None, "__2": None}


def test_trait_is_captured_verbatim_and_excluded_from_name():
    assert parse("{x:?}") == ("{x:?}", {"x": "?"})
    assert parse("{:#x}") == ("{__0:#x}", {"__0": "#x"})
    assert parse("{2:>8.3e}") == ("{__2:>8.3e}", {"__2": ">8.3e"})


def test_trait_keeps_later_colons():
    assert parse("{t:a:b}") == ("{t:a:b}", {"t": "a:b"})


def test_empty_trait_is_absent():
    assert parse("{x:}") == ("{x}", {"x": None})
    assert parse("{:}") == ("{__0}", {"__0": None})


def test_conflicting_traits_last_write_wins():
    text, catalogue = parse("{0:x} {0:#x}")
    assert text == "{__0:x} {__0:#x}"
    assert catalogue == {"__0": "#x"}

    # An occurrence without a trait is a write too
    assert parse("{x:?} {x}")[1] == {"x": None}
    assert parse("{x} {x:?}")[1] == {"x": "?"}


def test_digits_only_name_matches_explicit_index():
    assert parse("{7}")[0] == parse("{7:}")[0] == "{__7}"
    assert parse("{01}") == ("{__01}", {"__01": None})


def test_non_ascii_digits_are_names():
    assert parse("{٣}") == ("{٣}", {"٣": None})


def test_rewriting_is_idempotent():
    for template in ["{} {name:?} {1:#x} {{esc}}", "Hello, {:?}! {0:b} {}"]:
        once = parse(template)
        assert parse(once[0]) == once


def test_all_traits_of_reference_suite():
    template = (
        "Hello, {:?}! {:#?} "
        "{name:?} {name:#?} "
        "{:b} {0:b} {0:#b} "
        "{:e} {1:e} "
        "{:x} {1:x} {1:#x} "
        "{:o} {:#o} {1:o} {1:#o} "
        "{:p} {:#p} {1:p} {1:#p} "
        "{:#E} {1:#E} "
        "{:x} {1:x} "
        "{:X} {:#X} {1:X} {1:#X} "
        "{}{} {name:?}{:b}Hello{}"
    )
    expected = (
        "Hello, {__0:?}! {__1:#?} "
        "{name:?} {name:#?} "
        "{__2:b} {__0:b} {__0:#b} "
        "{__3:e} {__1:e} "
        "{__4:x} {__1:x} {__1:#x} "
        "{__5:o} {__6:#o} {__1:o} {__1:#o} "
        "{__7:p} {__8:#p} {__1:p} {__1:#p} "
        "{__9:#E} {__1:#E} "
        "{__10:x} {__1:x} "
        "{__11:X} {__12:#X} {__1:X} {__1:#X} "
        "{__13}{__14} {name:?}{__15:b}Hello{__16}"
    )
    text, catalogue = parse(template)
    assert text == expected
    assert catalogue["__0"] == "#b"
    assert catalogue["__1"] == "#X"
    assert catalogue["name"] == "?"
    assert catalogue["__16"] is None
    assert len(catalogue) == 18


def test_placeholder_records():
    result = parse_template("a {} b {name:?}")
    first, second = result.placeholders
    assert (first.key, first.trait, first.start, first.end, first.implicit) == ("__0", None, 2, 4, True)
    assert (second.key, second.trait, second.start, second.end, second.implicit) == ("name", "?", 7, 15, False)
    assert result.keys == ["__0", "name"]


def test_unterminated_placeholder_is_dropped_in_lenient_mode():
    result = parse_template("before {name and the rest")
    assert result.text == "before "
    assert result.catalogue == {}
    assert result.unterminated_at == 7

    text, catalogue = parse("{a} then {b:?")
    assert text == "{a} then "
    assert catalogue == {"a": None}


def test_unterminated_placeholder_raises_in_strict_mode():
    with pytest.raises(UnterminatedPlaceholderError) as exc_info:
        parse_template("ok {x} {broken", strict=True)
    assert exc_info.value.offset == 7
    assert exc_info.value.template == "ok {x} {broken"


def test_lone_closing_brace():
    assert parse("a } b") == ("a } b", {})
    with pytest.raises(StrayClosingBraceError) as exc_info:
        parse_template("a } b", strict=True)
    assert exc_info.value.offset == 2


def test_strict_mode_accepts_well_formed_templates():
    assert parse_template("{{ {x:?} }} {}", strict=True).text == "{{ {x:?} }} {__0}"


def test_positional_key_helpers():
    assert positional_key(3) == "__3"
    assert positional_index("__3") == 3
    assert positional_index("__03") == 3
    assert positional_index("name") is None
    assert positional_index("__x") is None
    assert positional_index("__") is None
