"""Tests for prop value classification and normalization."""

from component_analytics.jsx_scanner import parse_props
from component_analytics.values import (
    EXPRESSION,
    VARIABLE,
    classify_value,
    is_category,
    normalize_raw,
    normalize_value,
)


def test_classification_examples():
    assert classify_value("() => doSomething()") == "<function>"
    assert classify_value("handleClick") == "<handler>"
    assert classify_value("4") == "4"
    assert classify_value("'primary'") == "primary"


def test_rule_order():
    assert classify_value("true") == "true"
    assert classify_value("false") == "false"
    assert classify_value("-1.5") == "-1.5"
    assert classify_value("[1, 2]") == "<array>"
    assert classify_value("{ padding: 4 }") == "<object>"
    assert classify_value("function () {}") == "<function>"
    # Arrow wins over the handler name
    assert classify_value("onClick => x") == "<function>"
    assert classify_value("onSelect") == "<handler>"
    assert classify_value("isOpen ? 1 : 2") == "<ternary>"
    assert classify_value("`${a}px`") == "<template>"
    assert classify_value("theme.space") == "<variable:theme.space>"
    assert classify_value("count + 1") == EXPRESSION


def test_quoted_values_keep_inner_text():
    assert classify_value('"ghost"') == "ghost"
    assert classify_value("''") == ""
    assert classify_value("'a b c'") == "a b c"


def test_functional_name_is_not_a_function():
    assert classify_value("functional") == "<variable:functional>"
    assert classify_value("handler") == "<variable:handler>"
    assert classify_value("online") == "<variable:online>"


def test_empty_raw_value_is_an_expression():
    assert classify_value("") == EXPRESSION


def test_classify_is_deterministic():
    samples = ["4", "'x'", "a ? b : c", "foo.bar", "() => 1", "[a]", "`t`", "x * 2"]
    for raw in samples:
        assert classify_value(raw) == classify_value(raw)


def test_normalize_passthrough():
    assert normalize_value("true") == "true"
    assert normalize_value("12") == "12"
    assert normalize_value("<function>") == "<function>"
    assert normalize_value("<expression>") == "<expression>"


def test_normalize_collapses_variables():
    assert normalize_value("<variable:theme.space>") == VARIABLE


def test_normalize_quotes_short_strings():
    assert normalize_value("primary") == '"primary"'
    assert normalize_value("") == '""'
    # Only known tags count as tags
    assert normalize_value("<b>") == '"<b>"'


def test_normalize_long_strings_become_expressions():
    thirty = "x" * 30
    assert normalize_value(thirty) == f'"{thirty}"'
    assert normalize_value(thirty + "y") == EXPRESSION


def test_short_quoted_props_round_trip_to_literals():
    for text in ("primary", "ghost", "flex-start", "a" * 30):
        assert normalize_raw(f"'{text}'") == f'"{text}"'


def test_is_category():
    assert is_category("<ternary>")
    assert is_category("<variable:x>")
    assert not is_category("primary")
    assert not is_category("4")


def test_quoted_numbers_and_booleans_stay_literals():
    for text in ("2", "-1", "true", "<array>"):
        raw = parse_props(f' size="{text}"')[0].value
        assert normalize_raw(raw) == f'"{text}"'

    # Braced values keep their bare form
    assert normalize_raw("2") == "2"
    assert normalize_raw("true") == "true"


def test_long_quoted_value_is_an_expression():
    assert normalize_raw("'" + "x" * 31 + "'") == EXPRESSION
