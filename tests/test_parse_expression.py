import pytest

from apply_license.core.errors import ParseError
from apply_license.core.expression.parse_expression import parse_expression


def test_single_identifier():
    assert parse_expression("MIT") == ["MIT"]


def test_alternatives_keep_order():
    assert parse_expression("A OR B OR C") == ["A", "B", "C"]
    assert parse_expression("Apache-2.0 OR MIT") == ["Apache-2.0", "MIT"]


def test_surrounding_whitespace_is_trimmed():
    assert parse_expression("  MIT   OR\tApache-2.0 \n") == ["MIT", "Apache-2.0"]


def test_duplicates_are_kept():
    assert parse_expression("MIT OR MIT") == ["MIT", "MIT"]


def test_legacy_slash_separator():
    assert parse_expression("MIT/Apache-2.0") == ["MIT", "Apache-2.0"]
    assert parse_expression("MIT / Apache-2.0") == ["MIT", "Apache-2.0"]


@pytest.mark.parametrize("expr", ["", "  ", "\t\n"])
def test_blank_expression_fails(expr):
    with pytest.raises(ParseError) as exc:
        parse_expression(expr)
    assert exc.value.code == "E_PARSE_EMPTY"


@pytest.mark.parametrize("expr", ["OR", "MIT OR", "OR MIT", "MIT OR OR Apache-2.0", "MIT/", "/MIT"])
def test_empty_identifier_fails(expr):
    with pytest.raises(ParseError) as exc:
        parse_expression(expr)
    assert exc.value.code == "E_PARSE_EMPTY_IDENTIFIER"


@pytest.mark.parametrize(
    "expr",
    ["MIT AND Apache-2.0", "GPL-2.0 WITH Classpath-exception-2.0", "(MIT OR Apache-2.0)", "MIT OR (Apache-2.0)"],
)
def test_unsupported_operators_fail(expr):
    with pytest.raises(ParseError) as exc:
        parse_expression(expr)
    assert exc.value.code == "E_PARSE_UNSUPPORTED_OPERATOR"


def test_or_is_case_sensitive():
    assert parse_expression("MIT or Apache-2.0") == ["MIT or Apache-2.0"]


def test_identifiers_may_contain_inner_whitespace():
    assert parse_expression("Internal License OR MIT") == ["Internal License", "MIT"]
    assert parse_expression(" Internal License ") == ["Internal License"]


def test_or_must_be_surrounded_by_whitespace():
    assert parse_expression("MITOR Apache-2.0") == ["MITOR Apache-2.0"]


def test_unregistered_identifiers_are_not_rejected():
    assert parse_expression("GPL-9.0") == ["GPL-9.0"]


def test_error_string_includes_code_and_location():
    try:
        parse_expression("")
        assert False, "expected ParseError"
    except ParseError as e:
        assert str(e) == "license: E_PARSE_EMPTY: license expression is empty"
