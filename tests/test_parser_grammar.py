from __future__ import annotations

import logging
from textwrap import dedent
from typing import Optional, Type

import pytest

from tessel_ref.ast_nodes import (
    Add,
    ArrayLiteral,
    Char,
    Div,
    Expression,
    Float,
    IntegerBin,
    IntegerDec,
    IntegerHex,
    IntegerOct,
    Mul,
    Operator,
    Pow,
    Program,
    Statement,
    StringLiteral,
    Sub,
    TupleLiteral,
)
from tessel_ref.config import Options
from tessel_ref.errors import FatalError, LiteralError
from tessel_ref.parse import ParseError, convert, parse_expression, parse_program, parse_tree
from tests.support.harness import add, float_term, int_term, literal_of, string_term

LITERAL_CASES = [
    pytest.param("42", IntegerDec(42), id="dec"),
    pytest.param("0x1A", IntegerHex(26), id="hex"),
    pytest.param("0XfF", IntegerHex(255), id="hex-mixed-case"),
    pytest.param("0b101", IntegerBin(5), id="bin"),
    pytest.param("0o17", IntegerOct(15), id="oct"),
    pytest.param("3.14", Float(3.14), id="float"),
    pytest.param("'x'", Char("x"), id="char"),
    pytest.param('"abc"', StringLiteral("abc"), id="string"),
    pytest.param('""', StringLiteral(""), id="string-empty"),
    pytest.param('"abc\\""', StringLiteral("abc\\"), id="string-trailing-quote-stripped"),
]


@pytest.mark.parametrize("source, expected", LITERAL_CASES)
def test_literals_from_source(source: str, expected: object) -> None:
    assert literal_of(parse_expression(source)) == expected


@pytest.mark.parametrize(
    "source, marker",
    [
        pytest.param("2 + 3", Add, id="add"),
        pytest.param("2 - 3", Sub, id="sub"),
        pytest.param("2 * 3", Mul, id="mul"),
        pytest.param("2 / 3", Div, id="div"),
        pytest.param("2 ** 3", Pow, id="pow"),
    ],
)
def test_binary_expression(source: str, marker: type) -> None:
    expr = parse_expression(source)
    assert expr == Expression(int_term(2), (Operator(marker()), int_term(3)))


def test_single_term_has_no_rhs() -> None:
    assert parse_expression("7") == Expression(int_term(7), None)


def test_mixed_literal_operands() -> None:
    expr = parse_expression('1.5 + "s"')
    assert expr == add(float_term(1.5), string_term("s"))


def test_parenthesized_term_nests_expression() -> None:
    expr = parse_expression("1 + (2 * 3)")

    assert expr.rhs is not None
    op, rhs = expr.rhs
    assert op == Operator(Add())
    assert rhs.is_group
    assert rhs.variant == Expression(int_term(2), (Operator(Mul()), int_term(3)))


def test_group_of_one_is_not_a_tuple() -> None:
    expr = parse_expression("(1)")

    assert expr.lhs.is_group
    assert expr.lhs.variant == Expression(int_term(1))


def test_operator_chain_needs_grouping() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse_expression("1 + 2 + 3")

    assert excinfo.value.line == 1
    assert excinfo.value.context

    grouped = parse_expression("(1 + 2) + 3")
    assert grouped.lhs.variant == add(int_term(1), int_term(2))


@pytest.mark.parametrize(
    "source, node_type, size",
    [
        pytest.param("[]", ArrayLiteral, 0, id="array-empty"),
        pytest.param("[1]", ArrayLiteral, 1, id="array-one"),
        pytest.param("[1, 2, 3]", ArrayLiteral, 3, id="array-three"),
        pytest.param("[1, 2,]", ArrayLiteral, 2, id="array-trailing-comma"),
        pytest.param("()", TupleLiteral, 0, id="tuple-empty"),
        pytest.param("(1,)", TupleLiteral, 1, id="tuple-one"),
        pytest.param("(1, 'a', \"b\")", TupleLiteral, 3, id="tuple-three"),
    ],
)
def test_sequences(source: str, node_type: Type[object], size: int) -> None:
    node = literal_of(parse_expression(source))

    assert type(node) is node_type
    assert len(node.params) == size


def test_sequence_elements_are_expressions() -> None:
    arr = literal_of(parse_expression("[1 + 2, [3], (4, 5)]"))

    first, second, third = arr.params
    assert first == add(int_term(1), int_term(2))
    assert isinstance(literal_of(second), ArrayLiteral)
    assert isinstance(literal_of(third), TupleLiteral)
    assert [e.lhs for e in literal_of(third).params] == [int_term(4), int_term(5)]


def test_program_statements() -> None:
    src = dedent(
        """\
        // comments are skipped
        1;
        2 + 3;
        [1, (2, 3)];
        """
    )

    program = parse_program(src)

    assert program == Program((Statement(), Statement(), Statement()))


def test_empty_program() -> None:
    assert parse_program("") == Program(())
    assert parse_program("  // nothing here\n") == Program(())


def test_missing_semicolon_is_a_parse_error() -> None:
    with pytest.raises(ParseError):
        parse_program("1 + 2")


@pytest.mark.parametrize(
    "source, rule, fragment",
    [
        pytest.param("99999999999999999999;", "integer_dec", "too large", id="dec-overflow"),
        pytest.param("0x8000000000000000;", "integer_hex", "too large", id="hex-overflow"),
        pytest.param("'';", "char", "empty character", id="empty-char"),
        pytest.param("0x1A.8;", "float", "invalid float", id="radix-float-default"),
        pytest.param("[1, 0b1.1];", "float", "invalid float", id="nested-radix-float"),
    ],
)
def test_literal_errors_abort_program(source: str, rule: str, fragment: str) -> None:
    with pytest.raises(LiteralError) as excinfo:
        parse_program(source)

    assert excinfo.value.rule == rule
    assert fragment in excinfo.value.reason
    assert excinfo.value.line == 1


def test_literal_error_reports_position() -> None:
    src = "1;\n  [2, 99999999999999999999];"

    with pytest.raises(LiteralError) as excinfo:
        parse_program(src)

    err = excinfo.value
    assert err.text == "99999999999999999999"
    assert (err.line, err.column) == (2, 7)


def test_radix_floats_option() -> None:
    opts = Options(radix_floats=True)

    assert literal_of(parse_expression("0x1A.8", opts)) == Float(26.8)
    assert literal_of(parse_expression("0b101.25", opts)) == Float(5.25)
    assert literal_of(parse_expression("2.5", opts)) == Float(2.5)


def test_earley_parser_agrees_with_lalr() -> None:
    src = "(1, [2 ** 0x10, 'c'], \"s\") - (3 / 0o7)"
    earley = Options(parser="earley")

    assert parse_expression(src, earley) == parse_expression(src)


def test_convert_requires_matching_root() -> None:
    src = "1;"
    tree = parse_tree(src)

    assert convert(tree, src) == Program((Statement(),))

    with pytest.raises(FatalError, match="cannot build Expression"):
        convert(tree, src, Expression)


@pytest.mark.parametrize(
    "depth, converts",
    [
        pytest.param(50, True, id="shallow"),
        pytest.param(1000, False, id="too-deep"),
    ],
)
def test_deep_nesting(depth: int, converts: bool) -> None:
    src = "(" * depth + "1" + ")" * depth

    if converts:
        expr = parse_expression(src)
        assert expr.lhs.is_group
        assert expr.rhs is None
        return

    with pytest.raises(FatalError, match="nesting too deep") as excinfo:
        parse_expression(src)

    assert excinfo.value.rule == "expr"
    assert excinfo.value.line == 1


def test_parse_tree_rejects_unknown_start() -> None:
    with pytest.raises(ValueError):
        parse_tree("1", start="stmt")


def test_conversion_logs_matches(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="tessel_ref")

    parse_expression("1 + 2")

    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("expr matched at 1:1") for m in messages)
    assert any(m.startswith("op_add matched") for m in messages)


def _literal_or_none(source: str) -> Optional[object]:
    try:
        return literal_of(parse_expression(source))
    except ParseError:
        return None


@pytest.mark.parametrize(
    "source",
    [
        pytest.param("-1", id="no-unary-minus"),
        pytest.param("1_000", id="no-underscores"),
        pytest.param("0xZZ", id="bad-hex"),
        pytest.param("[1 2]", id="missing-comma"),
    ],
)
def test_rejected_surface_syntax(source: str) -> None:
    assert _literal_or_none(source) is None
