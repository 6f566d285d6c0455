import pytest

from lvs.exceptions import ErrorCode, LvsError
from lvs.expressions.classes import *
from lvs.expressions.parser import parse_expression, referenced_identifiers


@pytest.mark.parametrize(
    "expression, expected_type",
    [
        pytest.param("health", Identifier, id="identifier"),
        pytest.param("42", NumberLiteral, id="integer"),
        pytest.param("0xFF", NumberLiteral, id="hex"),
        pytest.param('"hello"', StringLiteral, id="string"),
        pytest.param("nil", NilLiteral, id="nil"),
        pytest.param("true", BooleanLiteral, id="true"),
        pytest.param("a + b", BinaryOperation, id="sum"),
        pytest.param("not ready", UnaryOperation, id="not"),
        pytest.param("#list", UnaryOperation, id="length"),
        pytest.param("player.Name", FieldAccess, id="field"),
        pytest.param("items[1]", IndexAccess, id="index"),
        pytest.param("math.max(a, b)", Call, id="call"),
        pytest.param("part:GetChildren()", MethodCall, id="method_call"),
        pytest.param("{1, 2, x = 3}", TableConstructor, id="table"),
        pytest.param("if a then b else c", IfExpression, id="if_expression"),
    ],
)
def test_parse_expression_kinds(expression, expected_type):
    assert isinstance(parse_expression(expression), expected_type)


def test_precedence_multiplication_binds_tighter():
    tree = parse_expression("1 + 2 * 3")

    assert tree.operator == "+"
    assert isinstance(tree.right, BinaryOperation)
    assert tree.right.operator == "*"


def test_left_associative_subtraction():
    tree = parse_expression("10 - 4 - 3")

    assert tree.operator == "-"
    assert isinstance(tree.left, BinaryOperation)
    assert tree.right.value == 3


def test_keywords_are_not_split_out_of_names():
    tree = parse_expression("andy or notable")

    assert tree.operator == "or"
    assert [i.name for i in referenced_identifiers(tree)] == ["andy", "notable"]


def test_referenced_identifiers_skip_field_and_method_names():
    tree = parse_expression("player.Character:FindFirstChild(partName).Size * scale")

    assert [i.name for i in referenced_identifiers(tree)] == ["player", "partName", "scale"]


def test_table_constructor_fields():
    tree = parse_expression('{health = 100, ["key"] = value, 3}')

    health, keyed, positional = tree.fields

    assert health.key == "health"
    assert isinstance(keyed.key, StringLiteral) and keyed.key.value == "key"
    assert positional.key is None and positional.value.value == 3


def test_spans_are_one_based_columns():
    tree = parse_expression("a + bb")

    assert tree.span.s_col == 1
    assert tree.right.span.s_col == 5
    assert tree.right.span.e_col == 7


@pytest.mark.parametrize(
    "expression, error",
    [
        pytest.param("", ErrorCode.EXPRESSION_EMPTY, id="empty"),
        pytest.param("   ", ErrorCode.EXPRESSION_EMPTY, id="blank"),
        pytest.param("(a + b", ErrorCode.EXPRESSION_UNMATCHED_BRACKET, id="unclosed_paren"),
        pytest.param("a + b)", ErrorCode.EXPRESSION_UNMATCHED_BRACKET, id="extra_paren"),
        pytest.param("items[1)", ErrorCode.EXPRESSION_UNMATCHED_BRACKET, id="mismatched_pair"),
        pytest.param('"unterminated', ErrorCode.EXPRESSION_UNCLOSED_STRING, id="unclosed_string"),
        pytest.param("a $ b", ErrorCode.EXPRESSION_INVALID_CHARACTER, id="invalid_character"),
        pytest.param("a +", ErrorCode.EXPRESSION_SYNTAX, id="dangling_operator"),
        pytest.param("a b", ErrorCode.EXPRESSION_SYNTAX, id="missing_operator"),
        pytest.param("local x", ErrorCode.EXPRESSION_SYNTAX, id="statement_keyword"),
    ],
)
def test_parse_expression_errors(expression, error):
    with pytest.raises(LvsError) as excinfo:
        parse_expression(expression)

    assert excinfo.value.code == error


def test_brackets_inside_strings_are_ignored():
    assert isinstance(parse_expression('"(" .. name'), BinaryOperation)
