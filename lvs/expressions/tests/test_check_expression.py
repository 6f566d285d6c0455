import pytest

from lvs.expressions.parser import check_expression
from lvs.sockets.classes import Severity


def test_valid_expression_without_names_has_no_diagnostics():
    assert check_expression("score * 2 + bonus") == []


def test_syntax_errors_are_returned_not_raised():
    diagnostics = check_expression("score *", field="condition", socket_id="condition")

    assert len(diagnostics) == 1
    assert diagnostics[0].code == "EXPRESSION_SYNTAX"
    assert diagnostics[0].severity is Severity.ERROR
    assert diagnostics[0].socket_id == "condition"


def test_empty_expression_names_its_field():
    diagnostics = check_expression(None, field="loop condition")
    assert diagnostics[0].message == "The loop condition expression is empty."


@pytest.mark.parametrize(
    "expression, visible, undefined",
    [
        pytest.param("score * 2", {"score"}, [], id="all_visible"),
        pytest.param("score + bonus", {"score"}, ["bonus"], id="one_missing"),
        pytest.param("math.floor(x) + tostring(y)", {"x", "y"}, [], id="builtins_are_known"),
        pytest.param("enemy.Health - enemy.Armor", set(), ["enemy"], id="reported_once"),
        pytest.param("target:TakeDamage(dmg)", {"target"}, ["dmg"], id="method_name_is_not_free"),
    ],
)
def test_undefined_identifiers_are_warnings(expression, visible, undefined):
    diagnostics = check_expression(expression, visible_names=visible)

    assert [d.code for d in diagnostics] == ["UNDEFINED_IDENTIFIER"] * len(undefined)
    assert all(d.severity is Severity.WARNING for d in diagnostics)
    assert [d.message.split("'")[1] for d in diagnostics] == undefined


def test_deeply_nested_expression_is_a_diagnostic():
    diagnostics = check_expression("not " * 1500 + "ready", socket_id="condition")

    assert [d.code for d in diagnostics] == ["EXPRESSION_TOO_DEEP"]
    assert diagnostics[0].severity is Severity.ERROR
