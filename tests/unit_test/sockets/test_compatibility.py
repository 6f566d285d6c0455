import pytest

from lvs.luau_types import LuauType, can_connect, parse_type
from lvs.sockets.compatibility import check_connection, check_socket_connection
from lvs.sockets.node_kinds import default_registry
from lvs.sockets.classes import NodeSockets, sockets


@pytest.mark.parametrize(
    "source, target, expected",
    [
        pytest.param(LuauType.FLOW, LuauType.FLOW, True, id="flow_to_flow"),
        pytest.param(LuauType.FLOW, LuauType.ANY, False, id="flow_to_wildcard"),
        pytest.param(LuauType.ANY, LuauType.FLOW, False, id="wildcard_to_flow"),
        pytest.param(LuauType.NUMBER, LuauType.NUMBER, True, id="same_type"),
        pytest.param(LuauType.NUMBER, LuauType.STRING, False, id="different_types"),
        pytest.param(LuauType.TABLE, LuauType.ANY, True, id="into_wildcard"),
        pytest.param(LuauType.ANY, LuauType.BOOLEAN, True, id="from_wildcard"),
        pytest.param(LuauType.NIL, LuauType.NUMBER, False, id="nil_is_a_type"),
    ],
)
def test_can_connect(source, target, expected):
    assert can_connect(source, target) is expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        pytest.param("number", LuauType.NUMBER, id="plain"),
        pytest.param(" Table ", LuauType.TABLE, id="case_and_spaces"),
        pytest.param("Instance", LuauType.ANY, id="unknown_degrades"),
        pytest.param(None, LuauType.ANY, id="missing"),
    ],
)
def test_parse_type(raw, expected):
    assert parse_type(raw) is expected


def test_refined_type_is_ignored_for_compatibility():
    registry = default_registry()
    # Print's value input is a wildcard; a string upstream refines it for display only.
    source = NodeSockets(outputs=sockets(("result", "Result", LuauType.NUMBER)))
    target = registry.compute_sockets("Print")
    refined = target.model_copy(update={"inputs": [s.model_copy(update={"refined_type": LuauType.STRING}) for s in target.inputs]})

    assert check_socket_connection(source, "result", refined, "value").allowed


def test_number_output_into_boolean_condition_is_rejected():
    check = check_connection("Add", {}, "result", "WhileLoop", {"mode": "linear"}, "condition")

    assert not check.allowed
    assert check.reason == "TYPE_MISMATCH"
    assert check.source_type == LuauType.NUMBER
    assert check.target_type == LuauType.BOOLEAN
    assert "number" in check.message and "boolean" in check.message


def test_flow_into_data_input_is_rejected():
    check = check_connection("Start", {}, "output", "Print", {}, "value")
    assert not check.allowed


def test_unknown_handles_are_reported():
    missing_source = check_connection("Add", {}, "nope", "Print", {}, "value")
    missing_target = check_connection("Add", {}, "result", "Print", {}, "nope")

    assert missing_source.reason == "UNKNOWN_SOURCE_SOCKET"
    assert missing_target.reason == "UNKNOWN_TARGET_SOCKET"


def test_expression_mode_removes_the_target_socket():
    check = check_connection("Add", {}, "result", "Subtract", {"mode": "expression", "expression": "1 + 2"}, "a")
    assert check.reason == "UNKNOWN_TARGET_SOCKET"


def test_flow_chain_is_allowed():
    check = check_connection("Start", {}, "output", "Print", {}, "prev")
    assert check.allowed
