"""
Value nodes for the core Luau types. They have no flow sockets; String, Number
and Boolean can switch between a literal and an inline expression.
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel

from lvs.config.config import DEFAULT_NODE_MODES
from lvs.luau_types import LuauType
from lvs.sockets.classes import NodeSockets, SocketContext, sockets
from lvs.sockets.node_kinds import NodeConfig, NodeKind

from .helpers import NUMBER, TABLE, expression_diagnostics

CATEGORY = "Basic Types"


class LiteralOrExpressionConfig(NodeConfig):
    mode: Literal["literal", "expression"] = DEFAULT_NODE_MODES["Number"]
    expression: Optional[str] = None


class StringConfig(LiteralOrExpressionConfig):
    value: Optional[str] = None


class NumberConfig(LiteralOrExpressionConfig):
    value: Optional[Union[float, str]] = 0


class BooleanConfig(LiteralOrExpressionConfig):
    value: bool = False


class TableEntry(BaseModel):
    key: str
    value: Union[bool, float, str]


class TableConfig(NodeConfig):
    entries: List[TableEntry] = []


class VectorConfig(NodeConfig):
    x: float = 0
    y: float = 0
    z: float = 0


def _value_kind(kind: str, value_type: LuauType, description: str, config_model) -> NodeKind:
    def compute_sockets(config: LiteralOrExpressionConfig, ctx: SocketContext) -> NodeSockets:
        diagnostics = expression_diagnostics(config.expression, ctx) if config.mode == "expression" else []
        return NodeSockets(inputs=[], outputs=sockets(("output", "Value", value_type)), diagnostics=diagnostics)

    return NodeKind(
        kind=kind,
        category=CATEGORY,
        display_name=kind,
        description=description,
        config_model=config_model,
        compute_sockets=compute_sockets,
    )


def _nil_sockets(config: NodeConfig, ctx: SocketContext) -> NodeSockets:
    return NodeSockets(inputs=[], outputs=sockets(("output", "Value", LuauType.NIL)))


def _table_sockets(config: TableConfig, ctx: SocketContext) -> NodeSockets:
    return NodeSockets(inputs=sockets(("input", None, TABLE)), outputs=sockets(("output", None, TABLE)))


def _vector_sockets(config: VectorConfig, ctx: SocketContext) -> NodeSockets:
    return NodeSockets(
        inputs=sockets(("x-input", None, NUMBER), ("y-input", None, NUMBER), ("z-input", None, NUMBER)),
        outputs=sockets(("output", None, LuauType.VECTOR)),
    )


NODE_KINDS = {
    "Nil": NodeKind(kind="Nil", category=CATEGORY, display_name="Nil", description="Represents the absence of a value.", compute_sockets=_nil_sockets),
    "String": _value_kind("String", LuauType.STRING, "A text value, literal or computed.", StringConfig),
    "Number": _value_kind("Number", LuauType.NUMBER, "A numeric value, literal or computed.", NumberConfig),
    "Boolean": _value_kind("Boolean", LuauType.BOOLEAN, "A true/false value, literal or computed.", BooleanConfig),
    "Table": NodeKind(
        kind="Table",
        category=CATEGORY,
        display_name="Table",
        description="Represents a key-value dictionary.",
        config_model=TableConfig,
        compute_sockets=_table_sockets,
    ),
    "Vector": NodeKind(
        kind="Vector",
        category=CATEGORY,
        display_name="Vector",
        description="Represents a 3D vector (X, Y, Z).",
        config_model=VectorConfig,
        compute_sockets=_vector_sockets,
    ),
}
