"""
Building blocks shared by the node-kind modules: socket shorthands, the
"linear"/"expression" mode switch and expression checking against the
descriptor context.
"""

from typing import List, Literal, Optional

from lvs.config.config import DEFAULT_NODE_MODES, RESERVED_KEYWORDS, VALID_IDENTIFIER_REGEX
from lvs.exceptions import ErrorCode
from lvs.expressions.parser import check_expression
from lvs.luau_types import LuauType
from lvs.sockets.classes import Diagnostic, NodeSockets, Socket, SocketContext, sockets
from lvs.sockets.node_kinds import NodeConfig, NodeKind

FLOW = LuauType.FLOW
ANY = LuauType.ANY
NUMBER = LuauType.NUMBER
STRING = LuauType.STRING
BOOLEAN = LuauType.BOOLEAN
TABLE = LuauType.TABLE


def socket(socket_id: str, label: Optional[str], type_tag: LuauType) -> Socket:
    return Socket(id=socket_id, label=label, type=type_tag)


def is_valid_name(name: str) -> bool:
    return bool(VALID_IDENTIFIER_REGEX.match(name)) and name not in RESERVED_KEYWORDS


def identifier_diagnostics(name: str, socket_id: Optional[str] = None) -> List[Diagnostic]:
    if name in RESERVED_KEYWORDS:
        return [Diagnostic.from_code(ErrorCode.RESERVED_KEYWORD_AS_IDENTIFIER, socket_id=socket_id, name=name)]
    if not VALID_IDENTIFIER_REGEX.match(name):
        return [Diagnostic.from_code(ErrorCode.INVALID_IDENTIFIER, socket_id=socket_id, name=name)]
    return []


def expression_diagnostics(expression: Optional[str], ctx: SocketContext, field: str = "expression", socket_id: Optional[str] = None) -> List[Diagnostic]:
    """
    Checks an expression typed into a node. Free names are only checked when
    the context is bound to a document, since an unbound context knows no names.
    """
    visible_names = ctx.visible_names if ctx.document is not None else None
    return check_expression(expression, field=field, visible_names=visible_names, socket_id=socket_id)


class ModeSwitchConfig(NodeConfig):
    """Configuration of nodes whose typed inputs can be replaced by an inline expression."""

    mode: Literal["linear", "expression"] = DEFAULT_NODE_MODES["Add"]
    expression: Optional[str] = None

    @property
    def uses_expression(self) -> bool:
        return self.mode == "expression"


def operator_kind(
    kind: str,
    category: str,
    display_name: str,
    description: str,
    operand_type: LuauType,
    result_type: LuauType,
    arity: int = 2,
) -> NodeKind:
    """
    Node kind for an operator with wired operands ("a", "b") in linear mode and
    no inputs at all in expression mode. The result socket never changes.
    """
    operand_specs = [("a", "A", operand_type), ("b", "B", operand_type)][:arity]

    def compute_sockets(config: ModeSwitchConfig, ctx: SocketContext) -> NodeSockets:
        if config.uses_expression:
            return NodeSockets(
                inputs=[],
                outputs=sockets(("result", "Result", result_type)),
                diagnostics=expression_diagnostics(config.expression, ctx),
            )
        return NodeSockets(inputs=sockets(*operand_specs), outputs=sockets(("result", "Result", result_type)))

    return NodeKind(
        kind=kind,
        category=category,
        display_name=display_name,
        description=description,
        config_model=ModeSwitchConfig,
        compute_sockets=compute_sockets,
    )
