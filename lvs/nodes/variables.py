from typing import Optional

from lvs.exceptions import ErrorCode
from lvs.registry.classes import Variable
from lvs.sockets.classes import Diagnostic, NodeSockets, Severity, SocketContext, sockets
from lvs.sockets.node_kinds import NodeConfig, NodeKind

from .helpers import ANY, FLOW, identifier_diagnostics, is_valid_name

CATEGORY = "Variables"


class VariableConfig(NodeConfig):
    variable_name: Optional[str] = None

    @property
    def name(self) -> str:
        return (self.variable_name or "").strip()


def _get_sockets(config: VariableConfig, ctx: SocketContext) -> NodeSockets:
    variable = ctx.variable_lookup(config.name) if config.name else None
    diagnostics = []
    if config.name and variable is None and ctx.document is not None:
        diagnostics.append(Diagnostic.from_code(ErrorCode.VARIABLE_NOT_FOUND, Severity.WARNING, name=config.name))
    value_type = variable.type if variable is not None else ANY
    return NodeSockets(inputs=[], outputs=sockets(("value", "Value", value_type)), diagnostics=diagnostics)


def _set_sockets(config: VariableConfig, ctx: SocketContext) -> NodeSockets:
    diagnostics = identifier_diagnostics(config.name) if config.name else []
    return NodeSockets(
        inputs=sockets(("prev", "Prev", FLOW), ("value", "Value", ANY)),
        outputs=sockets(("next", "Next", FLOW)),
        diagnostics=diagnostics,
    )


def _set_symbol(config: VariableConfig, ctx: SocketContext) -> Optional[Variable]:
    """The variable takes the type of whatever feeds its value socket."""
    if not is_valid_name(config.name):
        return None
    return Variable(name=config.name, type=ctx.upstream_type("value") or ANY)


NODE_KINDS = {
    "VariableGet": NodeKind(
        kind="VariableGet",
        category=CATEGORY,
        display_name="Get Variable",
        description="Reads a variable visible from this node.",
        config_model=VariableConfig,
        compute_sockets=_get_sockets,
    ),
    "VariableSet": NodeKind(
        kind="VariableSet",
        category=CATEGORY,
        display_name="Set Variable",
        description="Declares or assigns a variable in the enclosing scope.",
        config_model=VariableConfig,
        compute_sockets=_set_sockets,
        declares="variable",
        declaration=_set_symbol,
    ),
}
