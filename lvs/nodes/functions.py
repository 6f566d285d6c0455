"""
FunctionDefinition declares a function (and scopes its parameters); FunctionCall
takes its sockets from whatever that declaration currently says.
"""

from typing import List, Optional

from pydantic import BaseModel, field_validator

from lvs.exceptions import ErrorCode
from lvs.luau_types import LuauType, parse_type
from lvs.registry.classes import FunctionDefinition, FunctionParameter, ScopeKind, Variable
from lvs.sockets.classes import Diagnostic, NodeSockets, NodeStatus, Severity, SocketContext, sockets
from lvs.sockets.node_kinds import NodeConfig, NodeKind

from .helpers import ANY, FLOW, identifier_diagnostics, is_valid_name, socket

CATEGORY = "Functions"


class ParameterConfig(BaseModel):
    name: str
    type: LuauType = LuauType.ANY

    @field_validator("type", mode="before")
    @classmethod
    def _lenient_type(cls, value):
        return parse_type(value)


class FunctionDefinitionConfig(NodeConfig):
    function_name: str = ""
    parameters: List[ParameterConfig] = []
    return_type: LuauType = LuauType.NIL

    @field_validator("return_type", mode="before")
    @classmethod
    def _lenient_return_type(cls, value):
        return parse_type(value) if value is not None else LuauType.NIL

    @property
    def name(self) -> str:
        return self.function_name.strip()


def _definition_sockets(config: FunctionDefinitionConfig, ctx: SocketContext) -> NodeSockets:
    diagnostics: List[Diagnostic] = []
    if config.name:
        diagnostics += identifier_diagnostics(config.name)

    seen = set()
    for i, param in enumerate(config.parameters):
        diagnostics += identifier_diagnostics(param.name)
        if param.name in seen:
            diagnostics.append(
                Diagnostic.from_code(ErrorCode.INVALID_CONFIGURATION, kind="FunctionDefinition", details=f"parameter {i + 1} repeats the name '{param.name}'.")
            )
        seen.add(param.name)

    return NodeSockets(
        inputs=sockets(("prev", "Prev", FLOW)),
        outputs=sockets(("body", "Body", FLOW), ("next", "Next", FLOW)),
        diagnostics=diagnostics,
    )


def _definition_parameters(config: FunctionDefinitionConfig) -> List[Variable]:
    return [Variable(name=p.name, type=p.type, description="Parameter") for p in config.parameters if is_valid_name(p.name)]


def _definition_symbol(config: FunctionDefinitionConfig, ctx: SocketContext) -> Optional[FunctionDefinition]:
    if not is_valid_name(config.name):
        return None
    return FunctionDefinition(
        name=config.name,
        parameters=[FunctionParameter(name=p.name, type=p.type) for p in config.parameters],
        return_type=config.return_type,
    )


class FunctionCallConfig(NodeConfig):
    function_name: Optional[str] = None


def _call_sockets(config: FunctionCallConfig, ctx: SocketContext) -> NodeSockets:
    name = (config.function_name or "").strip()
    callee = ctx.function_lookup(name) if name else None

    if callee is None:
        diagnostics = []
        status = NodeStatus.OK
        if name:
            # Dangling until the node is pointed at another function.
            status = NodeStatus.DEGRADED
            diagnostics.append(Diagnostic.from_code(ErrorCode.FUNCTION_NOT_FOUND, Severity.WARNING, name=name))
        return NodeSockets(
            inputs=sockets(("prev", "Prev", FLOW)),
            outputs=sockets(("next", "Next", FLOW), ("result", "Result", ANY)),
            status=status,
            diagnostics=diagnostics,
        )

    inputs = [socket("prev", "Prev", FLOW)]
    inputs += [socket(f"param-{i}", param.name, param.type) for i, param in enumerate(callee.parameters)]
    return NodeSockets(inputs=inputs, outputs=sockets(("next", "Next", FLOW), ("result", "Result", callee.return_type)))


NODE_KINDS = {
    "FunctionDefinition": NodeKind(
        kind="FunctionDefinition",
        category=CATEGORY,
        display_name="Function Definition",
        description="Declares a named function with typed parameters and a return type.",
        config_model=FunctionDefinitionConfig,
        compute_sockets=_definition_sockets,
        scope_kind=ScopeKind.FUNCTION,
        body_outputs=("body",),
        declares="function",
        scope_symbols=_definition_parameters,
        declaration=_definition_symbol,
    ),
    "FunctionCall": NodeKind(
        kind="FunctionCall",
        category=CATEGORY,
        display_name="Function Call",
        description="Calls a declared function; sockets follow its signature.",
        config_model=FunctionCallConfig,
        compute_sockets=_call_sockets,
    ),
}
