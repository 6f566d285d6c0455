from typing import Any, Callable, Dict, List, Literal, Mapping, Optional, Tuple, Type

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from lvs.exceptions import ErrorCode
from lvs.luau_types import LuauType
from lvs.registry.classes import ScopeKind, Symbol

from .classes import Diagnostic, NodeSockets, NodeStatus, Severity, SocketContext

logger = structlog.get_logger()

_STATUS_RANK = {NodeStatus.OK: 0, NodeStatus.DEGRADED: 1, NodeStatus.INVALID: 2}


class NodeConfig(BaseModel):
    """Base for node configuration models. Editor data is camelCase; unknown keys are ignored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


Descriptor = Callable[[Any, SocketContext], NodeSockets]


def format_validation_error(err: ValidationError) -> str:
    return "; ".join(f"{'.'.join(str(p) for p in e['loc']) or 'config'}: {e['msg']}" for e in err.errors())


class NodeKind(BaseModel):
    """
    Everything the editor needs to know about one node kind. `compute_sockets`
    is a pure function of the parsed configuration and the descriptor context.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: str
    category: str
    display_name: str
    description: str = ""
    config_model: Type[NodeConfig] = NodeConfig
    compute_sockets: Descriptor
    scope_kind: Optional[ScopeKind] = None
    body_outputs: Tuple[str, ...] = ()
    declares: Optional[Literal["variable", "function"]] = None
    # Symbols the node puts inside its own scope (loop variables, parameters).
    scope_symbols: Optional[Callable[[Any], List[Symbol]]] = None
    # The symbol the node declares in the scope it sits in.
    declaration: Optional[Callable[[Any, SocketContext], Optional[Symbol]]] = None

    def is_body_output(self, socket_id: str) -> bool:
        """Body outputs ending in '*' match every socket id sharing the prefix."""
        for pattern in self.body_outputs:
            if pattern.endswith("*") and socket_id.startswith(pattern[:-1]):
                return True
            if pattern == socket_id:
                return True
        return False

    def symbols_in_scope(self, config: Optional[Mapping] = None) -> List[Symbol]:
        if self.scope_symbols is None:
            return []
        parsed, _ = self.parse_config(config)
        return self.scope_symbols(parsed)

    def declared_symbol(self, config: Optional[Mapping] = None, ctx: Optional[SocketContext] = None) -> Optional[Symbol]:
        if self.declaration is None:
            return None
        parsed, _ = self.parse_config(config)
        return self.declaration(parsed, ctx or SocketContext.empty())

    def parse_config(self, config: Optional[Mapping] = None) -> Tuple[NodeConfig, List[Diagnostic]]:
        """Parses raw configuration. Invalid input falls back to the model defaults."""
        if isinstance(config, self.config_model):
            return config, []
        try:
            return self.config_model.model_validate(dict(config or {})), []
        except (ValidationError, TypeError, ValueError) as e:
            details = format_validation_error(e) if isinstance(e, ValidationError) else str(e)
            logger.debug("node_config_invalid", kind=self.kind, details=details)
            return self.config_model(), [Diagnostic.from_code(ErrorCode.INVALID_CONFIGURATION, kind=self.kind, details=details)]

    def resolve(self, config: Optional[Mapping] = None, ctx: Optional[SocketContext] = None) -> NodeSockets:
        ctx = ctx or SocketContext.empty()
        parsed, diagnostics = self.parse_config(config)
        result = self.compute_sockets(parsed, ctx)

        inputs = [_refine(socket, ctx) for socket in result.inputs]
        diagnostics = diagnostics + list(result.diagnostics)

        status = result.status
        if any(d.severity is Severity.ERROR for d in diagnostics):
            status = _worst(status, NodeStatus.INVALID)
        return NodeSockets(inputs=inputs, outputs=list(result.outputs), status=status, diagnostics=diagnostics)


def _worst(a: NodeStatus, b: NodeStatus) -> NodeStatus:
    return a if _STATUS_RANK[a] >= _STATUS_RANK[b] else b


def _refine(socket, ctx: SocketContext):
    """Narrows a wildcard input to the connected source type, for display only."""
    if socket.type is not LuauType.ANY:
        return socket
    upstream = ctx.upstream_type(socket.id)
    if upstream is None or upstream in (LuauType.ANY, LuauType.FLOW):
        return socket
    return socket.model_copy(update={"refined_type": upstream})


class NodeKindRegistry:
    """Maps node-kind ids to their NodeKind records."""

    def __init__(self, kinds: Optional[Dict[str, NodeKind]] = None):
        self._kinds: Dict[str, NodeKind] = {}
        for node_kind in (kinds or {}).values():
            self.register(node_kind)

    def register(self, node_kind: NodeKind, replace: bool = False) -> NodeKind:
        if node_kind.kind in self._kinds and not replace:
            raise ValueError(f"Node kind '{node_kind.kind}' is already registered.")
        self._kinds[node_kind.kind] = node_kind
        return node_kind

    def get(self, kind: str) -> Optional[NodeKind]:
        return self._kinds.get(kind)

    def kinds(self) -> List[str]:
        return list(self._kinds)

    def categories(self) -> Dict[str, List[str]]:
        grouped: Dict[str, List[str]] = {}
        for node_kind in self._kinds.values():
            grouped.setdefault(node_kind.category, []).append(node_kind.kind)
        return grouped

    def compute_sockets(self, kind: str, config: Optional[Mapping] = None, ctx: Optional[SocketContext] = None) -> NodeSockets:
        node_kind = self._kinds.get(kind)
        if node_kind is None:
            return NodeSockets(status=NodeStatus.INVALID, diagnostics=[Diagnostic.from_code(ErrorCode.UNKNOWN_NODE_KIND, kind=kind)])
        return node_kind.resolve(config, ctx)

    def __contains__(self, kind: str) -> bool:
        return kind in self._kinds

    def __len__(self) -> int:
        return len(self._kinds)


def default_registry() -> NodeKindRegistry:
    """A fresh registry holding every node kind shipped with the editor."""
    from lvs.nodes import NODE_KINDS

    return NodeKindRegistry(NODE_KINDS)
