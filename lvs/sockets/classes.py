"""
Defines the socket contracts every node kind produces, and the read-only
context a socket descriptor may consult while computing them.
"""

from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from lvs.exceptions import ErrorCode, LvsError
from lvs.luau_types import LuauType
from lvs.registry.classes import FunctionDefinition, Variable


class NodeStatus(str, Enum):
    OK = "ok"
    # A referenced symbol no longer exists.
    DEGRADED = "degraded"
    INVALID = "invalid"

    def __str__(self) -> str:
        return self.value


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    def __str__(self) -> str:
        return self.value


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    code: str
    severity: Severity = Severity.ERROR
    message: str
    socket_id: Optional[str] = None

    @classmethod
    def from_code(cls, code: ErrorCode, severity: Severity = Severity.ERROR, socket_id: Optional[str] = None, **kwargs) -> "Diagnostic":
        return cls(code=code.name, severity=severity, message=code.value.format(**kwargs), socket_id=socket_id)

    @classmethod
    def from_error(cls, error: LvsError, severity: Severity = Severity.ERROR, socket_id: Optional[str] = None) -> "Diagnostic":
        return cls(code=error.code.name, severity=severity, message=error.message, socket_id=socket_id)


class Socket(BaseModel):
    """A typed connection point. `refined_type` is display-only and never used for compatibility."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: Optional[str] = None
    type: LuauType
    refined_type: Optional[LuauType] = None

    @property
    def display_type(self) -> LuauType:
        return self.refined_type or self.type

    @property
    def display_label(self) -> str:
        return self.label or self.id


class NodeSockets(BaseModel):
    inputs: List[Socket] = Field(default_factory=list)
    outputs: List[Socket] = Field(default_factory=list)
    status: NodeStatus = NodeStatus.OK
    diagnostics: List[Diagnostic] = Field(default_factory=list)

    def input(self, socket_id: str) -> Optional[Socket]:
        return next((s for s in self.inputs if s.id == socket_id), None)

    def output(self, socket_id: str) -> Optional[Socket]:
        return next((s for s in self.outputs if s.id == socket_id), None)


def sockets(*specs) -> List[Socket]:
    """Shorthand: sockets(("prev", "Prev", LuauType.FLOW), ...)."""
    return [Socket(id=socket_id, label=label, type=type_tag) for socket_id, label, type_tag in specs]


# --- Descriptor Context ---


def _resolve_nothing(_name: str):
    return None


class SocketContext:
    """
    The read-only view of the registry a socket descriptor may consult.
    Descriptors never write through it.
    """

    def __init__(
        self,
        function_lookup: Callable[[str], Optional[FunctionDefinition]] = _resolve_nothing,
        variable_lookup: Callable[[str], Optional[Variable]] = _resolve_nothing,
        visible_names: FrozenSet[str] = frozenset(),
        upstream_types: Optional[Dict[str, LuauType]] = None,
        document: Optional[str] = None,
        scope_id: Optional[str] = None,
    ):
        self.function_lookup = function_lookup
        self.variable_lookup = variable_lookup
        self.visible_names = frozenset(visible_names)
        self.upstream_types = dict(upstream_types or {})
        self.document = document
        self.scope_id = scope_id

    @classmethod
    def empty(cls) -> "SocketContext":
        return cls()

    @classmethod
    def for_registry(cls, registry, document: str, scope_id: Optional[str] = None, upstream_types: Optional[Dict[str, LuauType]] = None) -> "SocketContext":
        """Binds lookups to what is visible from `scope_id` in `document`."""
        visible = {v.name for v in registry.visible_variables(document, scope_id)}
        visible |= {f.name for f in registry.visible_functions(document, scope_id)}
        return cls(
            function_lookup=lambda name: registry.resolve_function(document, name, scope_id),
            variable_lookup=lambda name: registry.resolve_variable(document, name, scope_id),
            visible_names=frozenset(visible),
            upstream_types=upstream_types,
            document=document,
            scope_id=scope_id,
        )

    def upstream_type(self, socket_id: str) -> Optional[LuauType]:
        return self.upstream_types.get(socket_id)
