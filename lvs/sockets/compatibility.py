from typing import Mapping, Optional

from pydantic import BaseModel

from lvs.exceptions import ErrorCode
from lvs.luau_types import LuauType, can_connect

from .classes import NodeSockets, SocketContext
from .node_kinds import NodeKindRegistry, default_registry


class ConnectionCheck(BaseModel):
    allowed: bool
    reason: Optional[str] = None
    message: Optional[str] = None
    source_type: Optional[LuauType] = None
    target_type: Optional[LuauType] = None


def _rejected(code: ErrorCode, source_type=None, target_type=None, **kwargs) -> ConnectionCheck:
    return ConnectionCheck(
        allowed=False,
        reason=code.name,
        message=code.value.format(source_type=source_type, target_type=target_type, **kwargs),
        source_type=source_type,
        target_type=target_type,
    )


def check_socket_connection(
    source: NodeSockets,
    source_handle: str,
    target: NodeSockets,
    target_handle: str,
    source_node: str = "source",
    target_node: str = "target",
) -> ConnectionCheck:
    """Checks an edge between two already resolved nodes. Only formal socket types are compared."""
    out_socket = source.output(source_handle)
    if out_socket is None:
        return _rejected(ErrorCode.UNKNOWN_SOURCE_SOCKET, node=source_node, handle=source_handle)

    in_socket = target.input(target_handle)
    if in_socket is None:
        return _rejected(ErrorCode.UNKNOWN_TARGET_SOCKET, source_type=out_socket.type, node=target_node, handle=target_handle)

    if not can_connect(out_socket.type, in_socket.type):
        return _rejected(
            ErrorCode.TYPE_MISMATCH,
            source_type=out_socket.type,
            target_type=in_socket.type,
        )

    return ConnectionCheck(allowed=True, source_type=out_socket.type, target_type=in_socket.type)


def check_connection(
    source_kind: str,
    source_config: Optional[Mapping],
    source_handle: str,
    target_kind: str,
    target_config: Optional[Mapping],
    target_handle: str,
    source_ctx: Optional[SocketContext] = None,
    target_ctx: Optional[SocketContext] = None,
    registry: Optional[NodeKindRegistry] = None,
) -> ConnectionCheck:
    """Resolves both nodes' sockets for their current configuration and checks the edge between them."""
    registry = registry or default_registry()
    source = registry.compute_sockets(source_kind, source_config, source_ctx)
    target = registry.compute_sockets(target_kind, target_config, target_ctx)
    return check_socket_connection(source, source_handle, target, target_handle, source_kind, target_kind)
