from .classes import Diagnostic, NodeSockets, NodeStatus, Severity, Socket, SocketContext
from .compatibility import ConnectionCheck, check_connection, check_socket_connection
from .node_kinds import NodeConfig, NodeKind, NodeKindRegistry, default_registry
