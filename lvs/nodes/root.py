from lvs.sockets.classes import NodeSockets, SocketContext
from lvs.sockets.node_kinds import NodeConfig, NodeKind

from .helpers import ANY, FLOW, socket

CATEGORY = "Root"


def _start_sockets(config: NodeConfig, ctx: SocketContext) -> NodeSockets:
    return NodeSockets(inputs=[], outputs=[socket("output", None, FLOW)])


def _end_sockets(config: NodeConfig, ctx: SocketContext) -> NodeSockets:
    return NodeSockets(inputs=[socket("input", None, ANY)], outputs=[])


NODE_KINDS = {
    "Start": NodeKind(kind="Start", category=CATEGORY, display_name="Start", description="Starting point.", compute_sockets=_start_sockets),
    "End": NodeKind(kind="End", category=CATEGORY, display_name="End", description="Ending point.", compute_sockets=_end_sockets),
}
