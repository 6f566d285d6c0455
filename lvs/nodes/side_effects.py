from typing import Optional

from lvs.sockets.classes import NodeSockets, SocketContext, sockets
from lvs.sockets.node_kinds import NodeConfig, NodeKind

from .helpers import ANY, FLOW

CATEGORY = "Side Effects"


class PrintConfig(NodeConfig):
    value: Optional[str] = None


def _print_sockets(config: PrintConfig, ctx: SocketContext) -> NodeSockets:
    return NodeSockets(inputs=sockets(("prev", "Prev", FLOW), ("value", "Value", ANY)), outputs=sockets(("next", "Next", FLOW)))


NODE_KINDS = {
    "Print": NodeKind(
        kind="Print",
        category=CATEGORY,
        display_name="Print",
        description="Writes a value to the output console.",
        config_model=PrintConfig,
        compute_sockets=_print_sockets,
    ),
}
