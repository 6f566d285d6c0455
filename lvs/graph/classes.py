"""
Defines the saved editor graph: React-Flow style nodes and edges, with the
editor's camelCase keys accepted as aliases.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lvs.luau_types import LuauType, parse_type
from lvs.registry.classes import Scope
from lvs.sockets.classes import NodeSockets


class GraphModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class GraphNode(GraphModel):
    id: str
    type: str
    # The node's configuration, as the editor stores it.
    data: Dict[str, Any] = Field(default_factory=dict)


class GraphEdge(GraphModel):
    id: str
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)

    @property
    def source_type(self) -> Optional[LuauType]:
        """The type the editor recorded for the edge when it was drawn, if any."""
        raw = self.data.get("sourceType")
        return parse_type(raw) if raw else None


class Graph(GraphModel):
    nodes: List[GraphNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)

    def node(self, node_id: str) -> Optional[GraphNode]:
        return next((n for n in self.nodes if n.id == node_id), None)

    def outgoing(self, node_id: str) -> List[GraphEdge]:
        return [e for e in self.edges if e.source == node_id]


# --- Analysis Results ---


class NodeReport(BaseModel):
    node_id: str
    kind: str
    scope_id: Optional[str] = None
    sockets: NodeSockets


class EdgeIssue(BaseModel):
    edge_id: str
    source: str
    target: str
    reason: str
    message: str


class GraphReport(BaseModel):
    document: str
    nodes: List[NodeReport] = Field(default_factory=list)
    invalid_edges: List[EdgeIssue] = Field(default_factory=list)
    scopes: List[Scope] = Field(default_factory=list)

    def node(self, node_id: str) -> Optional[NodeReport]:
        return next((n for n in self.nodes if n.node_id == node_id), None)

    def with_status(self, status) -> List[NodeReport]:
        return [n for n in self.nodes if n.sockets.status == status]
