from typing import Dict, List, Optional, Tuple

from lvs.graph.classes import Graph, GraphEdge, GraphNode
from lvs.luau_types import LuauType
from lvs.registry.classes import FunctionDefinition, FunctionParameter, Scope, ScopeKind, Variable
from lvs.registry.intellisense import IntellisenseRegistry

DOC = "script-1"


def get_registry() -> IntellisenseRegistry:
    return IntellisenseRegistry()


def get_variable(name: str, type: LuauType = LuauType.ANY, scope_id: Optional[str] = None, **fields) -> Variable:
    return Variable(name=name, type=type, scope_id=scope_id, **fields)


def get_function(
    name: str,
    params: List[Tuple[str, LuauType]] = (),
    return_type: LuauType = LuauType.NIL,
    scope_id: Optional[str] = None,
) -> FunctionDefinition:
    parameters = [FunctionParameter(name=p_name, type=p_type) for p_name, p_type in params]
    return FunctionDefinition(name=name, parameters=parameters, return_type=return_type, scope_id=scope_id)


def get_scope(scope_id: str, scope_type: ScopeKind = ScopeKind.BLOCK, parent: Optional[str] = None, owner: Optional[str] = None) -> Scope:
    return Scope(id=scope_id, scope_type=scope_type, parent_scope_id=parent, owner_node_id=owner)


def names(symbols) -> List[str]:
    return [s.name for s in symbols]


def socket_summary(socket_list) -> List[Tuple[str, str]]:
    return [(s.id, str(s.type)) for s in socket_list]


# --- Graph helpers ---


def get_node(node_id: str, kind: str, **data) -> GraphNode:
    return GraphNode(id=node_id, type=kind, data=data)


def get_edge(source: str, source_handle: Optional[str], target: str, target_handle: Optional[str], edge_id: Optional[str] = None) -> GraphEdge:
    edge_id = edge_id or f"{source}:{source_handle}->{target}:{target_handle}"
    return GraphEdge(id=edge_id, source=source, target=target, source_handle=source_handle, target_handle=target_handle)


def get_graph(nodes: List[GraphNode], edges: List[GraphEdge] = ()) -> Graph:
    return Graph(nodes=list(nodes), edges=list(edges))


def graph_payload(nodes: List[Dict], edges: List[Dict] = ()) -> Dict:
    """A graph the way the editor saves it: camelCase keys and React-Flow extras."""
    return {"nodes": list(nodes), "edges": list(edges), "viewport": {"x": 0, "y": 0, "zoom": 1}}
