"""
Replays a saved graph against an intellisense registry: scopes are mounted for
every scope-owning node, declarations are synced, and every node's sockets are
resolved in the scope it sits in.

Scope membership follows the editor's flow wiring. Everything reachable from an
owner's body outputs belongs to the owner's scope, except the bodies of nested
owners. Pure data nodes take the scope of the node they feed. Anything else
lives in the document's global scope.
"""

from collections import deque
from typing import Dict, List, Optional, Tuple

import structlog

from lvs.autocomplete import Predicate, suggest
from lvs.exceptions import ErrorCode, LvsError
from lvs.luau_types import LuauType, is_flow
from lvs.registry.classes import FunctionDefinition, Symbol, Variable
from lvs.registry.intellisense import FUNCTIONS, VARIABLES, IntellisenseRegistry
from lvs.registry.lifecycle import FunctionDeclaration, ScopeMount, VariableDeclaration, mount_scope, scope_id_for
from lvs.sockets.classes import NodeSockets, SocketContext
from lvs.sockets.compatibility import check_socket_connection
from lvs.sockets.node_kinds import NodeKindRegistry, default_registry

from .classes import EdgeIssue, Graph, GraphEdge, GraphNode, GraphReport, NodeReport

logger = structlog.get_logger()

DEFAULT_DOCUMENT = "graph"


def _default_handle(handle: Optional[str], available: List) -> Optional[str]:
    """An edge without a handle id attaches to the node's only socket."""
    if handle is None and len(available) == 1:
        return available[0].id
    return handle


class GraphAnalyzer:
    def __init__(
        self,
        graph: Graph,
        document: str = DEFAULT_DOCUMENT,
        registry: Optional[IntellisenseRegistry] = None,
        node_kinds: Optional[NodeKindRegistry] = None,
    ):
        self.graph = graph
        self.document = document
        self.registry = registry or IntellisenseRegistry()
        self.node_kinds = node_kinds or default_registry()

        self.scope_of: Dict[str, Optional[str]] = {}
        self.mounts: Dict[str, ScopeMount] = {}
        self.declarations: Dict[str, object] = {}
        self.sockets: Dict[str, NodeSockets] = {}
        self._analyzed = False

    # --- Scope Assignment ---

    def _owners(self) -> List[GraphNode]:
        owners = []
        for node in self.graph.nodes:
            kind = self.node_kinds.get(node.type)
            if kind is not None and kind.scope_kind is not None:
                owners.append(node)
        return owners

    def _body_reach(self, owner: GraphNode) -> List[str]:
        """Node ids reachable from the owner's body outputs, stopping at nested bodies."""
        kind = self.node_kinds.get(owner.type)
        queue = deque(e.target for e in self.graph.outgoing(owner.id) if e.source_handle and kind.is_body_output(e.source_handle))
        seen = {owner.id}
        reached = []
        while queue:
            node_id = queue.popleft()
            if node_id in seen:
                continue
            seen.add(node_id)
            node = self.graph.node(node_id)
            if node is None:
                continue
            reached.append(node_id)

            node_kind = self.node_kinds.get(node.type)
            for edge in self.graph.outgoing(node_id):
                if node_kind is not None and edge.source_handle and node_kind.is_body_output(edge.source_handle):
                    continue
                queue.append(edge.target)
        return reached

    def _assign_scopes(self) -> List[GraphNode]:
        """Fills `scope_of` and returns the owners ordered parents first."""
        owners = self._owners()
        owner_scope: Dict[str, str] = {}
        for owner in owners:
            kind = self.node_kinds.get(owner.type)
            owner_scope[owner.id] = scope_id_for(owner.id, kind.scope_kind)

        for owner in owners:
            for node_id in self._body_reach(owner):
                self.scope_of.setdefault(node_id, owner_scope[owner.id])

        self._inherit_data_scopes()

        def depth(owner_id: str) -> int:
            seen, d = set(), 0
            scope_id = self.scope_of.get(owner_id)
            while scope_id is not None:
                parent_owner = next((o for o, s in owner_scope.items() if s == scope_id), None)
                if parent_owner is None or parent_owner in seen:
                    break
                seen.add(parent_owner)
                scope_id = self.scope_of.get(parent_owner)
                d += 1
            return d

        return sorted(owners, key=lambda o: depth(o.id))

    def _is_pure(self, node: GraphNode) -> bool:
        """A node without flow sockets only computes a value for whoever consumes it."""
        if self.node_kinds.get(node.type) is None:
            return False
        shape = self.node_kinds.compute_sockets(node.type, node.data)
        return not any(is_flow(s.type) for s in shape.inputs + shape.outputs)

    def _inherit_data_scopes(self):
        pure = [node for node in self.graph.nodes if self._is_pure(node)]
        changed = True
        while changed:
            changed = False
            for node in pure:
                if node.id in self.scope_of:
                    continue
                for edge in self.graph.outgoing(node.id):
                    target_scope = self.scope_of.get(edge.target)
                    if target_scope is not None:
                        self.scope_of[node.id] = target_scope
                        changed = True
                        break

    def _mount_scopes(self, owners: List[GraphNode]):
        for owner in owners:
            kind = self.node_kinds.get(owner.type)
            parent_scope_id = self.scope_of.get(owner.id)
            if parent_scope_id is not None and not self.registry.scopes.has_scope(self.document, parent_scope_id):
                # The enclosing owner's scope could not be mounted; fall back to global.
                parent_scope_id = None
                self.scope_of[owner.id] = None
            mount = mount_scope(
                self.registry,
                self.document,
                owner.id,
                kind.scope_kind,
                parent_scope_id=parent_scope_id,
                initial_symbols=kind.symbols_in_scope(owner.data),
                enter=False,
            )
            self.mounts[owner.id] = mount

    # --- Declarations ---

    def _declare(self, namespace: str, upstream: Dict[str, Dict[str, LuauType]]):
        for node in self.graph.nodes:
            kind = self.node_kinds.get(node.type)
            if kind is None or kind.declaration is None:
                continue
            if (kind.declares == "function") != (namespace == FUNCTIONS):
                continue

            scope_id = self.scope_of.get(node.id)
            symbol = kind.declared_symbol(node.data, self._context(node.id, upstream.get(node.id)))
            binding = self.declarations.get(node.id)
            if binding is None:
                binding_cls = FunctionDeclaration if namespace == FUNCTIONS else VariableDeclaration
                binding = binding_cls(self.registry, self.document, scope_id)
                self.declarations[node.id] = binding

            if symbol is None:
                binding.sync(None)
            elif isinstance(symbol, FunctionDefinition):
                binding.sync(symbol.name, parameters=symbol.parameters, return_type=symbol.return_type, node_id=node.id)
            else:
                binding.sync(symbol.name, type=symbol.type)

    # --- Socket Resolution ---

    def _context(self, node_id: str, upstream_types: Optional[Dict[str, LuauType]] = None) -> SocketContext:
        return SocketContext.for_registry(self.registry, self.document, self.scope_of.get(node_id), upstream_types)

    def _resolve_all(self, upstream: Optional[Dict[str, Dict[str, LuauType]]] = None) -> Dict[str, NodeSockets]:
        upstream = upstream or {}
        return {
            node.id: self.node_kinds.compute_sockets(node.type, node.data, self._context(node.id, upstream.get(node.id)))
            for node in self.graph.nodes
        }

    def _upstream_types(self, resolved: Dict[str, NodeSockets]) -> Dict[str, Dict[str, LuauType]]:
        upstream: Dict[str, Dict[str, LuauType]] = {}
        for edge in self.graph.edges:
            source = resolved.get(edge.source)
            source_type = None
            if source is not None:
                out_socket = source.output(_default_handle(edge.source_handle, source.outputs) or "")
                source_type = out_socket.type if out_socket is not None else None
            source_type = source_type or edge.source_type
            target = resolved.get(edge.target)
            if source_type is None or target is None:
                continue
            target_handle = _default_handle(edge.target_handle, target.inputs)
            if target_handle:
                upstream.setdefault(edge.target, {})[target_handle] = source_type
        return upstream

    # --- Edges ---

    def _check_edge(self, edge: GraphEdge) -> Optional[EdgeIssue]:
        for endpoint in (edge.source, edge.target):
            if endpoint not in self.sockets:
                message = ErrorCode.UNKNOWN_EDGE_ENDPOINT.value.format(edge=edge.id, node=endpoint)
                return EdgeIssue(edge_id=edge.id, source=edge.source, target=edge.target, reason=ErrorCode.UNKNOWN_EDGE_ENDPOINT.name, message=message)

        source, target = self.sockets[edge.source], self.sockets[edge.target]
        check = check_socket_connection(
            source,
            _default_handle(edge.source_handle, source.outputs) or "",
            target,
            _default_handle(edge.target_handle, target.inputs) or "",
            edge.source,
            edge.target,
        )
        if check.allowed:
            return None
        return EdgeIssue(edge_id=edge.id, source=edge.source, target=edge.target, reason=check.reason, message=check.message)

    # --- Public API ---

    def analyze(self) -> GraphReport:
        if self._analyzed:
            self.close()

        owners = self._assign_scopes()
        self._mount_scopes(owners)

        self._declare(FUNCTIONS, {})
        self._declare(VARIABLES, self._upstream_types(self._resolve_all()))

        self.sockets = self._resolve_all(self._upstream_types(self._resolve_all()))
        self._analyzed = True

        issues = [issue for issue in (self._check_edge(e) for e in self.graph.edges) if issue is not None]
        report = GraphReport(
            document=self.document,
            nodes=[
                NodeReport(node_id=node.id, kind=node.type, scope_id=self.scope_of.get(node.id), sockets=self.sockets[node.id])
                for node in self.graph.nodes
            ],
            invalid_edges=issues,
            scopes=[scope.model_copy(deep=True) for scope in self.registry.list_scopes(self.document)],
        )
        logger.debug("graph_analyzed", document=self.document, nodes=len(report.nodes), invalid_edges=len(issues), scopes=len(report.scopes))
        return report

    def _require_node(self, node_id: str) -> GraphNode:
        node = self.graph.node(node_id)
        if node is None:
            raise LvsError(ErrorCode.GRAPH_NODE_NOT_FOUND, node=node_id)
        if not self._analyzed:
            self.analyze()
        return node

    def visible_symbols(self, node_id: str) -> Tuple[List[Variable], List[FunctionDefinition]]:
        """Variables and functions visible from the scope `node_id` sits in."""
        self._require_node(node_id)
        scope_id = self.scope_of.get(node_id)
        return (
            self.registry.visible_variables(self.document, scope_id),
            self.registry.visible_functions(self.document, scope_id),
        )

    def complete(self, node_id: str, partial: str, predicate: Optional[Predicate] = None, namespace: str = VARIABLES) -> List[Symbol]:
        self._require_node(node_id)
        return suggest(self.registry, self.document, self.scope_of.get(node_id), partial, predicate, namespace)

    def close(self) -> None:
        """Releases every declaration and scope this analysis mounted."""
        for binding in self.declarations.values():
            binding.release()
        self.declarations.clear()
        for mount in reversed(list(self.mounts.values())):
            mount.unmount()
        self.mounts.clear()
        self.scope_of.clear()
        self.sockets = {}
        self._analyzed = False

    def __enter__(self) -> "GraphAnalyzer":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False


def analyze_graph(graph: Graph, document: str = DEFAULT_DOCUMENT, registry: Optional[IntellisenseRegistry] = None) -> GraphReport:
    return GraphAnalyzer(graph, document, registry).analyze()
