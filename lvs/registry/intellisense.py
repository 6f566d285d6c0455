from typing import Callable, List, Optional

import structlog

from .classes import FunctionDefinition, Scope, ScopeKind, Symbol, Variable
from .events import EventBus, EventKind, Listener, RegistryEvent
from .scope_tree import ScopeTree
from .symbol_table import ScopedSymbolTable
from .visibility import resolve_name, resolve_visible

logger = structlog.get_logger()

VARIABLES = "variables"
FUNCTIONS = "functions"


class IntellisenseRegistry:
    """
    The scoped symbol registry backing one editor session.

    It composes two symbol namespaces (variables and functions), the scope tree
    with its active-scope stack, and an event bus. Every document id addresses an
    isolated partition of all three. One instance is constructed per session and
    handed to its consumers explicitly.

    No method raises for a domain condition: misses come back as None or an empty
    list, and rejected writes are logged and reported as None.
    """

    def __init__(self):
        self.variables: ScopedSymbolTable[Variable] = ScopedSymbolTable(VARIABLES)
        self.functions: ScopedSymbolTable[FunctionDefinition] = ScopedSymbolTable(FUNCTIONS)
        self.scopes = ScopeTree()
        self.events = EventBus()

    def subscribe(self, listener: Listener, document: Optional[str] = None) -> Callable[[], None]:
        return self.events.subscribe(listener, document)

    def document(self, document: str) -> "DocumentIntellisense":
        return DocumentIntellisense(self, document)

    def _publish(self, document: str, kind: EventKind, name: Optional[str] = None, scope_id: Optional[str] = None):
        self.events.publish(RegistryEvent(document=document, kind=kind, name=name, scope_id=scope_id))

    def _table(self, namespace: str) -> ScopedSymbolTable:
        return self.functions if namespace == FUNCTIONS else self.variables

    def _event_kind(self, namespace: str) -> EventKind:
        return EventKind.FUNCTIONS_CHANGED if namespace == FUNCTIONS else EventKind.VARIABLES_CHANGED

    # --- Shared symbol plumbing ---

    def _declare(self, namespace: str, document: str, symbol: Symbol):
        if not symbol.name or not symbol.name.strip():
            return None

        if symbol.scope_id is not None and not self.scopes.has_scope(document, symbol.scope_id):
            logger.warning("declare_into_missing_scope", namespace=namespace, document=document, name=symbol.name, scope_id=symbol.scope_id)
            return None

        scope_type = self.scopes.scope_kind(document, symbol.scope_id)
        stored = self._table(namespace).declare(document, symbol.model_copy(update={"scope_type": scope_type}))
        self._sync_members(document, symbol.scope_id)
        self._publish(document, self._event_kind(namespace), symbol.name, symbol.scope_id)
        return stored

    def _update(self, namespace: str, document: str, name: str, scope_id: Optional[str], fields: dict):
        fields.pop("scope_type", None)
        updated = self._table(namespace).update(document, name, scope_id, **fields)
        if updated is not None:
            self._publish(document, self._event_kind(namespace), name, scope_id)
        return updated

    def _remove(self, namespace: str, document: str, name: str, scope_id: Optional[str]):
        removed = self._table(namespace).remove(document, name, scope_id)
        if removed is not None:
            self._sync_members(document, scope_id)
            self._publish(document, self._event_kind(namespace), name, scope_id)
        return removed

    def _sync_members(self, document: str, scope_id: Optional[str]):
        if scope_id is None:
            return
        names = {s.name for s in self.variables.list_in_scope(document, scope_id)}
        names |= {s.name for s in self.functions.list_in_scope(document, scope_id)}
        self.scopes.set_members(document, scope_id, names)

    # --- Variables ---

    def add_variable(self, document: str, variable: Variable) -> Optional[Variable]:
        return self._declare(VARIABLES, document, variable)

    def update_variable(self, document: str, name: str, scope_id: Optional[str] = None, **fields) -> Optional[Variable]:
        return self._update(VARIABLES, document, name, scope_id, fields)

    def remove_variable(self, document: str, name: str, scope_id: Optional[str] = None) -> Optional[Variable]:
        return self._remove(VARIABLES, document, name, scope_id)

    def get_variable(self, document: str, name: str, scope_id: Optional[str] = None) -> Optional[Variable]:
        return self.variables.lookup(document, name, scope_id)

    def find_variable(self, document: str, name: str) -> Optional[Variable]:
        return self.variables.find(document, name)

    def list_variables(self, document: str) -> List[Variable]:
        return self.variables.list_all(document)

    def variables_in_scope(self, document: str, scope_id: Optional[str]) -> List[Variable]:
        return self.variables.list_in_scope(document, scope_id)

    def clear_variables(self, document: str) -> None:
        touched = {v.scope_id for v in self.variables.list_all(document)}
        self.variables.clear(document)
        for scope_id in touched:
            self._sync_members(document, scope_id)
        self._publish(document, EventKind.VARIABLES_CHANGED)

    # --- Functions ---

    def add_function(self, document: str, function: FunctionDefinition) -> Optional[FunctionDefinition]:
        return self._declare(FUNCTIONS, document, function)

    def update_function(self, document: str, name: str, scope_id: Optional[str] = None, **fields) -> Optional[FunctionDefinition]:
        return self._update(FUNCTIONS, document, name, scope_id, fields)

    def remove_function(self, document: str, name: str, scope_id: Optional[str] = None) -> Optional[FunctionDefinition]:
        return self._remove(FUNCTIONS, document, name, scope_id)

    def get_function(self, document: str, name: str, scope_id: Optional[str] = None) -> Optional[FunctionDefinition]:
        return self.functions.lookup(document, name, scope_id)

    def find_function(self, document: str, name: str) -> Optional[FunctionDefinition]:
        return self.functions.find(document, name)

    def list_functions(self, document: str) -> List[FunctionDefinition]:
        return self.functions.list_all(document)

    def clear_functions(self, document: str) -> None:
        touched = {f.scope_id for f in self.functions.list_all(document)}
        self.functions.clear(document)
        for scope_id in touched:
            self._sync_members(document, scope_id)
        self._publish(document, EventKind.FUNCTIONS_CHANGED)

    # --- Scopes ---

    def create_scope(self, document: str, scope: Scope) -> Optional[Scope]:
        created = self.scopes.create_scope(document, scope)
        if created is not None:
            self._sync_members(document, created.id)
            self._publish(document, EventKind.SCOPES_CHANGED, scope_id=created.id)
        return created

    def destroy_scope(self, document: str, scope_id: str) -> List[str]:
        """
        Destroys a scope together with its nested scopes, and deletes every symbol
        (in both namespaces) they own. Afterwards no symbol refers to a removed id.
        """
        removed_scopes = self.scopes.destroy_scope(document, scope_id)
        if not removed_scopes:
            return []

        # Every removal completes before any listener runs.
        pending = []
        for removed_id in removed_scopes:
            for variable in self.variables.remove_scope_members(document, removed_id):
                pending.append((EventKind.VARIABLES_CHANGED, variable.name, removed_id))
            for function in self.functions.remove_scope_members(document, removed_id):
                pending.append((EventKind.FUNCTIONS_CHANGED, function.name, removed_id))
        pending.append((EventKind.SCOPES_CHANGED, None, scope_id))

        for kind, name, event_scope_id in pending:
            self._publish(document, kind, name, event_scope_id)
        return removed_scopes

    def enter_scope(self, document: str, scope_id: str) -> bool:
        entered = self.scopes.enter_scope(document, scope_id)
        if entered:
            self._publish(document, EventKind.ACTIVE_SCOPE_CHANGED, scope_id=scope_id)
        return entered

    def exit_scope(self, document: str, scope_id: str) -> bool:
        exited = self.scopes.exit_scope(document, scope_id)
        if exited:
            self._publish(document, EventKind.ACTIVE_SCOPE_CHANGED, scope_id=scope_id)
        return exited

    def current_scope(self, document: str) -> Optional[str]:
        return self.scopes.current_scope(document)

    def active_scopes(self, document: str) -> List[str]:
        return self.scopes.active_scopes(document)

    def get_scope(self, document: str, scope_id: Optional[str]) -> Optional[Scope]:
        return self.scopes.get_scope(document, scope_id)

    def list_scopes(self, document: str) -> List[Scope]:
        return self.scopes.list_scopes(document)

    # --- Visibility ---

    def visible_variables(self, document: str, scope_id: Optional[str]) -> List[Variable]:
        return resolve_visible(self.variables, self.scopes, document, scope_id)

    def visible_functions(self, document: str, scope_id: Optional[str]) -> List[FunctionDefinition]:
        return resolve_visible(self.functions, self.scopes, document, scope_id)

    def visible_symbols(self, document: str, scope_id: Optional[str], namespace: str = VARIABLES) -> List[Symbol]:
        return resolve_visible(self._table(namespace), self.scopes, document, scope_id)

    def resolve_variable(self, document: str, name: str, scope_id: Optional[str]) -> Optional[Variable]:
        return resolve_name(self.variables, self.scopes, document, name, scope_id)

    def resolve_function(self, document: str, name: str, scope_id: Optional[str]) -> Optional[FunctionDefinition]:
        return resolve_name(self.functions, self.scopes, document, name, scope_id)

    def visible_from_current(self, document: str) -> List[Variable]:
        """Variables visible from the active scope, or all of them when no scope is active."""
        current = self.current_scope(document)
        if current is None:
            return self.list_variables(document)
        return self.visible_variables(document, current)

    # --- Documents ---

    def clear_document(self, document: str) -> None:
        self.variables.clear(document)
        self.functions.clear(document)
        self.scopes.clear(document)
        self._publish(document, EventKind.DOCUMENT_CLEARED)

    def clear_all(self) -> None:
        documents = set(self.variables.documents()) | set(self.functions.documents()) | set(self.scopes.documents())
        for document in sorted(documents):
            self.clear_document(document)


class DocumentIntellisense:
    """The registry bound to a single document id."""

    def __init__(self, registry: IntellisenseRegistry, document: str):
        self.registry = registry
        self.document_id = document

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self.registry.subscribe(listener, self.document_id)

    def add_variable(self, variable: Variable) -> Optional[Variable]:
        return self.registry.add_variable(self.document_id, variable)

    def update_variable(self, name: str, scope_id: Optional[str] = None, **fields) -> Optional[Variable]:
        return self.registry.update_variable(self.document_id, name, scope_id, **fields)

    def remove_variable(self, name: str, scope_id: Optional[str] = None) -> Optional[Variable]:
        return self.registry.remove_variable(self.document_id, name, scope_id)

    def get_variable(self, name: str, scope_id: Optional[str] = None) -> Optional[Variable]:
        return self.registry.get_variable(self.document_id, name, scope_id)

    def list_variables(self) -> List[Variable]:
        return self.registry.list_variables(self.document_id)

    def add_function(self, function: FunctionDefinition) -> Optional[FunctionDefinition]:
        return self.registry.add_function(self.document_id, function)

    def update_function(self, name: str, scope_id: Optional[str] = None, **fields) -> Optional[FunctionDefinition]:
        return self.registry.update_function(self.document_id, name, scope_id, **fields)

    def remove_function(self, name: str, scope_id: Optional[str] = None) -> Optional[FunctionDefinition]:
        return self.registry.remove_function(self.document_id, name, scope_id)

    def get_function(self, name: str, scope_id: Optional[str] = None) -> Optional[FunctionDefinition]:
        return self.registry.get_function(self.document_id, name, scope_id)

    def list_functions(self) -> List[FunctionDefinition]:
        return self.registry.list_functions(self.document_id)

    def create_scope(self, scope: Scope) -> Optional[Scope]:
        return self.registry.create_scope(self.document_id, scope)

    def destroy_scope(self, scope_id: str) -> List[str]:
        return self.registry.destroy_scope(self.document_id, scope_id)

    def enter_scope(self, scope_id: str) -> bool:
        return self.registry.enter_scope(self.document_id, scope_id)

    def exit_scope(self, scope_id: str) -> bool:
        return self.registry.exit_scope(self.document_id, scope_id)

    def current_scope(self) -> Optional[str]:
        return self.registry.current_scope(self.document_id)

    def visible_variables(self, scope_id: Optional[str]) -> List[Variable]:
        return self.registry.visible_variables(self.document_id, scope_id)

    def visible_functions(self, scope_id: Optional[str]) -> List[FunctionDefinition]:
        return self.registry.visible_functions(self.document_id, scope_id)

    def clear(self) -> None:
        self.registry.clear_document(self.document_id)
