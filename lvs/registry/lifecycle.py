"""
Mount/unmount pairing for the scopes and declarations a graph node owns.

A node that introduces a scope acquires it with `mount_scope` and releases it
with `ScopeMount.unmount()` (or by leaving the `with` block). A node that
declares a symbol keeps a `VariableDeclaration` or `FunctionDeclaration`
binding and calls `sync` on every configuration edit.
"""

from contextlib import contextmanager
from typing import Iterable, List, Optional, Tuple

import structlog

from lvs.config.config import SCOPE_ID_FORMAT
from lvs.luau_types import LuauType

from .classes import FunctionDefinition, FunctionParameter, Scope, ScopeKind, Symbol, Variable
from .intellisense import FUNCTIONS, VARIABLES, IntellisenseRegistry

logger = structlog.get_logger()


def scope_id_for(node_id: str, scope_kind: ScopeKind) -> str:
    return SCOPE_ID_FORMAT.format(node_id=node_id, scope_kind=str(scope_kind))


class ScopeMount:
    """Handle for a mounted scope. `unmount()` is idempotent."""

    def __init__(self, registry: IntellisenseRegistry, document: str, scope_id: str, scope: Optional[Scope]):
        self.registry = registry
        self.document = document
        self.scope_id = scope_id
        self.scope = scope
        self._declared: List[Tuple[str, str]] = []
        self._mounted = scope is not None

    @property
    def mounted(self) -> bool:
        return self._mounted

    def declare(self, symbol: Symbol) -> Optional[Symbol]:
        """Declares `symbol` inside this scope and remembers it for teardown."""
        if not self._mounted:
            return None
        scoped = symbol.model_copy(update={"scope_id": self.scope_id})
        if isinstance(scoped, FunctionDefinition):
            stored = self.registry.add_function(self.document, scoped)
            namespace = FUNCTIONS
        else:
            stored = self.registry.add_variable(self.document, scoped)
            namespace = VARIABLES
        if stored is not None and (namespace, stored.name) not in self._declared:
            self._declared.append((namespace, stored.name))
        return stored

    def unmount(self) -> None:
        if not self._mounted:
            return
        self._mounted = False

        self.registry.exit_scope(self.document, self.scope_id)
        for namespace, name in self._declared:
            if namespace == FUNCTIONS:
                self.registry.remove_function(self.document, name, self.scope_id)
            else:
                self.registry.remove_variable(self.document, name, self.scope_id)
        self._declared.clear()
        self.registry.destroy_scope(self.document, self.scope_id)
        logger.debug("scope_unmounted", document=self.document, scope_id=self.scope_id)

    def __enter__(self) -> "ScopeMount":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.unmount()
        return False


def mount_scope(
    registry: IntellisenseRegistry,
    document: str,
    node_id: str,
    scope_kind: ScopeKind,
    parent_scope_id: Optional[str] = None,
    initial_symbols: Iterable[Symbol] = (),
    enter: bool = True,
) -> ScopeMount:
    """
    Creates the scope owned by `node_id`, declares `initial_symbols` in it and
    enters it. When the scope cannot be created (unknown parent) the returned
    handle is inert.
    """
    scope_id = scope_id_for(node_id, scope_kind)
    scope = registry.create_scope(
        document,
        Scope(id=scope_id, scope_type=scope_kind, parent_scope_id=parent_scope_id, owner_node_id=node_id),
    )
    mount = ScopeMount(registry, document, scope_id, scope)
    if scope is None:
        return mount

    for symbol in initial_symbols:
        mount.declare(symbol)
    if enter:
        registry.enter_scope(document, scope_id)
    return mount


@contextmanager
def temporary_scope(registry: IntellisenseRegistry, document: str, scope_id: str):
    """Enters an existing scope for the duration of the block."""
    entered = registry.enter_scope(document, scope_id)
    try:
        yield entered
    finally:
        if entered:
            registry.exit_scope(document, scope_id)


# --- Declaration bindings ---


class _DeclarationBinding:
    namespace = VARIABLES

    def __init__(self, registry: IntellisenseRegistry, document: str, scope_id: Optional[str] = None):
        self.registry = registry
        self.document = document
        self.scope_id = scope_id
        self._name: Optional[str] = None

    @property
    def name(self) -> Optional[str]:
        return self._name

    def _add(self, symbol):
        if self.namespace == FUNCTIONS:
            return self.registry.add_function(self.document, symbol)
        return self.registry.add_variable(self.document, symbol)

    def _drop(self, name: str, scope_id: Optional[str]):
        if self.namespace == FUNCTIONS:
            self.registry.remove_function(self.document, name, scope_id)
        else:
            self.registry.remove_variable(self.document, name, scope_id)

    def _sync(self, name: Optional[str], build):
        name = (name or "").strip()
        if self._name is not None and self._name != name:
            self._drop(self._name, self.scope_id)
            self._name = None
        if not name:
            return None
        stored = self._add(build(name))
        self._name = stored.name if stored is not None else None
        return stored

    def move_to(self, scope_id: Optional[str]) -> None:
        """Re-homes the declaration when the node moves into another scope."""
        if scope_id == self.scope_id:
            return
        current = None
        if self._name is not None:
            table = self.registry.functions if self.namespace == FUNCTIONS else self.registry.variables
            current = table.lookup(self.document, self._name, self.scope_id)
            self._drop(self._name, self.scope_id)
        self.scope_id = scope_id
        if current is not None:
            stored = self._add(current.model_copy(update={"scope_id": scope_id}))
            self._name = stored.name if stored is not None else None

    def release(self) -> None:
        if self._name is not None:
            self._drop(self._name, self.scope_id)
            self._name = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.release()
        return False


class VariableDeclaration(_DeclarationBinding):
    """Keeps the variable declared by one node in sync with its configuration."""

    namespace = VARIABLES

    def sync(self, name: Optional[str], type: LuauType = LuauType.ANY, **fields) -> Optional[Variable]:
        return self._sync(name, lambda n: Variable(name=n, type=type, scope_id=self.scope_id, **fields))


class FunctionDeclaration(_DeclarationBinding):
    """Keeps the function declared by a FunctionDefinition node in sync with its configuration."""

    namespace = FUNCTIONS

    def sync(
        self,
        name: Optional[str],
        parameters: Iterable[FunctionParameter] = (),
        return_type: LuauType = LuauType.NIL,
        node_id: Optional[str] = None,
        **fields,
    ) -> Optional[FunctionDefinition]:
        return self._sync(
            name,
            lambda n: FunctionDefinition(
                name=n,
                scope_id=self.scope_id,
                parameters=list(parameters),
                return_type=return_type,
                node_id=node_id,
                **fields,
            ),
        )
