from typing import Dict, List, Optional

import structlog

from lvs.exceptions import InternalRegistryError

from .classes import Scope, ScopeKind

logger = structlog.get_logger()


class ScopeTree:
    """
    Per-document scope hierarchy plus the stack of currently entered scopes.

    The global scope is implicit (id None). Every stored scope's parent chain ends
    at it: a scope can only be created under an existing parent, and re-creating
    an existing id under one of its own descendants is rejected.

    The active stack is ordered oldest-first without duplicates. Entering an
    already active scope moves it to the top; exiting removes it wherever it sits,
    so the current scope is always the most recently entered one still active.
    """

    def __init__(self):
        self._scopes: Dict[str, Dict[str, Scope]] = {}
        self._active: Dict[str, List[str]] = {}

    # --- Structure ---

    def create_scope(self, document: str, scope: Scope) -> Optional[Scope]:
        assert scope.scope_type is not ScopeKind.GLOBAL, "the global scope is implicit"

        scopes = self._scopes.get(document, {})
        parent_id = scope.parent_scope_id

        if parent_id is not None and parent_id not in scopes:
            logger.warning("scope_parent_missing", document=document, scope_id=scope.id, parent_scope_id=parent_id)
            return None

        existing = scopes.get(scope.id)
        if existing is not None:
            if parent_id is not None and (parent_id == scope.id or scope.id in self.ancestors(document, parent_id)):
                logger.warning("scope_cycle_rejected", document=document, scope_id=scope.id, parent_scope_id=parent_id)
                return None
            return self._reparent(document, existing, scope)

        stored = scope.model_copy(deep=True)
        stored.child_scope_ids = set()
        self._scopes.setdefault(document, {})[stored.id] = stored
        if parent_id is not None:
            scopes[parent_id].child_scope_ids.add(stored.id)

        logger.debug("scope_created", document=document, scope_id=stored.id, scope_type=str(stored.scope_type), parent_scope_id=parent_id)
        return stored

    def _reparent(self, document: str, existing: Scope, requested: Scope) -> Scope:
        scopes = self._scopes[document]
        old_parent = existing.parent_scope_id
        if old_parent is not None and old_parent in scopes:
            scopes[old_parent].child_scope_ids.discard(existing.id)

        existing.parent_scope_id = requested.parent_scope_id
        existing.scope_type = requested.scope_type
        existing.owner_node_id = requested.owner_node_id
        existing.member_names |= requested.member_names
        if requested.parent_scope_id is not None:
            scopes[requested.parent_scope_id].child_scope_ids.add(existing.id)

        logger.debug("scope_reparented", document=document, scope_id=existing.id, parent_scope_id=requested.parent_scope_id)
        return existing

    def destroy_scope(self, document: str, scope_id: str) -> List[str]:
        """Removes the scope and all of its descendants. Returns removed ids, innermost first."""
        scopes = self._scopes.get(document)
        if not scopes or scope_id not in scopes:
            return []

        removed = self.descendants(document, scope_id)[::-1] + [scope_id]
        parent_id = scopes[scope_id].parent_scope_id
        if parent_id is not None and parent_id in scopes:
            scopes[parent_id].child_scope_ids.discard(scope_id)

        for removed_id in removed:
            scopes.pop(removed_id, None)
            self._discard_active(document, removed_id)

        if not scopes:
            del self._scopes[document]

        logger.debug("scope_destroyed", document=document, scope_id=scope_id, removed=removed)
        return removed

    def get_scope(self, document: str, scope_id: Optional[str]) -> Optional[Scope]:
        if scope_id is None:
            return None
        return self._scopes.get(document, {}).get(scope_id)

    def has_scope(self, document: str, scope_id: Optional[str]) -> bool:
        return self.get_scope(document, scope_id) is not None

    def list_scopes(self, document: str) -> List[Scope]:
        return list(self._scopes.get(document, {}).values())

    def scope_kind(self, document: str, scope_id: Optional[str]) -> ScopeKind:
        scope = self.get_scope(document, scope_id)
        return scope.scope_type if scope else ScopeKind.GLOBAL

    def ancestors(self, document: str, scope_id: str) -> List[str]:
        """Returns the parent chain of `scope_id`, innermost first, excluding the scope itself."""
        scopes = self._scopes.get(document, {})
        chain: List[str] = []
        current = scopes.get(scope_id)
        while current is not None and current.parent_scope_id is not None:
            parent_id = current.parent_scope_id
            if parent_id in chain or parent_id == scope_id:
                raise InternalRegistryError(f"Scope cycle detected in document '{document}' at '{parent_id}'.")
            chain.append(parent_id)
            current = scopes.get(parent_id)
        return chain

    def descendants(self, document: str, scope_id: str) -> List[str]:
        """Returns every nested scope of `scope_id`, breadth first."""
        scopes = self._scopes.get(document, {})
        result: List[str] = []
        frontier = [scope_id]
        while frontier:
            current = scopes.get(frontier.pop(0))
            if current is None:
                continue
            for child_id in sorted(current.child_scope_ids):
                if child_id not in result:
                    result.append(child_id)
                    frontier.append(child_id)
        return result

    def set_members(self, document: str, scope_id: Optional[str], names) -> None:
        scope = self.get_scope(document, scope_id)
        if scope is not None:
            scope.member_names = set(names)

    # --- Active scopes ---

    def enter_scope(self, document: str, scope_id: str) -> bool:
        if not self.has_scope(document, scope_id):
            logger.warning("enter_unknown_scope", document=document, scope_id=scope_id)
            return False
        stack = self._active.setdefault(document, [])
        if scope_id in stack:
            stack.remove(scope_id)
        stack.append(scope_id)
        return True

    def exit_scope(self, document: str, scope_id: str) -> bool:
        return self._discard_active(document, scope_id)

    def _discard_active(self, document: str, scope_id: str) -> bool:
        stack = self._active.get(document)
        if not stack or scope_id not in stack:
            return False
        stack.remove(scope_id)
        if not stack:
            del self._active[document]
        return True

    def current_scope(self, document: str) -> Optional[str]:
        stack = self._active.get(document)
        return stack[-1] if stack else None

    def active_scopes(self, document: str) -> List[str]:
        return list(self._active.get(document, []))

    def clear(self, document: str) -> None:
        self._scopes.pop(document, None)
        self._active.pop(document, None)

    def documents(self) -> List[str]:
        return list(self._scopes)
