"""
Visibility resolution: which symbols of a namespace can be referenced from a
given scope.
"""

from typing import List, Optional, Set

from .scope_tree import ScopeTree
from .symbol_table import ScopedSymbolTable, T


def resolve_visible(table: ScopedSymbolTable[T], tree: ScopeTree, document: str, scope_id: Optional[str]) -> List[T]:
    """
    Collects the symbols visible from `scope_id`, innermost scope first, then
    every global symbol. When a name is declared at several levels the nearest
    declaration wins and the outer ones are shadowed.

    An unknown `scope_id` fails open and yields every symbol of the document,
    so a transient inconsistency in the editor never hides everything.
    """
    all_symbols = table.list_all(document)
    if not all_symbols:
        return []

    if scope_id is not None and not tree.has_scope(document, scope_id):
        return all_symbols

    chain = [] if scope_id is None else [scope_id] + tree.ancestors(document, scope_id)

    visible: List[T] = []
    seen: Set[str] = set()

    def _take(symbol: T):
        if symbol.name not in seen:
            seen.add(symbol.name)
            visible.append(symbol)

    for current in chain:
        for symbol in all_symbols:
            if symbol.scope_id == current:
                _take(symbol)

    for symbol in all_symbols:
        if symbol.is_global:
            _take(symbol)

    return visible


def resolve_name(table: ScopedSymbolTable[T], tree: ScopeTree, document: str, name: str, scope_id: Optional[str]) -> Optional[T]:
    """Returns the declaration `name` resolves to from `scope_id`, honouring shadowing."""
    return next((symbol for symbol in resolve_visible(table, tree, document, scope_id) if symbol.name == name), None)
