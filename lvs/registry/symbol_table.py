from typing import Dict, Generic, List, Optional, Tuple, TypeVar

import structlog
from pydantic import ValidationError

from .classes import Symbol

logger = structlog.get_logger()

T = TypeVar("T", bound=Symbol)

SymbolKey = Tuple[Optional[str], str]


class ScopedSymbolTable(Generic[T]):
    """
    One symbol namespace, partitioned by document. Inside a document, entries are
    keyed by (owning scope id, name), so the same name may be declared in a scope
    and in one of its ancestors (shadowing) while a second declaration in the same
    scope overwrites the first.

    All operations are total: a miss is reported as None or an empty list.
    """

    def __init__(self, namespace: str):
        self.namespace = namespace
        self._documents: Dict[str, Dict[SymbolKey, T]] = {}

    def declare(self, document: str, symbol: T) -> T:
        """Inserts or overwrites (last write wins). An overwrite keeps its original position."""
        entries = self._documents.setdefault(document, {})
        key = (symbol.scope_id, symbol.name)
        replaced = key in entries
        entries[key] = symbol
        logger.debug(
            "symbol_declared",
            namespace=self.namespace,
            document=document,
            name=symbol.name,
            scope_id=symbol.scope_id,
            type=str(symbol.type),
            replaced=replaced,
        )
        return symbol

    def update(self, document: str, name: str, scope_id: Optional[str] = None, **fields) -> Optional[T]:
        """Merges `fields` into an existing entry. Invalid field values leave the entry untouched."""
        entries = self._documents.get(document)
        if not entries:
            return None
        key = (scope_id, name)
        current = entries.get(key)
        if current is None:
            return None

        try:
            updated = current.model_validate({**current.model_dump(), **fields})
        except ValidationError as e:
            logger.warning(
                "symbol_update_rejected", namespace=self.namespace, document=document, name=name, scope_id=scope_id, errors=e.error_count()
            )
            return None
        entries[key] = updated
        logger.debug("symbol_updated", namespace=self.namespace, document=document, name=name, fields=sorted(fields))
        return updated

    def remove(self, document: str, name: str, scope_id: Optional[str] = None) -> Optional[T]:
        entries = self._documents.get(document)
        if not entries:
            return None
        removed = entries.pop((scope_id, name), None)
        if not entries:
            # Release the container as soon as it is empty.
            del self._documents[document]
        if removed is not None:
            logger.debug("symbol_removed", namespace=self.namespace, document=document, name=name, scope_id=scope_id)
        return removed

    def lookup(self, document: str, name: str, scope_id: Optional[str] = None) -> Optional[T]:
        entries = self._documents.get(document)
        if not entries:
            return None
        return entries.get((scope_id, name))

    def find(self, document: str, name: str) -> Optional[T]:
        """Scope-agnostic lookup: the global entry if any, else the earliest declared one."""
        entries = self._documents.get(document)
        if not entries:
            return None
        global_entry = entries.get((None, name))
        if global_entry is not None:
            return global_entry
        return next((symbol for symbol in entries.values() if symbol.name == name), None)

    def list_all(self, document: str) -> List[T]:
        entries = self._documents.get(document)
        return list(entries.values()) if entries else []

    def list_in_scope(self, document: str, scope_id: Optional[str]) -> List[T]:
        return [symbol for symbol in self.list_all(document) if symbol.scope_id == scope_id]

    def remove_scope_members(self, document: str, scope_id: str) -> List[T]:
        members = self.list_in_scope(document, scope_id)
        for symbol in members:
            self.remove(document, symbol.name, scope_id)
        return members

    def clear(self, document: str) -> None:
        self._documents.pop(document, None)

    def has_document(self, document: str) -> bool:
        return document in self._documents

    def documents(self) -> List[str]:
        return list(self._documents)

    def __len__(self) -> int:
        return sum(len(entries) for entries in self._documents.values())
