"""
Identifier completion for expression inputs.

Suggestions are drawn from the symbols visible from the node being edited, so
a loop variable is offered inside its loop body and nowhere else.
"""

from typing import Callable, Iterable, List, Optional, Tuple

from lvs.config.config import COMPLETION_BOUNDARY_CHARS, COMPLETION_TRIGGER_REGEX, NUMERIC_TYPES, PARTIAL_WORD_REGEX
from lvs.luau_types import LuauType, parse_type
from lvs.registry.classes import Symbol
from lvs.registry.intellisense import FUNCTIONS, VARIABLES, IntellisenseRegistry

Predicate = Callable[[Symbol], bool]

ALL_NAMESPACES = "all"


class TypeFilter:
    """
    Predicate over symbol types. With `include`, only those types pass (and the
    wildcard, unless `accept_any` is off); with `exclude`, those types are dropped.
    """

    def __init__(self, include: Optional[Iterable] = None, exclude: Optional[Iterable] = None, accept_any: bool = True):
        self.include = {parse_type(t) for t in include} if include is not None else None
        self.exclude = {parse_type(t) for t in exclude or ()}
        self.accept_any = accept_any

    @classmethod
    def numeric(cls) -> "TypeFilter":
        return cls(include=NUMERIC_TYPES)

    @classmethod
    def of(cls, *types) -> "TypeFilter":
        return cls(include=types)

    @classmethod
    def excluding(cls, *types) -> "TypeFilter":
        return cls(exclude=types)

    def __call__(self, symbol: Symbol) -> bool:
        if symbol.type in self.exclude:
            return False
        if self.include is None:
            return True
        if symbol.type is LuauType.ANY:
            return self.accept_any
        return symbol.type in self.include


def can_trigger(partial: str) -> bool:
    """Suggestions only open for fragments that could start an identifier."""
    return bool(partial) and bool(COMPLETION_TRIGGER_REGEX.match(partial))


def _candidates(registry: IntellisenseRegistry, document: str, scope_id: Optional[str], namespace: str) -> List[Symbol]:
    if namespace == ALL_NAMESPACES:
        return registry.visible_symbols(document, scope_id, VARIABLES) + registry.visible_symbols(document, scope_id, FUNCTIONS)
    return registry.visible_symbols(document, scope_id, namespace)


def rank(symbols: Iterable[Symbol], partial: str, predicate: Optional[Predicate] = None) -> List[Symbol]:
    """Starts-with matches first, then contains matches; each group keeps the input order."""
    if not can_trigger(partial):
        return []

    needle = partial.lower()
    prefix_matches: List[Symbol] = []
    contains_matches: List[Symbol] = []
    for symbol in symbols:
        if predicate is not None and not predicate(symbol):
            continue
        name = symbol.name.lower()
        if name.startswith(needle):
            prefix_matches.append(symbol)
        elif needle in name:
            contains_matches.append(symbol)
    return prefix_matches + contains_matches


def suggest(
    registry: IntellisenseRegistry,
    document: str,
    scope_id: Optional[str],
    partial: str,
    predicate: Optional[Predicate] = None,
    namespace: str = VARIABLES,
) -> List[Symbol]:
    """Ranks the symbols visible from `scope_id` against the partial identifier."""
    if not can_trigger(partial):
        return []
    return rank(_candidates(registry, document, scope_id, namespace), partial, predicate)


def partial_word_at_cursor(text: str, cursor: Optional[int] = None) -> str:
    """The identifier fragment immediately left of the cursor."""
    cursor = len(text) if cursor is None else max(0, min(cursor, len(text)))
    match = PARTIAL_WORD_REGEX.search(text[:cursor])
    return match.group(0) if match else ""


def apply_completion(text: str, cursor: Optional[int], name: str) -> Tuple[str, int]:
    """
    Replaces the fragment left of the cursor with `name`. A space is inserted on
    either side when the neighbouring character would otherwise glue onto it.
    Returns the new text and the cursor position just after the insertion.
    """
    cursor = len(text) if cursor is None else max(0, min(cursor, len(text)))
    partial = partial_word_at_cursor(text, cursor)
    start, end = cursor - len(partial), cursor

    char_before = text[start - 1] if start > 0 else ""
    char_after = text[end] if end < len(text) else ""
    space_before = " " if char_before and char_before not in COMPLETION_BOUNDARY_CHARS else ""
    space_after = " " if char_after and char_after not in COMPLETION_BOUNDARY_CHARS else ""

    new_text = text[:start] + space_before + name + space_after + text[end:]
    return new_text, start + len(space_before) + len(name) + len(space_after)


def suggest_at_cursor(
    registry: IntellisenseRegistry,
    document: str,
    scope_id: Optional[str],
    text: str,
    cursor: Optional[int] = None,
    predicate: Optional[Predicate] = None,
    namespace: str = VARIABLES,
) -> Tuple[str, List[Symbol]]:
    """Returns the fragment being typed and the suggestions for it."""
    partial = partial_word_at_cursor(text, cursor)
    return partial, suggest(registry, document, scope_id, partial, predicate, namespace)
