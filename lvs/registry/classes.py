"""
Defines the data contracts held by the intellisense registry: symbols of both
namespaces and the scopes that own them.

Symbols are immutable snapshots; every write to the registry stores a new
snapshot under the same key, so a consumer holding a name always resolves to the
latest declaration.
"""

from enum import Enum
from typing import List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from lvs.luau_types import LuauType


class ScopeKind(str, Enum):
    GLOBAL = "global"
    FUNCTION = "function"
    LOOP = "loop"
    BLOCK = "block"

    def __str__(self) -> str:
        return self.value


# --- Symbols ---


class Symbol(BaseModel):
    """A named, typed declaration owned by a scope (None means global)."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: LuauType = LuauType.ANY
    scope_id: Optional[str] = None
    scope_type: ScopeKind = ScopeKind.GLOBAL
    is_constant: bool = False
    initial_value: Optional[str] = None
    description: Optional[str] = None

    @property
    def is_global(self) -> bool:
        return self.scope_id is None or self.scope_type is ScopeKind.GLOBAL


class Variable(Symbol):
    pass


class FunctionParameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: LuauType = LuauType.ANY


class FunctionDefinition(Symbol):
    type: LuauType = LuauType.FUNCTION
    parameters: List[FunctionParameter] = Field(default_factory=list)
    return_type: LuauType = LuauType.NIL
    node_id: Optional[str] = None

    @property
    def signature(self) -> str:
        params = ", ".join(f"{p.name}: {p.type}" for p in self.parameters)
        return f"{self.name}({params}) -> {self.return_type}"


# --- Scopes ---


class Scope(BaseModel):
    """
    A lexical region introduced by a graph node. The document's global scope is
    implicit and never stored, so `scope_type` is never GLOBAL here.
    """

    id: str
    scope_type: ScopeKind
    parent_scope_id: Optional[str] = None
    owner_node_id: Optional[str] = None
    member_names: Set[str] = Field(default_factory=set)
    child_scope_ids: Set[str] = Field(default_factory=set)
