"""
The closed set of Luau type tags used by symbols and sockets, and the
connection-compatibility rule the editor applies when a user drags an edge.
"""

from enum import Enum
from typing import Optional


class LuauType(str, Enum):
    NIL = "nil"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    TABLE = "table"
    FUNCTION = "function"
    THREAD = "thread"
    USERDATA = "userdata"
    VECTOR = "vector"
    BUFFER = "buffer"
    ANY = "any"
    # Execution-order edge, never carries data.
    FLOW = "flow"

    def __str__(self) -> str:
        return self.value


DATA_TYPES = tuple(t for t in LuauType if t is not LuauType.FLOW)


def parse_type(value: Optional[str]) -> LuauType:
    """Maps a raw type tag to a LuauType, degrading unknown tags to the wildcard."""
    if isinstance(value, LuauType):
        return value
    if not value:
        return LuauType.ANY
    try:
        return LuauType(str(value).strip().lower())
    except ValueError:
        return LuauType.ANY


def is_flow(type_tag: LuauType) -> bool:
    return type_tag is LuauType.FLOW


def can_connect(source_type: LuauType, target_type: LuauType) -> bool:
    """
    An output of type T may feed an input of type U iff both are flow sockets,
    or neither is and the types are equal or one of them is the wildcard.
    """
    source_type, target_type = parse_type(source_type), parse_type(target_type)

    if is_flow(source_type) or is_flow(target_type):
        return is_flow(source_type) and is_flow(target_type)

    if source_type is LuauType.ANY or target_type is LuauType.ANY:
        return True
    return source_type is target_type
