"""
Nodes for the Luau `table` library. Most are plain data or statement nodes; a
few grow extra inputs depending on their mode or on an argument count.
"""

from typing import Literal, Optional

from pydantic import Field

from lvs.config.config import DEFAULT_NODE_MODES, DEFAULT_PACK_ARG_COUNT, MAX_PACK_ARG_COUNT
from lvs.sockets.classes import NodeSockets, SocketContext, sockets
from lvs.sockets.node_kinds import NodeConfig, NodeKind

from .helpers import ANY, BOOLEAN, FLOW, NUMBER, STRING, TABLE, socket

CATEGORY = "Table"


# --- Configuration models ---


class TableNodeConfig(NodeConfig):
    pass


class TableConcatConfig(NodeConfig):
    show_optional_params: bool = False
    sep: Optional[str] = None
    f: Optional[str] = None
    t: Optional[str] = None


class TableCreateConfig(NodeConfig):
    mode: Literal["empty", "filled"] = DEFAULT_NODE_MODES["TableCreate"]
    initial_value: Optional[str] = None


class TableFindConfig(NodeConfig):
    mode: Literal["default", "with-index"] = DEFAULT_NODE_MODES["TableFind"]


class TableForeachConfig(NodeConfig):
    has_return: bool = False


class TableInsertConfig(NodeConfig):
    mode: Literal["append", "at-index"] = DEFAULT_NODE_MODES["TableInsert"]


class TableMoveConfig(NodeConfig):
    mode: Literal["same-table", "different-table"] = DEFAULT_NODE_MODES["TableMove"]


class TablePackConfig(NodeConfig):
    arg_count: int = Field(default=DEFAULT_PACK_ARG_COUNT, ge=0, le=MAX_PACK_ARG_COUNT)


class TableRemoveConfig(NodeConfig):
    mode: Literal["last", "at-index"] = DEFAULT_NODE_MODES["TableRemove"]


class TableSortConfig(NodeConfig):
    sort_mode: Literal["default", "custom"] = DEFAULT_NODE_MODES["TableSort"]
    compare_function: Optional[str] = None


class TableUnpackConfig(NodeConfig):
    mode: Literal["all", "range"] = DEFAULT_NODE_MODES["TableUnpack"]


# --- Socket descriptors ---


def _clear(config: TableNodeConfig, ctx: SocketContext) -> NodeSockets:
    return NodeSockets(inputs=sockets(("prev", "Prev", FLOW), ("table", "Table", TABLE)), outputs=sockets(("next", "Next", FLOW)))


def _clone(config: TableNodeConfig, ctx: SocketContext) -> NodeSockets:
    return NodeSockets(inputs=sockets(("table", "Table", TABLE)), outputs=sockets(("result", "Cloned", TABLE)))


def _concat(config: TableConcatConfig, ctx: SocketContext) -> NodeSockets:
    inputs = [socket("table", "Table", TABLE)]
    if config.show_optional_params:
        inputs += sockets(("sep", "Separator", STRING), ("f", "First Index", NUMBER), ("t", "Last Index", NUMBER))
    return NodeSockets(inputs=inputs, outputs=sockets(("result", "Result", STRING)))


def _create(config: TableCreateConfig, ctx: SocketContext) -> NodeSockets:
    inputs = [socket("size", "Size", NUMBER)]
    if config.mode == "filled":
        inputs.append(socket("value", "Initial Value", ANY))
    return NodeSockets(inputs=inputs, outputs=sockets(("result", "Result", TABLE)))


def _find(config: TableFindConfig, ctx: SocketContext) -> NodeSockets:
    inputs = sockets(("table", "Table", TABLE), ("value", "Value", ANY))
    if config.mode == "with-index":
        inputs.append(socket("init", "Start Index", NUMBER))
    return NodeSockets(inputs=inputs, outputs=sockets(("result", "Index", NUMBER)))


def _foreach(config: TableForeachConfig, ctx: SocketContext) -> NodeSockets:
    outputs = [socket("next", "Next", FLOW)]
    if config.has_return:
        outputs.append(socket("result", "Result", ANY))
    return NodeSockets(inputs=sockets(("prev", "Prev", FLOW), ("table", "Table", TABLE), ("fn", "Function", ANY)), outputs=outputs)


def _freeze(config: TableNodeConfig, ctx: SocketContext) -> NodeSockets:
    return NodeSockets(
        inputs=sockets(("prev", "Prev", FLOW), ("table", "Table", TABLE)),
        outputs=sockets(("next", "Next", FLOW), ("frozen", "Frozen", TABLE)),
    )


def _insert(config: TableInsertConfig, ctx: SocketContext) -> NodeSockets:
    inputs = sockets(("prev", "Prev", FLOW), ("table", "Table", TABLE))
    if config.mode == "at-index":
        inputs.append(socket("index", "Index", NUMBER))
    inputs.append(socket("value", "Value", ANY))
    return NodeSockets(inputs=inputs, outputs=sockets(("next", "Next", FLOW)))


def _is_frozen(config: TableNodeConfig, ctx: SocketContext) -> NodeSockets:
    return NodeSockets(inputs=sockets(("table", "Table", TABLE)), outputs=sockets(("result", "Result", BOOLEAN)))


def _move(config: TableMoveConfig, ctx: SocketContext) -> NodeSockets:
    inputs = sockets(
        ("prev", "Prev", FLOW),
        ("source", "Source", TABLE),
        ("first", "First Index", NUMBER),
        ("last", "Last Index", NUMBER),
        ("dest", "Dest Index", NUMBER),
    )
    if config.mode == "different-table":
        inputs.append(socket("target", "Target", TABLE))
    return NodeSockets(inputs=inputs, outputs=sockets(("next", "Next", FLOW)))


def _pack(config: TablePackConfig, ctx: SocketContext) -> NodeSockets:
    inputs = [socket("prev", "Prev", FLOW)]
    inputs += [socket(f"arg-{i}", f"Arg {i + 1}", ANY) for i in range(config.arg_count)]
    return NodeSockets(inputs=inputs, outputs=sockets(("next", "Next", FLOW), ("packed", "Packed", TABLE)))


def _remove(config: TableRemoveConfig, ctx: SocketContext) -> NodeSockets:
    inputs = sockets(("prev", "Prev", FLOW), ("table", "Table", TABLE))
    if config.mode == "at-index":
        inputs.append(socket("index", "Index", NUMBER))
    return NodeSockets(inputs=inputs, outputs=sockets(("next", "Next", FLOW), ("value", "Removed", ANY)))


def _sort(config: TableSortConfig, ctx: SocketContext) -> NodeSockets:
    inputs = sockets(("prev", "Prev", FLOW), ("table", "Table", TABLE))
    if config.sort_mode == "custom":
        inputs.append(socket("compare", "Compare Fn", ANY))
    return NodeSockets(inputs=inputs, outputs=sockets(("next", "Next", FLOW)))


def _unpack(config: TableUnpackConfig, ctx: SocketContext) -> NodeSockets:
    inputs = sockets(("prev", "Prev", FLOW), ("table", "Table", TABLE))
    if config.mode == "range":
        inputs += sockets(("f", "First", NUMBER), ("t", "Last", NUMBER))
    return NodeSockets(inputs=inputs, outputs=sockets(("next", "Next", FLOW), ("values", "Values", ANY)))


def _table_kind(kind: str, display_name: str, description: str, config_model, compute_sockets) -> NodeKind:
    return NodeKind(
        kind=kind,
        category=CATEGORY,
        display_name=display_name,
        description=description,
        config_model=config_model,
        compute_sockets=compute_sockets,
    )


NODE_KINDS = {
    "TableClear": _table_kind("TableClear", "Table Clear", "Clears all elements from a table using table.clear()", TableNodeConfig, _clear),
    "TableClone": _table_kind("TableClone", "Table Clone", "Shallow copy of a table using table.clone()", TableNodeConfig, _clone),
    "TableConcat": _table_kind("TableConcat", "Table Concat", "Joins table elements into a string using table.concat()", TableConcatConfig, _concat),
    "TableCreate": _table_kind("TableCreate", "Table Create", "Creates a table of a given size using table.create()", TableCreateConfig, _create),
    "TableFind": _table_kind("TableFind", "Table Find", "Finds the index of a value using table.find()", TableFindConfig, _find),
    "TableForeach": _table_kind("TableForeach", "Table Foreach", "Calls a function for every key-value pair", TableForeachConfig, _foreach),
    "TableFreeze": _table_kind("TableFreeze", "Table Freeze", "Makes a table read-only using table.freeze()", TableNodeConfig, _freeze),
    "TableInsert": _table_kind("TableInsert", "Table Insert", "Inserts a value using table.insert()", TableInsertConfig, _insert),
    "TableIsFrozen": _table_kind("TableIsFrozen", "Table Is Frozen", "Checks whether a table is frozen", TableNodeConfig, _is_frozen),
    "TableMove": _table_kind("TableMove", "Table Move", "Copies a range of elements using table.move()", TableMoveConfig, _move),
    "TablePack": _table_kind("TablePack", "Table Pack", "Packs values into a table using table.pack()", TablePackConfig, _pack),
    "TableRemove": _table_kind("TableRemove", "Table Remove", "Removes an element using table.remove()", TableRemoveConfig, _remove),
    "TableSort": _table_kind("TableSort", "Table Sort", "Sorts a table in place using table.sort()", TableSortConfig, _sort),
    "TableUnpack": _table_kind("TableUnpack", "Table Unpack", "Returns the elements of a table using table.unpack()", TableUnpackConfig, _unpack),
}
