"""
Branching, loops and jump statements. Loops and IfElse introduce a scope that
their body outputs lead into; ForLoop also declares its loop variable(s) there.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel

from lvs.config.config import DEFAULT_FOR_LOOP_VARIABLE, DEFAULT_NODE_MODES
from lvs.luau_types import LuauType
from lvs.registry.classes import ScopeKind, Variable
from lvs.sockets.classes import Diagnostic, NodeSockets, SocketContext, sockets
from lvs.sockets.node_kinds import NodeConfig, NodeKind

from .helpers import ANY, BOOLEAN, FLOW, NUMBER, ModeSwitchConfig, expression_diagnostics, identifier_diagnostics, is_valid_name, socket

CATEGORY = "Control Flow"


# --- IfElse ---


class ConditionBranch(BaseModel):
    id: str = "main"
    mode: Literal["literal", "expression"] = "literal"
    expression: Optional[str] = None


class IfElseConfig(NodeConfig):
    main_condition: ConditionBranch = ConditionBranch()
    else_if_branches: List[ConditionBranch] = []
    show_else: bool = True


def _if_else_sockets(config: IfElseConfig, ctx: SocketContext) -> NodeSockets:
    inputs = [socket("execute", "Execute", FLOW)]
    diagnostics: List[Diagnostic] = []

    if config.main_condition.mode == "literal":
        inputs.append(socket("condition", "Condition", BOOLEAN))
    else:
        diagnostics += expression_diagnostics(config.main_condition.expression, ctx, field="if condition")

    literal_branches = [b for b in config.else_if_branches if b.mode == "literal"]
    for i, _ in enumerate(literal_branches):
        inputs.append(socket(f"condition-{i}", f"Condition {i + 1}", BOOLEAN))
    for i, branch in enumerate(config.else_if_branches):
        if branch.mode == "expression":
            diagnostics += expression_diagnostics(branch.expression, ctx, field=f"else-if {i + 1} condition")

    outputs = [socket("then", "Then", FLOW)]
    outputs += [socket(f"elseif-{i}", f"Else If {i + 1}", FLOW) for i in range(len(config.else_if_branches))]
    if config.show_else:
        outputs.append(socket("else", "Else", FLOW))

    return NodeSockets(inputs=inputs, outputs=outputs, diagnostics=diagnostics)


# --- Condition ---


class ConditionConfig(NodeConfig):
    comparison_type: Literal["==", "~=", ">", "<", ">=", "<="] = "=="


def _condition_sockets(config: ConditionConfig, ctx: SocketContext) -> NodeSockets:
    return NodeSockets(inputs=sockets(("a", "A", ANY), ("b", "B", ANY)), outputs=sockets(("result", "Result", BOOLEAN)))


# --- Loops ---


class LoopConfig(ModeSwitchConfig):
    mode: Literal["linear", "expression"] = DEFAULT_NODE_MODES["WhileLoop"]
    description: Optional[str] = None


def _while_sockets(config: LoopConfig, ctx: SocketContext) -> NodeSockets:
    outputs = sockets(("loop", "Loop Body", FLOW), ("done", "Done", FLOW))
    if config.uses_expression:
        return NodeSockets(
            inputs=sockets(("execute", "Execute", FLOW)),
            outputs=outputs,
            diagnostics=expression_diagnostics(config.expression, ctx, field="loop condition"),
        )
    return NodeSockets(inputs=sockets(("execute", "Execute", FLOW), ("condition", "Condition", BOOLEAN)), outputs=outputs)


def _repeat_until_sockets(config: LoopConfig, ctx: SocketContext) -> NodeSockets:
    outputs = sockets(("loop", "Loop Body", FLOW), ("next", "Next", FLOW))
    if config.uses_expression:
        return NodeSockets(
            inputs=sockets(("prev", "Prev", FLOW)),
            outputs=outputs,
            diagnostics=expression_diagnostics(config.expression, ctx, field="until condition"),
        )
    return NodeSockets(inputs=sockets(("prev", "Prev", FLOW), ("condition", "Condition", BOOLEAN)), outputs=outputs)


class ForLoopConfig(NodeConfig):
    mode: Literal["counting", "generic"] = DEFAULT_NODE_MODES["ForLoop"]
    variable_name: str = DEFAULT_FOR_LOOP_VARIABLE
    start_value: Optional[str] = None
    end_value: Optional[str] = None
    step_value: Optional[str] = None
    iterable_expression: Optional[str] = None
    description: Optional[str] = None

    @property
    def loop_variables(self) -> List[str]:
        """`i` in counting mode; `k, v` style lists are allowed in generic mode."""
        raw = self.variable_name.strip() or DEFAULT_FOR_LOOP_VARIABLE
        if self.mode == "counting":
            return [raw]
        return [name.strip() for name in raw.split(",") if name.strip()]


def _for_loop_sockets(config: ForLoopConfig, ctx: SocketContext) -> NodeSockets:
    outputs = sockets(("loop", "Loop Body", FLOW), ("done", "Done", FLOW), ("index", "Index", NUMBER))

    diagnostics: List[Diagnostic] = []
    for name in config.loop_variables:
        diagnostics += identifier_diagnostics(name)

    if config.mode == "counting":
        inputs = sockets(
            ("execute", "Execute", FLOW),
            ("start", "From", NUMBER),
            ("end", "To", NUMBER),
            ("step", "Step", NUMBER),
        )
        return NodeSockets(inputs=inputs, outputs=outputs, diagnostics=diagnostics)

    diagnostics += expression_diagnostics(config.iterable_expression, ctx, field="iterable")
    return NodeSockets(inputs=sockets(("execute", "Execute", FLOW)), outputs=outputs, diagnostics=diagnostics)


def _for_loop_symbols(config: ForLoopConfig) -> List[Variable]:
    loop_type = LuauType.NUMBER if config.mode == "counting" else LuauType.ANY
    return [
        Variable(name=name, type=loop_type, description="Loop variable")
        for name in config.loop_variables
        if is_valid_name(name)
    ]


# --- Jumps ---


class StatementConfig(NodeConfig):
    description: Optional[str] = None


class ReturnConfig(ModeSwitchConfig):
    mode: Literal["linear", "expression"] = DEFAULT_NODE_MODES["ReturnStatement"]
    description: Optional[str] = None


def _break_sockets(config: StatementConfig, ctx: SocketContext) -> NodeSockets:
    return NodeSockets(inputs=sockets(("execute", "Execute", FLOW)), outputs=[])


def _continue_sockets(config: StatementConfig, ctx: SocketContext) -> NodeSockets:
    return NodeSockets(inputs=sockets(("prev", "Prev", FLOW)), outputs=[])


def _return_sockets(config: ReturnConfig, ctx: SocketContext) -> NodeSockets:
    if config.uses_expression:
        return NodeSockets(
            inputs=sockets(("execute", "Execute", FLOW)),
            outputs=[],
            diagnostics=expression_diagnostics(config.expression, ctx, field="return"),
        )
    return NodeSockets(inputs=sockets(("execute", "Execute", FLOW), ("value", "Value", ANY)), outputs=[])


NODE_KINDS = {
    "IfElse": NodeKind(
        kind="IfElse",
        category=CATEGORY,
        display_name="If / Else",
        description="Runs the first branch whose condition holds.",
        config_model=IfElseConfig,
        compute_sockets=_if_else_sockets,
        scope_kind=ScopeKind.BLOCK,
        body_outputs=("then", "elseif-*", "else"),
    ),
    "Condition": NodeKind(
        kind="Condition",
        category=CATEGORY,
        display_name="Condition",
        description="Compares two values with the selected operator.",
        config_model=ConditionConfig,
        compute_sockets=_condition_sockets,
    ),
    "WhileLoop": NodeKind(
        kind="WhileLoop",
        category=CATEGORY,
        display_name="While Loop",
        description="Repeats its body while the condition holds.",
        config_model=LoopConfig,
        compute_sockets=_while_sockets,
        scope_kind=ScopeKind.LOOP,
        body_outputs=("loop",),
    ),
    "RepeatUntilLoop": NodeKind(
        kind="RepeatUntilLoop",
        category=CATEGORY,
        display_name="Repeat Until",
        description="Runs its body, then repeats until the condition holds.",
        config_model=LoopConfig,
        compute_sockets=_repeat_until_sockets,
        scope_kind=ScopeKind.LOOP,
        body_outputs=("loop",),
    ),
    "ForLoop": NodeKind(
        kind="ForLoop",
        category=CATEGORY,
        display_name="For Loop",
        description="Numeric (counting) or generic (iterator) for loop.",
        config_model=ForLoopConfig,
        compute_sockets=_for_loop_sockets,
        scope_kind=ScopeKind.LOOP,
        body_outputs=("loop",),
        declares="variable",
        scope_symbols=_for_loop_symbols,
    ),
    "BreakStatement": NodeKind(
        kind="BreakStatement",
        category=CATEGORY,
        display_name="Break",
        description="Exits the innermost loop.",
        config_model=StatementConfig,
        compute_sockets=_break_sockets,
    ),
    "ContinueStatement": NodeKind(
        kind="ContinueStatement",
        category=CATEGORY,
        display_name="Continue",
        description="Skips to the next iteration of the innermost loop.",
        config_model=StatementConfig,
        compute_sockets=_continue_sockets,
    ),
    "ReturnStatement": NodeKind(
        kind="ReturnStatement",
        category=CATEGORY,
        display_name="Return",
        description="Returns from the enclosing function.",
        config_model=ReturnConfig,
        compute_sockets=_return_sockets,
    ),
}
