"""
Defines the syntax tree produced for inline Luau expressions.

Only what the editor needs is modelled: the shape of the expression and the
position of every node, so that referenced names can be checked against the
symbols visible from the node that owns the expression.
"""

from typing import List, Optional, Tuple, Union

from pydantic import BaseModel


class Span(BaseModel):
    """1-based columns of a single-line expression; `e_col` is exclusive."""

    s_col: int
    e_col: int


class ExprNode(BaseModel):
    span: Span


# --- Atoms ---


class Identifier(ExprNode):
    name: str


class NumberLiteral(ExprNode):
    value: Union[int, float]


class StringLiteral(ExprNode):
    value: str


class BooleanLiteral(ExprNode):
    value: bool


class NilLiteral(ExprNode):
    pass


Expression = Union[
    Identifier,
    NumberLiteral,
    StringLiteral,
    BooleanLiteral,
    NilLiteral,
    "UnaryOperation",
    "BinaryOperation",
    "FieldAccess",
    "IndexAccess",
    "Call",
    "MethodCall",
    "TableConstructor",
    "IfExpression",
]


# --- Operators ---


class UnaryOperation(ExprNode):
    operator: str
    operand: Expression


class BinaryOperation(ExprNode):
    operator: str
    left: Expression
    right: Expression


# --- Postfix ---


class FieldAccess(ExprNode):
    target: Expression
    field: str


class IndexAccess(ExprNode):
    target: Expression
    index: Expression


class Call(ExprNode):
    function: Expression
    args: List[Expression]


class MethodCall(ExprNode):
    target: Expression
    method: str
    args: List[Expression]


# --- Constructors ---


class TableField(BaseModel):
    key: Optional[Union[str, Expression]] = None
    value: Expression


class TableConstructor(ExprNode):
    fields: List[TableField]


class IfExpression(ExprNode):
    # (condition, value) pairs for `if` and every `elseif`.
    branches: List[Tuple[Expression, Expression]]
    otherwise: Expression


for _model in (UnaryOperation, BinaryOperation, FieldAccess, IndexAccess, Call, MethodCall, TableField, TableConstructor, IfExpression):
    _model.model_rebuild()
