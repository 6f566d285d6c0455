from importlib.resources import files as pkg_files
from typing import Iterable, Iterator, List, Optional

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError, VisitError

from lvs.config.config import LUAU_GLOBALS
from lvs.exceptions import ErrorCode, LvsError
from lvs.sockets.classes import Diagnostic, Severity

from .classes import *
from .helpers import _translate_lark_error, pre_parsing_checks

# The "start" argument must match the start rule of the .lark file.
luau_expression_grammar = (pkg_files("lvs.expressions") / "luau_expression.lark").read_text()
LARK_PARSER = Lark(luau_expression_grammar, start="start", parser="earley")

BINARY_OPERATOR_TOKENS = {"OR", "AND", "COMP_OP", "CONCAT", "PLUS", "MINUS", "MUL_OP", "POW"}


def _nodes(items) -> list:
    return [item for item in items if isinstance(item, ExprNode)]


def _tokens(items, *types) -> List[Token]:
    return [item for item in items if isinstance(item, Token) and item.type in types]


class LuauExpressionTransformer(Transformer):
    """
    Transforms the Lark parse tree of an inline expression into the syntax tree
    of `lvs.expressions.classes`. Methods are called bottom-up, one per rule or
    alias of the grammar; inlined rules (prefixed with `?`) only reach here when
    they have more than one child.
    """

    # --- Helper methods for creating spans ---
    def _span_from_token(self, token: Token) -> Span:
        return Span(s_col=token.column, e_col=token.end_column)

    def _span_from_items(self, items) -> Span:
        located = [item for item in items if isinstance(item, (ExprNode, Token))]
        if not located:
            return Span(s_col=1, e_col=1)
        first, last = located[0], located[-1]
        s_col = first.span.s_col if isinstance(first, ExprNode) else first.column
        e_col = last.span.e_col if isinstance(last, ExprNode) else last.end_column
        return Span(s_col=s_col, e_col=e_col)

    def _build_infix_tree(self, items):
        """Folds `a op b op c` into a left-associative tree."""
        operands = _nodes(items)
        operators = _tokens(items, *BINARY_OPERATOR_TOKENS)
        tree = operands[0]
        for op, right in zip(operators, operands[1:]):
            span = Span(s_col=tree.span.s_col, e_col=right.span.e_col)
            tree = BinaryOperation(operator=op.value, left=tree, right=right, span=span)
        return tree

    # --- Atoms ---
    def identifier(self, items):
        token = items[0]
        return Identifier(name=token.value, span=self._span_from_token(token))

    def number(self, items):
        token = items[0]
        raw = token.value.replace("_", "")
        if raw[:2].lower() == "0x":
            value = int(raw[2:], 16)
        elif raw[:2].lower() == "0b":
            value = int(raw[2:], 2)
        elif "." in raw or "e" in raw.lower():
            value = float(raw)
        else:
            value = int(raw)
        return NumberLiteral(value=value, span=self._span_from_token(token))

    def string(self, items):
        token = items[0]
        return StringLiteral(value=token.value[1:-1], span=self._span_from_token(token))

    def nil(self, items):
        return NilLiteral(span=self._span_from_token(items[0]))

    def true(self, items):
        return BooleanLiteral(value=True, span=self._span_from_token(items[0]))

    def false(self, items):
        return BooleanLiteral(value=False, span=self._span_from_token(items[0]))

    def group(self, items):
        return _nodes(items)[0]

    # --- Operators ---
    def or_expression(self, items):
        return self._build_infix_tree(items)

    def and_expression(self, items):
        return self._build_infix_tree(items)

    def comparison(self, items):
        return self._build_infix_tree(items)

    def concatenation(self, items):
        return self._build_infix_tree(items)

    def sum(self, items):
        return self._build_infix_tree(items)

    def product(self, items):
        return self._build_infix_tree(items)

    def power(self, items):
        return self._build_infix_tree(items)

    def _unary(self, operator: str, items):
        return UnaryOperation(operator=operator, operand=_nodes(items)[0], span=self._span_from_items(items))

    def not_operation(self, items):
        return self._unary("not", items)

    def negation(self, items):
        return self._unary("-", items)

    def length(self, items):
        return self._unary("#", items)

    # --- Postfix ---
    def arguments(self, items):
        return _nodes(items)

    def _args(self, items) -> list:
        return next((item for item in items if isinstance(item, list)), [])

    def field_access(self, items):
        target = _nodes(items)[0]
        name = _tokens(items, "NAME")[-1]
        return FieldAccess(target=target, field=name.value, span=self._span_from_items(items))

    def index_access(self, items):
        target, index = _nodes(items)
        return IndexAccess(target=target, index=index, span=self._span_from_items(items))

    def call(self, items):
        function = _nodes(items)[0]
        return Call(function=function, args=self._args(items), span=self._span_from_items(items))

    def method_call(self, items):
        target = _nodes(items)[0]
        method = _tokens(items, "NAME")[-1]
        return MethodCall(target=target, method=method.value, args=self._args(items), span=self._span_from_items(items))

    # --- Constructors ---
    def keyed_field(self, items):
        key, value = _nodes(items)
        return TableField(key=key, value=value)

    def named_field(self, items):
        name = _tokens(items, "NAME")[0]
        return TableField(key=name.value, value=_nodes(items)[0])

    def positional_field(self, items):
        return TableField(value=_nodes(items)[0])

    def table(self, items):
        fields = [item for item in items if isinstance(item, TableField)]
        return TableConstructor(fields=fields, span=self._span_from_items(items))

    def if_expression(self, items):
        parts = _nodes(items)
        *pairs, otherwise = parts
        branches = [(pairs[i], pairs[i + 1]) for i in range(0, len(pairs), 2)]
        return IfExpression(branches=branches, otherwise=otherwise, span=self._span_from_items(items))


def parse_expression(expression: str, field: str = "expression") -> Expression:
    """Parses an inline Luau expression. Raises LvsError with an EXPRESSION_* code."""
    if expression is None or not expression.strip():
        raise LvsError(ErrorCode.EXPRESSION_EMPTY, field=field)

    pre_parsing_checks(expression)

    try:
        parse_tree = LARK_PARSER.parse(expression)
        return LuauExpressionTransformer().transform(parse_tree)
    except VisitError as e:
        if isinstance(e.orig_exc, RecursionError):
            raise LvsError(ErrorCode.EXPRESSION_TOO_DEEP) from e
        raise _translate_lark_error(e, expression) from e
    except LarkError as e:
        raise _translate_lark_error(e, expression) from e
    except RecursionError as e:
        raise LvsError(ErrorCode.EXPRESSION_TOO_DEEP) from e


def referenced_identifiers(node) -> Iterator[Identifier]:
    """Yields every free name the expression reads. Field and method names are not free names."""
    if isinstance(node, Identifier):
        yield node
    elif isinstance(node, (list, tuple)):
        for item in node:
            yield from referenced_identifiers(item)
    elif isinstance(node, TableField):
        if not isinstance(node.key, str):
            yield from referenced_identifiers(node.key)
        yield from referenced_identifiers(node.value)
    elif isinstance(node, ExprNode):
        for field_name in type(node).model_fields:
            if field_name == "span":
                continue
            yield from referenced_identifiers(getattr(node, field_name))


def check_expression(
    expression: Optional[str],
    field: str = "expression",
    visible_names: Optional[Iterable[str]] = None,
    socket_id: Optional[str] = None,
) -> List[Diagnostic]:
    """
    Validates an expression typed into a node and returns diagnostics instead
    of raising. When `visible_names` is given, every free name that is neither
    visible nor a Luau builtin is reported as a warning.
    """
    try:
        tree = parse_expression(expression or "", field=field)
    except LvsError as e:
        return [Diagnostic.from_error(e, socket_id=socket_id)]

    if visible_names is None:
        return []

    try:
        identifiers = list(referenced_identifiers(tree))
    except RecursionError:
        return [Diagnostic.from_code(ErrorCode.EXPRESSION_TOO_DEEP, socket_id=socket_id)]

    known = set(visible_names) | LUAU_GLOBALS
    diagnostics: List[Diagnostic] = []
    reported = set()
    for identifier in identifiers:
        if identifier.name in known or identifier.name in reported:
            continue
        reported.add(identifier.name)
        diagnostics.append(Diagnostic.from_code(ErrorCode.UNDEFINED_IDENTIFIER, Severity.WARNING, socket_id=socket_id, name=identifier.name))
    return diagnostics
