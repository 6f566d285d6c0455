from lark.exceptions import LarkError, UnexpectedCharacters, UnexpectedEOF, UnexpectedToken

from lvs.config.config import FRIENDLY_TOKEN_NAMES
from lvs.exceptions import ErrorCode, LvsError

BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}"}
OPENING_BRACKETS = set(BRACKET_PAIRS.keys())
CLOSING_BRACKETS = set(BRACKET_PAIRS.values())
QUOTES = {'"', "'", "`"}

# Characters that may legally appear outside string literals.
EXPRESSION_CHARS = set("+-*/%^#=~<>(){}[];:,.\"'`_ \t")


def pre_parsing_checks(expression: str):
    """
    Scans the expression for unbalanced brackets and unterminated string literals
    before handing it to the parser, so the most common typing mistakes get a
    precise message instead of a generic syntax error.
    """
    bracket_stack = []  # (char, column)
    quote, quote_col = None, 0
    escaped = False

    for col_idx, char in enumerate(expression):
        col_num = col_idx + 1

        if quote is not None:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = None
            continue

        if char in QUOTES:
            quote, quote_col = char, col_num
        elif char in OPENING_BRACKETS:
            bracket_stack.append((char, col_num))
        elif char in CLOSING_BRACKETS:
            if not bracket_stack:
                raise LvsError(ErrorCode.EXPRESSION_UNMATCHED_BRACKET, char=char, column=col_num)
            opening_char, _ = bracket_stack.pop()
            if BRACKET_PAIRS[opening_char] != char:
                raise LvsError(ErrorCode.EXPRESSION_UNMATCHED_BRACKET, char=char, column=col_num)

    if quote is not None:
        raise LvsError(ErrorCode.EXPRESSION_UNCLOSED_STRING, column=quote_col)

    if bracket_stack:
        opening_char, col_num = bracket_stack[-1]
        raise LvsError(ErrorCode.EXPRESSION_UNMATCHED_BRACKET, char=opening_char, column=col_num)


def _describe_expected(expected) -> str:
    friendly_expected = sorted({FRIENDLY_TOKEN_NAMES.get(e, e) for e in expected or ()})
    if len(friendly_expected) > 1:
        return f"Expected one of: {', '.join(friendly_expected[:-1])} or {friendly_expected[-1]}"
    if friendly_expected:
        return f"Expected {friendly_expected[0]}"
    return ""


def _translate_lark_error(err: LarkError, expression: str) -> LvsError:
    """Translates a generic LarkError into a user-friendly LvsError."""

    if isinstance(err, UnexpectedCharacters):
        if not (err.char.isalnum() or err.char in EXPRESSION_CHARS):
            return LvsError(ErrorCode.EXPRESSION_INVALID_CHARACTER, char=err.char, column=err.column)
        expected_str = _describe_expected(err.allowed)
        details = f"{expected_str}, but found '{err.char}' instead." if expected_str else f"Unexpected '{err.char}'."
        return LvsError(ErrorCode.EXPRESSION_SYNTAX, column=err.column, details=details)

    if isinstance(err, UnexpectedEOF):
        expected_str = _describe_expected(err.expected)
        details = f"{expected_str}, but reached the end of the expression instead." if expected_str else "The expression is incomplete."
        return LvsError(ErrorCode.EXPRESSION_SYNTAX, column=len(expression) + 1, details=details)

    if isinstance(err, UnexpectedToken):
        found_token = err.token
        expected_str = _describe_expected(err.expected)
        if found_token.type == "$END":
            found_str = "but reached the end of the expression instead."
            column = len(expression) + 1
        else:
            found_str = f"but found '{found_token.value}' instead."
            column = found_token.column
        details = f"{expected_str}, {found_str}" if expected_str else f"Found unexpected token '{found_token.value}'."
        return LvsError(ErrorCode.EXPRESSION_SYNTAX, column=column, details=details)

    # Fallback for any other Lark error
    return LvsError(ErrorCode.EXPRESSION_SYNTAX, column=getattr(err, "column", 1), details=str(err))
