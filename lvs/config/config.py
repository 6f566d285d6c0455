"""
Static configuration data for the LVS intellisense core.
This includes node mode defaults, Luau keyword tables, identifier rules,
autocomplete boundaries and token names for expression diagnostics.
"""

import re

# Scope ids produced by the mount hook: one scope per (node, kind).
SCOPE_ID_FORMAT = "{node_id}-{scope_kind}-scope"

# The mode each node kind falls back to when its configuration omits one.
# Binary operators all default to wired ("linear") operands.
DEFAULT_NODE_MODES = {
    "Add": "linear",
    "Subtract": "linear",
    "Multiply": "linear",
    "Divide": "linear",
    "Modulus": "linear",
    "Equal": "linear",
    "NotEqual": "linear",
    "GreaterThan": "linear",
    "GreaterThanOrEqual": "linear",
    "LessThan": "linear",
    "LessThanOrEqual": "linear",
    "And": "linear",
    "Or": "linear",
    "Not": "linear",
    "WhileLoop": "linear",
    "RepeatUntilLoop": "linear",
    "ReturnStatement": "linear",
    "ForLoop": "counting",
    "Number": "literal",
    "String": "literal",
    "Boolean": "literal",
    "TableCreate": "empty",
    "TableFind": "default",
    "TableInsert": "append",
    "TableMove": "same-table",
    "TableRemove": "last",
    "TableSort": "default",
    "TableUnpack": "all",
}

DEFAULT_FOR_LOOP_VARIABLE = "i"
DEFAULT_PACK_ARG_COUNT = 1
MAX_PACK_ARG_COUNT = 64

# Luau reserved words can never name a symbol.
RESERVED_KEYWORDS = {
    "and",
    "break",
    "do",
    "else",
    "elseif",
    "end",
    "false",
    "for",
    "function",
    "if",
    "in",
    "local",
    "nil",
    "not",
    "or",
    "repeat",
    "return",
    "then",
    "true",
    "until",
    "while",
    "continue",
}

# Globals provided by the Luau runtime and Roblox. Expressions may reference
# these without a declaration node.
LUAU_GLOBALS = {
    "assert",
    "bit32",
    "buffer",
    "coroutine",
    "debug",
    "error",
    "getmetatable",
    "ipairs",
    "math",
    "next",
    "os",
    "pairs",
    "pcall",
    "print",
    "rawequal",
    "rawget",
    "rawlen",
    "rawset",
    "require",
    "select",
    "setmetatable",
    "string",
    "table",
    "tonumber",
    "tostring",
    "type",
    "typeof",
    "unpack",
    "utf8",
    "vector",
    "warn",
    "xpcall",
    # Roblox engine globals
    "game",
    "workspace",
    "script",
    "task",
    "tick",
    "time",
    "wait",
    "Instance",
    "Enum",
    "Vector3",
    "Vector2",
    "CFrame",
    "Color3",
    "UDim",
    "UDim2",
    "BrickColor",
    "TweenInfo",
}

VALID_IDENTIFIER_REGEX = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

# Completions only trigger on fragments that could start an identifier.
COMPLETION_TRIGGER_REGEX = re.compile(r"^[a-zA-Z_]")
PARTIAL_WORD_REGEX = re.compile(r"\w*$")

# Characters next to which an inserted completion needs no separating space.
COMPLETION_BOUNDARY_CHARS = set(" \t\n+-*/%()=<>!&|,~^#.:[]{}")

NUMERIC_TYPES = {"number"}

# Lark token names mapped to friendly, human-readable names.
FRIENDLY_TOKEN_NAMES = {
    "NAME": "a variable or function name",
    "NUMBER": "a number",
    "STRING": "a string literal",
    "LPAR": "an opening parenthesis '('",
    "RPAR": "a closing parenthesis ')'",
    "LSQB": "an opening bracket '['",
    "RSQB": "a closing bracket ']'",
    "LBRACE": "an opening brace '{'",
    "RBRACE": "a closing brace '}'",
    "COMMA": "a comma ','",
    "DOT": "a dot '.'",
    "COLON": "a colon ':'",
    "COMP_OP": "a comparison operator",
    "PLUS": "the operator '+'",
    "MINUS": "the operator '-'",
    "MUL_OP": "an operator '*', '/', '//' or '%'",
    "CONCAT": "the concatenation operator '..'",
    "POW": "the operator '^'",
    "HASH": "the length operator '#'",
    "EQ": "an equals sign '='",
    "SEMICOLON": "a semicolon ';'",
    "AND": "the 'and' keyword",
    "OR": "the 'or' keyword",
    "NOT": "the 'not' keyword",
    "NIL": "nil",
    "TRUE": "true",
    "FALSE": "false",
    "IF": "the 'if' keyword",
    "THEN": "the 'then' keyword",
    "ELSE": "the 'else' keyword",
    "ELSEIF": "the 'elseif' keyword",
    "$END": "the end of the expression",
}
