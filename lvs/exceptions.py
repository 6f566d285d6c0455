"""
Error codes and exception types for the LVS intellisense core.

The registry itself never raises for domain conditions: node-level problems are
reported as diagnostics built from these codes. Only boundary code (loading a
graph file, the CLI) raises LvsError.
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):

    # --- Node Configuration Diagnostics ---
    UNKNOWN_NODE_KIND = "Unknown node kind '{kind}'."
    INVALID_CONFIGURATION = "Invalid configuration for '{kind}': {details}"

    # --- Reference Diagnostics ---
    FUNCTION_NOT_FOUND = "Function '{name}' was deleted or does not exist."
    VARIABLE_NOT_FOUND = "Variable '{name}' is not declared in this scope."
    UNDEFINED_IDENTIFIER = "Identifier '{name}' is not visible from this node."
    INVALID_IDENTIFIER = "'{name}' is not a valid identifier name."
    RESERVED_KEYWORD_AS_IDENTIFIER = "Cannot use reserved keyword '{name}' as a name."

    # --- Expression Diagnostics ---
    EXPRESSION_EMPTY = "The {field} expression is empty."
    EXPRESSION_UNMATCHED_BRACKET = "Unmatched bracket '{char}' at column {column}."
    EXPRESSION_UNCLOSED_STRING = "Unclosed string literal starting at column {column}."
    EXPRESSION_SYNTAX = "Invalid syntax at column {column}. {details}"
    EXPRESSION_INVALID_CHARACTER = "Invalid character '{char}' at column {column}."
    EXPRESSION_TOO_DEEP = "The expression is nested too deeply to analyze."

    # --- Connection Checks ---
    UNKNOWN_SOURCE_SOCKET = "Node '{node}' has no output socket '{handle}'."
    UNKNOWN_TARGET_SOCKET = "Node '{node}' has no input socket '{handle}'."
    TYPE_MISMATCH = "Cannot connect a '{source_type}' output to a '{target_type}' input."
    UNKNOWN_EDGE_ENDPOINT = "Edge '{edge}' references missing node '{node}'."

    # --- Graph Loading Errors ---
    GRAPH_FILE_NOT_FOUND = "Graph file not found: '{path}'"
    GRAPH_INVALID_JSON = "Graph file '{path}' is not valid JSON: {details}"
    GRAPH_SCHEMA_MISMATCH = "Graph file '{path}' does not match the editor graph format: {details}"
    GRAPH_NODE_NOT_FOUND = "Node '{node}' does not exist in the graph."


class LvsError(Exception):
    def __init__(self, code: ErrorCode, file_path: Optional[str] = None, **kwargs):
        self.code = code
        self.file_path = file_path
        self.details = kwargs

        core_message = code.value.format(**kwargs)
        location_prefix = f"Error in '{file_path}': " if file_path else ""
        self.message = location_prefix + core_message

        super().__init__(self.message)


class InternalRegistryError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
