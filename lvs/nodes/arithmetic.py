"""Arithmetic operators. All operands and results are numbers."""

from .helpers import NUMBER, operator_kind

CATEGORY = "Arithmetic"

NODE_KINDS = {
    "Add": operator_kind("Add", CATEGORY, "Add", "Adds two numbers (a + b).", NUMBER, NUMBER),
    "Subtract": operator_kind("Subtract", CATEGORY, "Subtract", "Subtracts b from a (a - b).", NUMBER, NUMBER),
    "Multiply": operator_kind("Multiply", CATEGORY, "Multiply", "Multiplies two numbers (a * b).", NUMBER, NUMBER),
    "Divide": operator_kind("Divide", CATEGORY, "Divide", "Divides a by b (a / b).", NUMBER, NUMBER),
    "Modulus": operator_kind("Modulus", CATEGORY, "Modulus", "Remainder of a divided by b (a % b).", NUMBER, NUMBER),
}
