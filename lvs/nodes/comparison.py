"""Comparison operators. Equality accepts any operands; ordering needs numbers."""

from .helpers import ANY, BOOLEAN, NUMBER, operator_kind

CATEGORY = "Comparison"

NODE_KINDS = {
    "Equal": operator_kind("Equal", CATEGORY, "Equal", "True when a == b.", ANY, BOOLEAN),
    "NotEqual": operator_kind("NotEqual", CATEGORY, "Not Equal", "True when a ~= b.", ANY, BOOLEAN),
    "GreaterThan": operator_kind("GreaterThan", CATEGORY, "Greater Than", "True when a > b.", NUMBER, BOOLEAN),
    "GreaterThanOrEqual": operator_kind("GreaterThanOrEqual", CATEGORY, "Greater Than Or Equal", "True when a >= b.", NUMBER, BOOLEAN),
    "LessThan": operator_kind("LessThan", CATEGORY, "Less Than", "True when a < b.", NUMBER, BOOLEAN),
    "LessThanOrEqual": operator_kind("LessThanOrEqual", CATEGORY, "Less Than Or Equal", "True when a <= b.", NUMBER, BOOLEAN),
}
