from .helpers import BOOLEAN, operator_kind

CATEGORY = "Logical"

NODE_KINDS = {
    "And": operator_kind("And", CATEGORY, "And", "True when both a and b are true.", BOOLEAN, BOOLEAN),
    "Or": operator_kind("Or", CATEGORY, "Or", "True when a or b is true.", BOOLEAN, BOOLEAN),
    "Not": operator_kind("Not", CATEGORY, "Not", "Negates a boolean.", BOOLEAN, BOOLEAN, arity=1),
}
