from .arithmetic import NODE_KINDS as ARITHMETIC_KINDS
from .basic_types import NODE_KINDS as BASIC_TYPE_KINDS
from .comparison import NODE_KINDS as COMPARISON_KINDS
from .control_flow import NODE_KINDS as CONTROL_FLOW_KINDS
from .functions import NODE_KINDS as FUNCTION_KINDS
from .logical import NODE_KINDS as LOGICAL_KINDS
from .root import NODE_KINDS as ROOT_KINDS
from .side_effects import NODE_KINDS as SIDE_EFFECT_KINDS
from .table import NODE_KINDS as TABLE_KINDS
from .variables import NODE_KINDS as VARIABLE_KINDS

NODE_KINDS = {
    **ROOT_KINDS,
    **BASIC_TYPE_KINDS,
    **ARITHMETIC_KINDS,
    **COMPARISON_KINDS,
    **LOGICAL_KINDS,
    **CONTROL_FLOW_KINDS,
    **VARIABLE_KINDS,
    **FUNCTION_KINDS,
    **SIDE_EFFECT_KINDS,
    **TABLE_KINDS,
}
