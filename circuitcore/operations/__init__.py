"""
Small computer-algebra layer used to derive circuit equations.
"""

from .math import EquationMember, Symbol, format_number, latex_wrap, matrix_to_latex, matrix_to_repr  # noqa: F401
from .expression import (  # noqa: F401
    Display,
    Divide,
    Equal,
    Inverse,
    Multiply,
    Negate,
    Operation,
    OperationError,
    Power,
    Sum,
    Text,
    Value,
    Variable,
    evaluate,
    zeros,
)
from .mappings import apply_variables, expand, get_variables, linearize, simplify  # noqa: F401

__all__ = [
    "EquationMember",
    "Symbol",
    "format_number",
    "latex_wrap",
    "matrix_to_latex",
    "matrix_to_repr",
    "Operation",
    "OperationError",
    "Value",
    "Variable",
    "Negate",
    "Inverse",
    "Divide",
    "Multiply",
    "Sum",
    "Equal",
    "Power",
    "Text",
    "Display",
    "zeros",
    "evaluate",
    "simplify",
    "expand",
    "apply_variables",
    "get_variables",
    "linearize",
]
