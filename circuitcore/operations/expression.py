"""
Symbolic expression trees.

An :class:`Operation` is one of a closed set of node kinds. Nodes are
immutable; every transformation (``simplify``, ``expand``,
``apply_variables``) returns a new tree and leaves the original untouched.
Rendering never evaluates, and ``value`` folds the tree to a float.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np

from .math import EquationMember, format_number, matrix_to_latex, matrix_to_repr


class OperationError(ArithmeticError):
    """Raised when a tree cannot be evaluated or linearized."""


# binding strength used to decide where parentheses are needed
_SUM = 1
_PRODUCT = 2
_UNARY = 3
_POWER = 4
_ATOM = 5


class Operation(ABC):
    precedence: int = _ATOM

    @abstractmethod
    def value(self) -> float:
        """Fold the tree to a number."""

    @abstractmethod
    def equation_repr(self) -> str:
        """Plain-text rendering."""

    @abstractmethod
    def latex_string(self) -> str:
        """LaTeX rendering."""

    def children(self) -> Tuple[Operation, ...]:
        return ()

    def rebuild(self, children: Iterable[Operation]) -> Operation:
        """Return a node of the same kind over ``children``."""
        return self

    # -- tree passes (implemented in mappings) --

    def simplify(self) -> Operation:
        from .mappings import simplify
        return simplify(self)

    def expand(self) -> Operation:
        from .mappings import expand
        return expand(self)

    def apply_variables(self) -> Operation:
        from .mappings import apply_variables
        return apply_variables(self)

    def get_variables(self) -> List[EquationMember]:
        from .mappings import get_variables
        return get_variables(self)

    def contains_variable(self, member: EquationMember) -> bool:
        return any(v is member for v in self.get_variables())

    def get_coefficient(self, member: EquationMember) -> float:
        from .mappings import linearize
        coefficients, _ = linearize(self)
        return coefficients.get(id(member), 0.0)

    def constant_term(self) -> float:
        from .mappings import linearize
        _, constant = linearize(self)
        return constant

    # -- convenience operators --

    def __add__(self, other: Operation) -> Operation:
        return Sum([self, other])

    def __sub__(self, other: Operation) -> Operation:
        return Sum([self, Negate(other)])

    def __neg__(self) -> Operation:
        return Negate(self)

    def __mul__(self, other: Operation) -> Operation:
        return Multiply([self, other])

    def __truediv__(self, other: Operation) -> Operation:
        return Divide(self, other)

    def __str__(self) -> str:
        return self.equation_repr()


def _wrap(op: Operation, below: int, latex: bool) -> str:
    text = op.latex_string() if latex else op.equation_repr()
    if op.precedence < below:
        return f"\\left({text}\\right)" if latex else f"({text})"
    return text


@dataclass(frozen=True)
class Value(Operation):
    number: float

    def value(self) -> float:
        return float(self.number)

    def equation_repr(self) -> str:
        return format_number(self.number)

    def latex_string(self) -> str:
        return format_number(self.number)

    @property
    def precedence(self) -> int:
        return _UNARY if self.number < 0 else _ATOM


@dataclass(frozen=True)
class Variable(Operation):
    member: EquationMember

    def value(self) -> float:
        return float(self.member.value)

    def equation_repr(self) -> str:
        return self.member.equation_repr()

    def latex_string(self) -> str:
        return self.member.latex_string()


@dataclass(frozen=True)
class Negate(Operation):
    operand: Operation
    precedence = _UNARY

    def value(self) -> float:
        return -self.operand.value()

    def equation_repr(self) -> str:
        if isinstance(self.operand, Negate):
            return self.operand.operand.equation_repr()
        return "-" + _wrap(self.operand, _PRODUCT, latex=False)

    def latex_string(self) -> str:
        if isinstance(self.operand, Negate):
            return self.operand.operand.latex_string()
        return "-" + _wrap(self.operand, _PRODUCT, latex=True)

    def children(self) -> Tuple[Operation, ...]:
        return (self.operand,)

    def rebuild(self, children: Iterable[Operation]) -> Operation:
        (operand,) = tuple(children)
        return Negate(operand)


@dataclass(frozen=True)
class Inverse(Operation):
    operand: Operation
    precedence = _PRODUCT

    def value(self) -> float:
        denominator = self.operand.value()
        if denominator == 0:
            raise OperationError(f"Division by zero in 1/{self.operand.equation_repr()}")
        return 1.0 / denominator

    def equation_repr(self) -> str:
        return "1/" + _wrap(self.operand, _POWER, latex=False)

    def latex_string(self) -> str:
        return "\\frac{1}{%s}" % self.operand.latex_string()

    def children(self) -> Tuple[Operation, ...]:
        return (self.operand,)

    def rebuild(self, children: Iterable[Operation]) -> Operation:
        (operand,) = tuple(children)
        return Inverse(operand)


@dataclass(frozen=True)
class Divide(Operation):
    numerator: Operation
    denominator: Operation
    precedence = _PRODUCT

    def value(self) -> float:
        denominator = self.denominator.value()
        if denominator == 0:
            raise OperationError(f"Division by zero in {self.equation_repr()}")
        return self.numerator.value() / denominator

    def equation_repr(self) -> str:
        return "{}/{}".format(
            _wrap(self.numerator, _PRODUCT, latex=False),
            _wrap(self.denominator, _POWER, latex=False),
        )

    def latex_string(self) -> str:
        return "\\frac{%s}{%s}" % (self.numerator.latex_string(), self.denominator.latex_string())

    def children(self) -> Tuple[Operation, ...]:
        return (self.numerator, self.denominator)

    def rebuild(self, children: Iterable[Operation]) -> Operation:
        numerator, denominator = tuple(children)
        return Divide(numerator, denominator)


@dataclass(frozen=True)
class Multiply(Operation):
    factors: Tuple[Operation, ...]
    precedence = _PRODUCT

    def __post_init__(self) -> None:
        object.__setattr__(self, "factors", tuple(self.factors))

    def value(self) -> float:
        result = 1.0
        for factor in self.factors:
            result *= factor.value()
        return result

    def equation_repr(self) -> str:
        if not self.factors:
            return "1"
        return " * ".join(_wrap(f, _PRODUCT, latex=False) for f in self.factors)

    def latex_string(self) -> str:
        if not self.factors:
            return "1"
        return " \\cdot ".join(_wrap(f, _PRODUCT, latex=True) for f in self.factors)

    def children(self) -> Tuple[Operation, ...]:
        return self.factors

    def rebuild(self, children: Iterable[Operation]) -> Operation:
        return Multiply(list(children))


def _join_terms(terms: Tuple[Operation, ...], latex: bool) -> str:
    if not terms:
        return "0"
    parts: List[str] = []
    for i, term in enumerate(terms):
        negative = isinstance(term, Negate) and not isinstance(term.operand, Negate)
        if isinstance(term, Value) and term.number < 0:
            body = format_number(-term.number)
            negative = True
        elif negative and isinstance(term.operand, Value) and term.operand.number < 0:
            body = format_number(-term.operand.number)
            negative = False
        elif negative:
            body = _wrap(term.operand, _PRODUCT, latex)
        else:
            body = term.latex_string() if latex else term.equation_repr()
        if i == 0:
            parts.append("-" + body if negative else body)
        else:
            parts.append((" - " if negative else " + ") + body)
    return "".join(parts)


@dataclass(frozen=True)
class Sum(Operation):
    terms: Tuple[Operation, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "terms", tuple(self.terms))

    def value(self) -> float:
        total = 0.0
        for term in self.terms:
            total += term.value()
        return total

    def equation_repr(self) -> str:
        return _join_terms(self.terms, latex=False)

    def latex_string(self) -> str:
        return _join_terms(self.terms, latex=True)

    def children(self) -> Tuple[Operation, ...]:
        return self.terms

    def rebuild(self, children: Iterable[Operation]) -> Operation:
        return Sum(list(children))

    @property
    def precedence(self) -> int:
        if len(self.terms) == 1:
            return self.terms[0].precedence
        return _SUM if self.terms else _ATOM


@dataclass(frozen=True)
class Equal(Operation):
    lhs: Operation
    rhs: Operation
    precedence = 0

    def value(self) -> float:
        raise OperationError("Cannot get value of an equation")

    def equation_repr(self) -> str:
        return f"{self.lhs.equation_repr()} = {self.rhs.equation_repr()}"

    def latex_string(self) -> str:
        return f"{self.lhs.latex_string()} = {self.rhs.latex_string()}"

    def children(self) -> Tuple[Operation, ...]:
        return (self.lhs, self.rhs)

    def rebuild(self, children: Iterable[Operation]) -> Operation:
        lhs, rhs = tuple(children)
        return Equal(lhs, rhs)


@dataclass(frozen=True)
class Power(Operation):
    base: Operation
    exponent: Operation
    precedence = _POWER

    def value(self) -> float:
        base = self.base.value()
        exponent = self.exponent.value()
        if base == 0 and exponent < 0:
            raise OperationError(f"Division by zero in {self.equation_repr()}")
        return base ** exponent

    def equation_repr(self) -> str:
        return "{}^{}".format(
            _wrap(self.base, _ATOM, latex=False),
            _wrap(self.exponent, _ATOM, latex=False),
        )

    def latex_string(self) -> str:
        return "{%s}^{%s}" % (_wrap(self.base, _ATOM, latex=True), self.exponent.latex_string())

    def children(self) -> Tuple[Operation, ...]:
        return (self.base, self.exponent)

    def rebuild(self, children: Iterable[Operation]) -> Operation:
        base, exponent = tuple(children)
        return Power(base, exponent)


@dataclass(frozen=True)
class Text(Operation):
    text: str

    def value(self) -> float:
        raise OperationError("Text has no numeric value")

    def equation_repr(self) -> str:
        return self.text

    def latex_string(self) -> str:
        return self.text


@dataclass(frozen=True, eq=False)
class Display(Operation):
    """A vector or matrix shown inside an equation (floats or operations)."""

    matrix: np.ndarray

    def value(self) -> float:
        raise OperationError("A matrix has no scalar value")

    def equation_repr(self) -> str:
        return matrix_to_repr(self.matrix)

    def latex_string(self) -> str:
        return matrix_to_latex(self.matrix)


def zeros(shape) -> np.ndarray:
    """Object array filled with ``Value(0)``, ready to hold operations."""
    out = np.empty(shape, dtype=object)
    for index in np.ndindex(out.shape):
        out[index] = Value(0.0)
    return out


def evaluate(matrix: np.ndarray) -> np.ndarray:
    """Numeric float array from an object array of operations."""
    matrix = np.asarray(matrix, dtype=object)
    out = np.empty(matrix.shape, dtype=float)
    for index in np.ndindex(matrix.shape):
        entry = matrix[index]
        out[index] = entry.value() if isinstance(entry, Operation) else float(entry)
    return out
