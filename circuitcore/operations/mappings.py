"""
Tree passes over :mod:`circuitcore.operations.expression`.

Each pass dispatches on the node kind and rebuilds bottom-up. None of them
mutate their input.
"""

from __future__ import annotations
from itertools import product
from typing import Dict, List, Tuple

from .expression import (
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
)
from .math import EquationMember

Coefficients = Dict[int, float]


def _is_constant(op: Operation) -> bool:
    if isinstance(op, Value):
        return True
    if isinstance(op, (Variable, Text, Display, Equal)):
        return False
    return all(_is_constant(c) for c in op.children())


def _unfolded(op: Operation) -> bool:
    """True when `op` holds a constant sub-tree that could not be folded (division by zero)."""
    if not isinstance(op, Value) and _is_constant(op):
        return True
    return any(_unfolded(c) for c in op.children())


def _flatten(terms, kind) -> List[Operation]:
    out: List[Operation] = []
    for term in terms:
        if isinstance(term, kind):
            out.extend(_flatten(term.children(), kind))
        else:
            out.append(term)
    return out


# ---------------------------------------------------------------- simplify


def simplify(op: Operation) -> Operation:
    """
    Algebraic clean-up.

    Folds constant sub-trees, flattens nested sums and products, drops
    additive zeros and multiplicative ones, and removes double negation.
    Sub-trees that cannot be folded (division by zero) are kept as they are.
    """
    children = op.children()
    if children:
        op = op.rebuild(simplify(c) for c in children)

    if not isinstance(op, Value) and _is_constant(op):
        try:
            return Value(op.value())
        except OperationError:
            pass

    if isinstance(op, Negate):
        if isinstance(op.operand, Negate):
            return op.operand.operand
        return op
    if isinstance(op, Sum):
        return _simplify_sum(op)
    if isinstance(op, Multiply):
        return _simplify_product(op)
    if isinstance(op, Divide):
        return _simplify_divide(op)
    if isinstance(op, Inverse):
        if isinstance(op.operand, Inverse):
            return op.operand.operand
        return op
    if isinstance(op, Power):
        if op.exponent == Value(1.0):
            return op.base
        if op.exponent == Value(0.0):
            return Value(1.0)
        return op
    return op


def _simplify_sum(op: Sum) -> Operation:
    constant = 0.0
    terms: List[Operation] = []
    for term in _flatten(op.terms, Sum):
        if isinstance(term, Value):
            constant += term.number
        else:
            terms.append(term)
    if constant != 0:
        terms.append(Value(constant))
    if not terms:
        return Value(0.0)
    if len(terms) == 1:
        return terms[0]
    return Sum(terms)


def _simplify_product(op: Multiply) -> Operation:
    constant = 1.0
    factors: List[Operation] = []
    for factor in _flatten(op.factors, Multiply):
        if isinstance(factor, Value):
            constant *= factor.number
        else:
            factors.append(factor)
    if constant == 0 and not any(_unfolded(f) for f in factors):
        return Value(0.0)
    if not factors:
        return Value(constant)
    rest = factors[0] if len(factors) == 1 else Multiply(factors)
    if constant == 1:
        return rest
    if constant == -1:
        return Negate(rest)
    return Multiply([Value(constant)] + factors)


def _simplify_divide(op: Divide) -> Operation:
    if op.denominator == Value(1.0):
        return op.numerator
    if op.denominator == Value(-1.0):
        return Negate(op.numerator)
    if op.numerator == Value(0.0) and op.denominator != Value(0.0) and not _unfolded(op.denominator):
        return Value(0.0)
    return op


# ------------------------------------------------------------------ expand


def expand(op: Operation) -> Operation:
    """
    Distribute products, quotients and negation over sums.

    The result is a flat sum of products wherever the tree allows it; an
    equation is expanded side by side.
    """
    children = op.children()
    if children:
        op = op.rebuild(expand(c) for c in children)

    if isinstance(op, Negate) and isinstance(op.operand, Sum):
        return Sum([expand(Negate(t)) for t in op.operand.terms])
    if isinstance(op, Divide) and isinstance(op.numerator, Sum):
        return Sum([expand(Divide(t, op.denominator)) for t in op.numerator.terms])
    if isinstance(op, Multiply) and any(isinstance(f, Sum) for f in op.factors):
        groups = [f.terms if isinstance(f, Sum) else (f,) for f in op.factors]
        return Sum([expand(Multiply(list(combo))) for combo in product(*groups)])
    if isinstance(op, Sum):
        return Sum(_flatten(op.terms, Sum))
    return op


# ------------------------------------------------------------- substitution


def apply_variables(op: Operation) -> Operation:
    """Replace every variable whose member has a known value by that value."""
    if isinstance(op, Variable):
        if op.member.is_known():
            return Value(float(op.member.value))
        return op
    children = op.children()
    if not children:
        return op
    return op.rebuild(apply_variables(c) for c in children)


def get_variables(op: Operation) -> List[EquationMember]:
    """Distinct members referenced by ``op`` in order of first appearance."""
    found: List[EquationMember] = []
    stack = [op]
    while stack:
        node = stack.pop()
        if isinstance(node, Variable):
            if not any(m is node.member for m in found):
                found.append(node.member)
            continue
        stack.extend(reversed(node.children()))
    return found


# ------------------------------------------------------------- linearize


def _scale(coefficients: Coefficients, factor: float) -> Coefficients:
    return {k: v * factor for k, v in coefficients.items()}


def _merge(a: Coefficients, b: Coefficients, sign: float = 1.0) -> Coefficients:
    out = dict(a)
    for k, v in b.items():
        out[k] = out.get(k, 0.0) + sign * v
    return out


def _is_linear_constant(coefficients: Coefficients) -> bool:
    return all(v == 0 for v in coefficients.values())


def linearize(op: Operation) -> Tuple[Coefficients, float]:
    """
    Split ``op`` into ``sum(coefficient * member) + constant``.

    Coefficients are keyed by ``id(member)``. An :class:`Equal` is read as
    ``lhs - rhs``. Raises :class:`OperationError` for anything non-linear.
    """
    if isinstance(op, Value):
        return {}, float(op.number)
    if isinstance(op, Variable):
        return {id(op.member): 1.0}, 0.0
    if isinstance(op, Negate):
        coefficients, constant = linearize(op.operand)
        return _scale(coefficients, -1.0), -constant
    if isinstance(op, Sum):
        coefficients: Coefficients = {}
        constant = 0.0
        for term in op.terms:
            c, k = linearize(term)
            coefficients = _merge(coefficients, c)
            constant += k
        return coefficients, constant
    if isinstance(op, Equal):
        lc, lk = linearize(op.lhs)
        rc, rk = linearize(op.rhs)
        return _merge(lc, rc, -1.0), lk - rk
    if isinstance(op, Multiply):
        coefficients, constant = {}, 1.0
        variable_seen = False
        for factor in op.factors:
            c, k = linearize(factor)
            if _is_linear_constant(c):
                coefficients = _scale(coefficients, k)
                constant *= k
                continue
            if variable_seen:
                raise OperationError(f"Non-linear term: {op.equation_repr()}")
            variable_seen = True
            coefficients = _scale(c, constant)
            constant *= k
        return coefficients, constant
    if isinstance(op, Divide):
        dc, dk = linearize(op.denominator)
        if not _is_linear_constant(dc):
            raise OperationError(f"Non-linear term: {op.equation_repr()}")
        if dk == 0:
            raise OperationError(f"Division by zero in {op.equation_repr()}")
        nc, nk = linearize(op.numerator)
        return _scale(nc, 1.0 / dk), nk / dk
    if isinstance(op, Inverse):
        c, k = linearize(op.operand)
        if not _is_linear_constant(c):
            raise OperationError(f"Non-linear term: {op.equation_repr()}")
        if k == 0:
            raise OperationError(f"Division by zero in {op.equation_repr()}")
        return {}, 1.0 / k
    if isinstance(op, Power):
        bc, bk = linearize(op.base)
        ec, ek = linearize(op.exponent)
        if not _is_linear_constant(ec):
            raise OperationError(f"Non-linear term: {op.equation_repr()}")
        if _is_linear_constant(bc):
            return {}, Power(Value(bk), Value(ek)).value()
        if ek == 1:
            return bc, bk
        raise OperationError(f"Non-linear term: {op.equation_repr()}")
    raise OperationError(f"Cannot linearize {type(op).__name__}")
