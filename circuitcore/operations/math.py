from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
import math
from typing import Any

import numpy as np

Array = np.ndarray


class EquationMember(ABC):
    """
    Anything that can stand as a variable inside an expression tree.

    Implementers carry a numeric ``value`` attribute; NaN means the value is
    still unknown (an unsolved node voltage, an unknown source current).
    """

    value: float

    @abstractmethod
    def equation_repr(self) -> str:
        """Short plain-text symbol."""

    @abstractmethod
    def latex_string(self) -> str:
        """LaTeX rendering of the symbol."""

    def is_known(self) -> bool:
        return not math.isnan(self.value)


@dataclass(eq=False)
class Symbol(EquationMember):
    """Free-standing named quantity (unknown source current, labelled result)."""

    name: str
    latex: str | None = None
    value: float = math.nan

    def equation_repr(self) -> str:
        return self.name

    def latex_string(self) -> str:
        return self.latex if self.latex is not None else self.name


def format_number(value: float) -> str:
    """Render a float without a trailing ``.0`` and with at most 6 significant digits."""
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if value.is_integer():
        return str(int(value))
    return f"{value:.6g}"


def latex_wrap(content: str) -> str:
    """Wrap LaTeX in inline math mode, breaking accidental ``$$`` sequences."""
    return "${}$".format(content.replace("$$", "$ $"))


def _entry_latex(entry: Any) -> str:
    if hasattr(entry, "latex_string"):
        return entry.latex_string()
    return format_number(entry)


def _entry_repr(entry: Any) -> str:
    if hasattr(entry, "equation_repr"):
        return entry.equation_repr()
    return format_number(entry)


def _render_matrix(matrix: Array, render) -> str:
    matrix = np.asarray(matrix, dtype=object)
    if matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)
    out = ["\\begin{bmatrix}"]
    for row in matrix:
        out.append(" & ".join(render(entry) for entry in row))
        out.append("\\\\")
    out.append("\\end{bmatrix}")
    return "".join(out)


def matrix_to_latex(matrix: Array) -> str:
    """
    Render a vector or matrix as a LaTeX ``bmatrix``.

    Entries may be floats or objects exposing ``latex_string``. Vectors are
    rendered as a single column.
    """
    return _render_matrix(matrix, _entry_latex)


def matrix_to_repr(matrix: Array) -> str:
    """Same layout as :func:`matrix_to_latex` using plain equation strings."""
    return _render_matrix(matrix, _entry_repr)
