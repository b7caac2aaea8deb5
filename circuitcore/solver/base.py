from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import json
import logging
from typing import Any, Dict, List, Optional

import numpy as np

from ..container import Container
from ..operations import Operation, latex_wrap, matrix_to_latex
from ..validation import KnownError

logger = logging.getLogger(__name__)

Array = np.ndarray


@dataclass
class SolverConfig:
    """
    Configuration parameters shared by the solvers.

    Attributes:
        decimals: Rounding applied to numbers shown in the derivation (default: 4).
        rank_tol: Tolerance passed to ``numpy.linalg.matrix_rank`` when
            checking for singular matrices (default: numpy's own).
    """
    decimals: int = 4
    rank_tol: Optional[float] = None


@dataclass
class SubStep:
    description: Optional[str] = None
    result: Optional[Operation] = None
    operations: List[Operation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"description": self.description}
        if self.result is not None:
            out["result"] = latex_wrap(self.result.latex_string())
        out["operations"] = [latex_wrap(op.latex_string()) for op in self.operations]
        return out

    def __str__(self) -> str:
        lines = [f"Step: {self.description or ''}"]
        if self.result is not None:
            lines.append(f"\tResult: {self.result.equation_repr()}")
        lines.extend(f"\t\t{op.equation_repr()}" for op in self.operations)
        return "\n".join(lines)


@dataclass
class Step:
    """
    One stage of a solution, rendered for display.

    Results and operations are serialized as LaTeX in inline math mode.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    result: Optional[Operation] = None
    sub_steps: List[SubStep] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"title": self.title, "description": self.description}
        if self.result is not None:
            out["result"] = latex_wrap(self.result.latex_string())
        out["sub_steps"] = [s.to_dict() for s in self.sub_steps]
        return out

    def __str__(self) -> str:
        lines = [self.title or "", self.description or ""]
        if self.result is not None:
            lines.append(f"Result: {self.result.equation_repr()}")
        if self.sub_steps:
            lines.append("Sub Steps:")
        lines.extend(f"\t{s}" for s in self.sub_steps)
        return "\n".join(line for line in lines if line)


def serialize_steps(steps: List[Step]) -> str:
    return json.dumps([s.to_dict() for s in steps], ensure_ascii=False)


def invert(matrix: Array, cfg: SolverConfig, shown: Array | None = None) -> Array:
    """
    Inverse of a numeric matrix, or a ``KnownError`` describing why not.

    Args:
        matrix: Float matrix to invert.
        cfg: Solver configuration (rank tolerance).
        shown: Matrix rendered in the error message (defaults to ``matrix``);
            pass the symbolic version to show the user what was assembled.

    Raises:
        KnownError: The matrix is not square or is singular. The message
            embeds the LaTeX rendering of the matrix.
    """
    shown = matrix if shown is None else shown
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1] or matrix.shape[0] == 0:
        raise KnownError(f"Matrix is not square: {matrix_to_latex(shown)}")
    if np.linalg.matrix_rank(matrix, tol=cfg.rank_tol) < matrix.shape[0]:
        raise KnownError(
            "Matrix is not invertible. This might have something to do with sizing.\n"
            f"{matrix_to_latex(shown)}"
        )
    try:
        return np.linalg.inv(matrix)
    except np.linalg.LinAlgError as exc:
        raise KnownError(f"Matrix is not invertible: {exc}\n{matrix_to_latex(shown)}") from exc


class Solver(ABC):
    """
    Base class of every solver.

    A solver takes a container whose topology has been built and writes the
    solved values back into its elements and tools.
    """

    def __init__(self, container: Container, config: SolverConfig | None = None) -> None:
        if not container.nodes():
            raise KnownError("Nodes have not been created")
        self.container = container
        self.config = config or SolverConfig()

    @abstractmethod
    def solve(self) -> List[Step]:
        """
        Solve the circuit and return the derivation.
        """

    def rounded(self, values: Array) -> Array:
        return np.round(np.asarray(values, dtype=float), self.config.decimals)
