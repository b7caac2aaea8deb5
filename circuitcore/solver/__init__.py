"""
Solvers turning a container with built topology into node voltages and currents.
"""

from .base import Solver, SolverConfig, Step, SubStep, invert, serialize_steps  # noqa: F401
from .node_matrix import NodeMatrixSolver  # noqa: F401
from .node_step import NodeStepSolver  # noqa: F401
from .mesh import MeshMatrixSolver, MeshStepSolver  # noqa: F401

__all__ = [
    "Solver",
    "SolverConfig",
    "Step",
    "SubStep",
    "invert",
    "serialize_steps",
    "NodeMatrixSolver",
    "NodeStepSolver",
    "MeshMatrixSolver",
    "MeshStepSolver",
]
