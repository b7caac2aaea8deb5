"""
Top-level namespace for circuitcore.

DC resistive circuits are described as elements wired by id, grouped into
solving units (nodes, super nodes, meshes) by a Container, and solved with
Modified Nodal Analysis either numerically or as a symbolic derivation:
- circuitcore.container: topology construction and validation.
- circuitcore.operations: expression trees used in the derivations.
- circuitcore.solver: matrix and step-by-step nodal solvers.
"""

from .components import Component, Element, Simplification  # noqa: F401
from .container import Container  # noqa: F401
from .network import Tool, ToolType  # noqa: F401
from .validation import KnownError, MultipleErrors, Status, StatusError, UnknownError  # noqa: F401
from .solver import NodeMatrixSolver, NodeStepSolver, SolverConfig, Step, SubStep  # noqa: F401
from .interfaces import ContainerSetup, SolveError, get_tools, load_container, solve  # noqa: F401

__all__ = [
    "Component",
    "Element",
    "Simplification",
    "Container",
    "Tool",
    "ToolType",
    "Status",
    "StatusError",
    "UnknownError",
    "KnownError",
    "MultipleErrors",
    "NodeMatrixSolver",
    "NodeStepSolver",
    "SolverConfig",
    "Step",
    "SubStep",
    "ContainerSetup",
    "SolveError",
    "get_tools",
    "load_container",
    "solve",
]
