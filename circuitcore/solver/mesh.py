from __future__ import annotations
from typing import List

from ..container import Container
from ..validation import KnownError
from .base import Solver, SolverConfig, Step


class _MeshSolver(Solver):
    """Mesh-current analysis entry point; requires meshes on the container."""

    label = "Mesh"

    def __init__(self, container: Container, config: SolverConfig | None = None) -> None:
        super().__init__(container, config)
        if not container.meshes():
            raise KnownError("Meshes have not been created")

    def solve(self) -> List[Step]:
        raise KnownError(f"{self.label} solver is not implemented")


class MeshMatrixSolver(_MeshSolver):
    label = "Mesh matrix"


class MeshStepSolver(_MeshSolver):
    label = "Mesh step"
