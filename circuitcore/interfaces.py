"""
Boundary helpers: JSON circuit descriptions in, JSON derivations out.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .components import Element
from .container import Container
from .solver import NodeMatrixSolver, NodeStepSolver, SolverConfig, serialize_steps
from .validation import StatusError, flatten

logger = logging.getLogger(__name__)


class SolveError(Exception):
    """
    Failure reported by :func:`solve`.

    The message is either a JSON object ``{"errors": [...]}`` listing every
    validation issue, or a single solver diagnostic.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass
class ContainerSetup:
    elements: List[Element] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ContainerSetup:
        return cls(elements=[Element.from_dict(e) for e in data.get("elements", [])])

    @classmethod
    def from_json(cls, text: str) -> ContainerSetup:
        data = json.loads(text)
        if isinstance(data, list):
            data = {"elements": data}
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: str | Path) -> ContainerSetup:
        return cls.from_json(Path(path).read_text(encoding="utf-8"))

    def to_dict(self) -> Dict[str, Any]:
        return {"elements": [e.to_dict() for e in self.elements]}


def load_container(setup: ContainerSetup) -> str:
    """
    Check that a setup describes a usable circuit.

    Raises:
        StatusError: The circuit failed validation.
    """
    if not setup.elements:
        return "No elements"
    Container.from_setup(setup).validate()
    return "Loaded Successfully"


def get_tools(container: Container) -> str:
    """Member ids of every node as a JSON list, building the nodes if needed."""
    if not container.nodes():
        container.create_nodes()
    return json.dumps([node.members for node in container.nodes()])


def validation_errors(error: StatusError) -> str:
    return json.dumps({"errors": [str(e) for e in flatten(error)]}, ensure_ascii=False)


def solve(matrix: bool, nodal: bool, container: Container, config: SolverConfig | None = None) -> str:
    """
    Validate, build the topology and solve a container.

    Args:
        matrix: Use the matrix solver instead of the step derivation.
        nodal: Nodal analysis; mesh analysis is not implemented.
        container: Circuit to solve; its elements receive the results.
        config: Optional solver configuration.

    Returns:
        JSON list of steps.

    Raises:
        SolveError: Invalid circuit, or a solver failure.
    """
    if not nodal:
        raise SolveError("Known Issue: Mesh analysis is not implemented")

    try:
        container.validate()
    except StatusError as exc:
        logger.info("Circuit rejected: %s", exc)
        raise SolveError(validation_errors(exc)) from exc

    try:
        container.create_nodes().create_super_nodes()
        solver_cls = NodeMatrixSolver if matrix else NodeStepSolver
        steps = solver_cls(container, config).solve()
    except StatusError as exc:
        logger.info("Solve failed: %s", exc)
        raise SolveError(str(exc)) from exc

    return serialize_steps(steps)
