"""
Numeric Modified Nodal Analysis.

The system ``A x = z`` is assembled symbolically so it can be shown to the
user, then evaluated and solved by dense inversion::

    A = | G  B |    x = | V |    z = | I |
        | C  D |        | J |        | E |

``G`` holds conductances between nodes, ``B``/``C`` the voltage source
incidence, ``D`` is zero. ``V`` are node voltages, ``J`` the currents through
the voltage sources, ``I`` the current injected by current sources and ``E``
the source voltages.
"""

from __future__ import annotations
import logging
from typing import Dict, List

import numpy as np

from ..components import Component, Element
from ..container import Container
from ..operations import (
    Display,
    Divide,
    Equal,
    Multiply,
    Power,
    Symbol,
    Value,
    Variable,
    evaluate,
)
from .base import Solver, SolverConfig, Step, SubStep, invert
from .stamps import StampData, stamp_current_source, stamp_series_admittance, stamp_voltage_source

logger = logging.getLogger(__name__)


def source_current_symbol(source: Element) -> Symbol:
    """Unknown current through a voltage source."""
    name = source.basic_string()
    return Symbol(f"I_{name}", latex="I_{%s}" % name)


class NodeMatrixSolver(Solver):
    """
    Assemble and solve the MNA system of a container with nodes.

    The symbolic matrices are built on construction and exposed as
    ``a_matrix``, ``z_matrix`` and ``x_matrix`` (object arrays of operations).
    """

    def __init__(self, container: Container, config: SolverConfig | None = None) -> None:
        super().__init__(container, config)
        self.nodes = sorted(container.nodes(), key=lambda n: n.id)
        self.sources = sorted(container.voltage_sources(), key=lambda e: e.id)
        self.node_pairs = container.get_all_node_pairs()
        self.currents: Dict[int, Symbol] = {s.id: source_current_symbol(s) for s in self.sources}

        node_index = {node.id: i for i, node in enumerate(self.nodes)}
        aux_map = {source.id: len(self.nodes) + k for k, source in enumerate(self.sources)}
        data = StampData.empty(node_index, aux_map)

        for n_plus, n_minus, element in self.node_pairs:
            if element.component is Component.RESISTOR:
                stamp_series_admittance(data, n_plus, n_minus, Divide(Value(1.0), Variable(element)))
            elif element.component is Component.VOLTAGE_SRC:
                stamp_voltage_source(data, data.aux(element.id), n_plus, n_minus, Variable(element))
            elif element.component is Component.CURRENT_SRC:
                stamp_current_source(data, n_plus, n_minus, Variable(element))
            else:
                logger.warning("Skipping unsupported element %s", element.pretty_string())

        self.a_matrix, self.z_matrix = data.assemble()
        self.x_matrix = np.empty(data.size, dtype=object)
        for i, node in enumerate(self.nodes):
            self.x_matrix[i] = Variable(node)
        for source in self.sources:
            self.x_matrix[data.aux(source.id)] = Variable(self.currents[source.id])
        logger.debug("Assembled %dx%d MNA system", data.size, data.size)

    @property
    def n(self) -> int:
        return len(self.nodes)

    @property
    def m(self) -> int:
        return len(self.sources)

    def solve(self) -> List[Step]:
        A = evaluate(self.a_matrix)
        z = evaluate(self.z_matrix)
        inverse = invert(A, self.config, shown=self.a_matrix)
        x = inverse @ z
        self._write_back(x)
        logger.info("Solved %d node voltages and %d source currents", self.n, self.m)

        final = Equal(
            Display(self.x_matrix),
            Multiply([Power(Display(self.a_matrix), Value(-1.0)), Display(self.z_matrix)]),
        )
        return [
            Step(
                title="Node Matrix Solver",
                description="Form matrices",
                sub_steps=[
                    SubStep(description="A Matrix", operations=[Display(self.a_matrix)]),
                    SubStep(description="Z Matrix", operations=[Display(self.z_matrix)]),
                    SubStep(description="X Matrix", operations=[Display(self.x_matrix)]),
                    SubStep(description="Inverse A Matrix", operations=[Display(self.rounded(inverse))]),
                    SubStep(description="Final Equation", operations=[final]),
                ],
                result=Equal(Display(self.x_matrix), Display(self.rounded(x))),
            )
        ]

    def _write_back(self, x: np.ndarray) -> None:
        for i, node in enumerate(self.nodes):
            node.set_value(x[i])
        for k, source in enumerate(self.sources):
            current = float(x[self.n + k])
            self.currents[source.id].value = current
            source.current = current

        voltages = {0: 0.0}
        voltages.update({node.id: node.value for node in self.nodes})
        for n_plus, n_minus, element in self.node_pairs:
            element.voltage_drop = voltages[n_plus] - voltages[n_minus]
            if element.component is Component.RESISTOR:
                element.current = element.voltage_drop / element.value
            elif element.component is Component.CURRENT_SRC:
                element.current = element.value
