"""
Symbolic nodal analysis, kept step by step for display.

Each resistor current is written from its node voltages, Kirchhoff's current
law is applied to every region not tied to ground (nodes joined by floating
voltage sources form one region), and every voltage source adds the
difference of its terminal voltages. Coefficients read off the expanded
equations form a square system solved by inversion.
"""

from __future__ import annotations
import logging
import math
from typing import Dict, List, Tuple

import numpy as np

from ..components import Component, Element
from ..container import Container
from ..operations import (
    Display,
    Divide,
    Equal,
    Multiply,
    Negate,
    Operation,
    Power,
    Sum,
    Symbol,
    Value,
    Variable,
    linearize,
)
from ..validation import KnownError
from .base import Solver, SolverConfig, Step, SubStep, invert

logger = logging.getLogger(__name__)


def current_symbol(element: Element) -> Symbol:
    name = element.basic_string()
    return Symbol(f"I_{name}", latex="I_{%s}" % name)


class _Regions:
    """Union-find over node ids; vertex 0 is ground."""

    def __init__(self, vertices: List[int]) -> None:
        self.parent = {v: v for v in vertices}

    def find(self, v: int) -> int:
        while self.parent[v] != v:
            self.parent[v] = self.parent[self.parent[v]]
            v = self.parent[v]
        return v

    def union(self, a: int, b: int) -> None:
        ra, rb = self.find(a), self.find(b)
        if ra != rb:
            # keep the smallest id as root so ground stays recognizable
            lo, hi = sorted((ra, rb))
            self.parent[hi] = lo

    def groups(self) -> List[List[int]]:
        out: Dict[int, List[int]] = {}
        for v in sorted(self.parent):
            out.setdefault(self.find(v), []).append(v)
        return [out[k] for k in sorted(out)]


class NodeStepSolver(Solver):
    """
    Derive node voltages symbolically.

    Requires nodes, and super nodes whenever the circuit has a floating
    voltage source.
    """

    def __init__(self, container: Container, config: SolverConfig | None = None) -> None:
        super().__init__(container, config)
        self.nodes = sorted(container.nodes(), key=lambda n: n.id)
        self.node_pairs = container.get_all_node_pairs()
        self.sources = [p for p in self.node_pairs if p[2].component is Component.VOLTAGE_SRC]

        floating = [p for p in self.sources if 0 not in (p[0], p[1])]
        if floating and not container.super_nodes():
            raise KnownError("Super nodes have not been created")

        self.reset()

    def reset(self) -> None:
        """Mark every node voltage unknown so the derivation keeps them symbolic."""
        for node in self.nodes:
            node.value = math.nan

    # -- helpers --

    def voltage(self, tool_id: int) -> Operation:
        if tool_id == 0:
            return Value(0.0)
        return Variable(self.container.get_tool_by_id(tool_id))

    def resistor_current(self, n_plus: int, n_minus: int, element: Element) -> Operation:
        """``(V+ - V-) / R``, the current entering the positive terminal."""
        drop = Sum([self.voltage(n_plus), Negate(self.voltage(n_minus))])
        return Divide(drop, Variable(element)).simplify()

    def regions(self) -> List[List[int]]:
        """KCL regions: groups of node ids joined by voltage sources, ground excluded."""
        regions = _Regions([0] + [n.id for n in self.nodes])
        for n_plus, n_minus, _ in self.sources:
            regions.union(n_plus, n_minus)
        return [g for g in regions.groups() if 0 not in g]

    def region_label(self, region: List[int]) -> str:
        return ", ".join(self.container.get_tool_by_id(i).pretty_string() for i in region)

    def kcl_equation(self, region: List[int]) -> Equal:
        """Currents leaving ``region`` through resistors equal the injected current."""
        leaving: List[Operation] = []
        injected: List[Operation] = []
        inside = set(region)
        for n_plus, n_minus, element in self.node_pairs:
            if (n_plus in inside) == (n_minus in inside):
                continue
            sign = 1.0 if n_plus in inside else -1.0
            if element.component is Component.RESISTOR:
                current = self.resistor_current(n_plus, n_minus, element)
                leaving.append(current if sign > 0 else Negate(current))
            elif element.component is Component.CURRENT_SRC:
                injected.append(Variable(element) if sign > 0 else Negate(Variable(element)))
        return Equal(Sum(leaving), Sum(injected) if injected else Value(0.0))

    def coefficients(self, equation: Operation) -> Tuple[np.ndarray, float]:
        """Coefficient row over the node variables and the right-hand side."""
        coeffs, constant = linearize(equation)
        row = np.array([coeffs.get(id(node), 0.0) for node in self.nodes], dtype=float)
        return row, -constant

    # -- solve --

    def solve(self) -> List[Step]:
        self.reset()
        steps: List[Step] = [self.declare_variables()]

        resistors = [p for p in self.node_pairs if p[2].component is Component.RESISTOR]
        steps.append(
            Step(
                title="Resistor currents",
                description="Find current through each resistor:",
                sub_steps=[
                    SubStep(
                        description=element.pretty_string(),
                        operations=[Equal(Variable(current_symbol(element)), self.resistor_current(p, n, element))],
                    )
                    for p, n, element in resistors
                ],
            )
        )

        rows: List[np.ndarray] = []
        rhs: List[float] = []
        kcl_steps: List[SubStep] = []
        for region in self.regions():
            initial = self.kcl_equation(region)
            expanded = initial.expand().simplify()
            applied = expanded.apply_variables().simplify()
            row, value = self.coefficients(applied)
            rows.append(row)
            rhs.append(value)
            kcl_steps.append(
                SubStep(
                    description=f"Currents leaving {self.region_label(region)}:",
                    operations=[initial, expanded, applied],
                    result=Display(self.rounded(row).reshape(1, -1)),
                )
            )
        steps.append(
            Step(
                title="Kirchhoff's current law",
                description="Sum the currents leaving every region not tied to ground:",
                sub_steps=kcl_steps,
            )
        )

        source_steps: List[SubStep] = []
        for n_plus, n_minus, source in self.sources:
            difference = Sum([self.voltage(n_plus), Negate(self.voltage(n_minus))]).simplify()
            equation = Equal(Variable(source), difference)
            row, _ = self.coefficients(Equal(difference, Value(0.0)))
            rows.append(row)
            rhs.append(source.value)
            source_steps.append(SubStep(description=source.pretty_string(), operations=[equation]))
        steps.append(
            Step(
                title="Voltage sources",
                description="Find voltage across each voltage source:",
                sub_steps=source_steps,
            )
        )

        matrix = np.array(rows, dtype=float).reshape(len(rows), len(self.nodes))
        b = np.array(rhs, dtype=float)
        inverse = invert(matrix, self.config)
        voltages = inverse @ b
        for node, v in zip(self.nodes, voltages):
            node.set_value(v)
        logger.info("Solved %d node voltages", len(self.nodes))

        unknowns = np.empty(len(self.nodes), dtype=object)
        for i, node in enumerate(self.nodes):
            unknowns[i] = Variable(node)
        steps.append(
            Step(
                title="Solve for voltages:",
                sub_steps=[
                    SubStep(
                        description="Form matrix from coefficients:",
                        operations=[Equal(Multiply([Display(matrix), Display(unknowns)]), Display(self.rounded(b)))],
                    ),
                    SubStep(
                        description="Take the inverse and multiply by the right-hand side:",
                        operations=[
                            Equal(Power(Display(matrix), Value(-1.0)), Display(self.rounded(inverse))),
                            Equal(
                                Display(unknowns),
                                Multiply([Power(Display(matrix), Value(-1.0)), Display(self.rounded(b))]),
                            ),
                        ],
                        result=Equal(Display(unknowns), Display(self.rounded(voltages))),
                    ),
                ],
            )
        )

        steps.append(self.back_substitute(resistors))
        return steps

    def declare_variables(self) -> Step:
        return Step(
            title="Steps to solve the circuit:",
            description="Find voltage and current between nodes.",
            sub_steps=[
                SubStep(description=f"Unknown voltage at {node.pretty_string()}", operations=[Variable(node)])
                for node in self.nodes
            ],
        )

    def back_substitute(self, resistors: List[Tuple[int, int, Element]]) -> Step:
        voltages = {0: 0.0}
        voltages.update({node.id: node.value for node in self.nodes})
        sub_steps: List[SubStep] = []
        for n_plus, n_minus, element in self.node_pairs:
            element.voltage_drop = voltages[n_plus] - voltages[n_minus]
            if element.component is Component.CURRENT_SRC:
                element.current = element.value

        for n_plus, n_minus, element in resistors:
            expression = self.resistor_current(n_plus, n_minus, element)
            element.current = expression.apply_variables().value()
            sub_steps.append(
                SubStep(
                    description=element.pretty_string(),
                    operations=[Equal(Variable(current_symbol(element)), expression.apply_variables())],
                    result=Value(round(element.current, self.config.decimals)),
                )
            )
        return Step(
            title="Currents",
            description="Substitute the node voltages into each resistor current:",
            sub_steps=sub_steps,
        )

    def node_voltages(self) -> List[float]:
        return [node.value for node in self.nodes]
