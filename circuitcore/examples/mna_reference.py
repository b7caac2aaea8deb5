"""
Nodal analysis example (two voltage sources, three resistors).

Circuit:
    V5 (20 V) from node 1 to ground, R2 (4 Ω) between nodes 1 and 2,
    R3 (8 Ω) from node 2 to ground, V4 (32 V) from node 2 to node 3,
    R1 (2 Ω) from node 3 to ground.

This script builds the circuit, solves it with both nodal solvers, then reports:
- Node voltages from the matrix and the step solver.
- Branch currents for every resistor.
- Power dissipated by the resistors and delivered by the sources.
"""

from circuitcore.components import Component, Element
from circuitcore.container import Container
from circuitcore.solver import NodeMatrixSolver, NodeStepSolver


def build() -> Container:
    container = Container()
    container.add_elements([
        Element.create(Component.GROUND, 0.0, [1, 3, 5]),
        Element.create(Component.RESISTOR, 2.0, [0, 3, 5], [4]),
        Element.create(Component.RESISTOR, 4.0, [5], [3, 4]),
        Element.create(Component.RESISTOR, 8.0, [2, 4], [0, 1, 5]),
        Element.create(Component.VOLTAGE_SRC, 32.0, [2, 3], [1]),
        Element.create(Component.VOLTAGE_SRC, 20.0, [2], [0, 1, 3]),
    ])
    container.create_nodes().create_super_nodes()
    return container


def main() -> None:
    container = build()

    NodeMatrixSolver(container).solve()
    for node in container.nodes():
        print(f"{node.pretty_string()} = {node.value:.2f} V (matrix)")

    steps = NodeStepSolver(container).solve()
    for node in container.nodes():
        print(f"{node.pretty_string()} = {node.value:.2f} V (steps)")
    print(f"{len(steps)} derivation steps")

    for element in container.resistors():
        print(f"I_{element.basic_string()} = {element.current:.3f} A")

    absorbed = sum(e.current * e.voltage_drop for e in container.resistors())
    delivered = sum(e.current * e.voltage_drop for e in container.voltage_sources())
    print(f"Power absorbed by resistors: {absorbed:.2f} W")
    print(f"Power delivered by sources: {-delivered:.2f} W")


if __name__ == "__main__":
    main()
