"""
Shared circuit fixtures.

Elements are inserted with ``add_element_core`` so their ids follow the list
order; connection lists refer to those ids.
"""

import pytest

from circuitcore.components import Component, Element
from circuitcore.container import Container

GROUND = Component.GROUND
R = Component.RESISTOR
V = Component.VOLTAGE_SRC
I = Component.CURRENT_SRC  # noqa: E741


def make_container(*specs):
    """Build a container from ``(component, value, positive, negative)`` tuples."""
    container = Container()
    for component, value, positive, negative in specs:
        container.add_element_core(Element.create(component, value, positive, negative))
    return container


@pytest.fixture
def basic_container():
    """
    1 V source in series with two 1 Ω resistors.

    V1 + -> R2 -> R3 -> ground <- V1 -
    """
    return make_container(
        (GROUND, 0.0, [1, 3], []),
        (V, 1.0, [2], [0, 3]),
        (R, 1.0, [1], [3]),
        (R, 1.0, [2], [0, 1]),
    )


@pytest.fixture
def mna_container():
    """
    V5 (20 V) node 1 -> ground, R2 (4 Ω) node 1 - node 2, R3 (8 Ω) node 2 -> ground,
    V4 (32 V) node 2 -> node 3, R1 (2 Ω) ground - node 3.
    """
    return make_container(
        (GROUND, 0.0, [1, 3, 5], []),
        (R, 2.0, [0, 3, 5], [4]),
        (R, 4.0, [5], [3, 4]),
        (R, 8.0, [2, 4], [0, 1, 5]),
        (V, 32.0, [2, 3], [1]),
        (V, 20.0, [2], [0, 1, 3]),
    )


@pytest.fixture
def supernode_container():
    """Floating 10 V source between nodes 1 and 2; 10 V source on node 3."""
    return make_container(
        (GROUND, 0.0, [5, 3], []),
        (V, 10.0, [4], [2, 3]),
        (R, 10.0, [1, 3], [4, 5]),
        (R, 10.0, [1, 2], [0, 5]),
        (R, 10.0, [1], [2, 5]),
        (V, 10.0, [2, 4], [0, 3]),
    )


@pytest.fixture
def singular_container():
    """Two voltage sources and a resistor all in parallel on one node."""
    return make_container(
        (GROUND, 0.0, [1, 2, 3], []),
        (V, 1.0, [2, 3], [0, 2, 3]),
        (V, 2.0, [1, 3], [0, 1, 3]),
        (R, 1.0, [1, 2], [0, 1, 2]),
    )


@pytest.fixture
def current_source_container():
    """
    2 A source driving node 1, 4 Ω to ground, 2 Ω to node 2, 2 Ω node 2 to ground.

    Node 1: 2 = V1/4 + (V1 - V2)/2; node 2: (V1 - V2)/2 = V2/2
    """
    return make_container(
        (GROUND, 0.0, [1, 2, 4], []),
        (I, 2.0, [2, 3], [0, 2, 4]),
        (R, 4.0, [1, 3], [0, 1, 4]),
        (R, 2.0, [1, 2], [4]),
        (R, 2.0, [3], [0, 1, 2]),
    )
