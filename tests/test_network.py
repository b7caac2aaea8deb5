"""Tests for circuitcore.network (tools and the tool graph)."""

import math

import pytest

from circuitcore.network import Tool, ToolGraph, ToolType
from circuitcore.validation import KnownError, MultipleErrors, Status


class TestTool:
    def test_rendering(self):
        node = Tool(ToolType.NODE, [2, 1], id=1)
        assert node.pretty_string() == "Node: 1"
        assert node.equation_repr() == "N1"
        assert node.latex_string() == "N_{1}"
        assert str(node) == "Tool: Node Id:1 Elements:[2, 1]"

    def test_prefixes(self):
        assert Tool(ToolType.SUPER_NODE, [1], id=4).equation_repr() == "SN4"
        assert Tool(ToolType.MESH, [1], id=3).latex_string() == "M_{3}"
        assert Tool(ToolType.SUPER_MESH, [1], id=2).equation_repr() == "SM2"

    def test_value_starts_unknown(self):
        node = Tool.create_node([1, 2])
        assert math.isnan(node.value)
        assert not node.is_known()
        node.set_value(3)
        assert node.value == 3.0
        assert node.is_known()

    def test_membership(self):
        node = Tool.create_node([2, 1])
        assert node.contains(2)
        assert not node.contains(3)
        assert node.same_members([1, 2])
        assert not node.same_members([1, 2, 3])


class TestToolValidate:
    def test_valid(self):
        assert Tool.create_node([1, 2], ground=0).validate() is Status.VALID

    def test_no_members(self):
        with pytest.raises(KnownError) as exc:
            Tool.create_node([]).validate()
        assert exc.value.message == "Tool has no members"

    def test_node_with_ground(self):
        with pytest.raises(KnownError) as exc:
            Tool.create_node([0, 2], ground=0).validate()
        assert exc.value.message == "Tool contains a ground element"

    def test_super_node_may_touch_ground(self):
        assert Tool.create_super_node([0, 2], ground=0).validate() is Status.VALID

    def test_duplicate_members(self):
        node = Tool(ToolType.NODE, [1, 1], id=2)
        with pytest.raises(MultipleErrors) as exc:
            node.validate()
        assert exc.value.errors == [
            KnownError("Duplicate: 1, Element"),
            KnownError("Tool 2 has duplicate members"),
        ]


@pytest.fixture
def triangle():
    graph = ToolGraph()
    graph.add_edge(0, 1, 1)
    graph.add_edge(0, 2, 3)
    graph.add_edge(1, 2, 2)
    return graph


class TestToolGraph:
    def test_edges(self, triangle):
        assert triangle.vertices == [0, 1, 2]
        assert triangle.edges == {(0, 1): 1, (0, 2): 3, (1, 2): 2}
        assert triangle.edge_element(2, 1) == 2
        assert triangle.neighbours(0) == [1, 2]

    def test_simple_graph(self, triangle):
        assert not triangle.add_edge(1, 1, 9)
        assert not triangle.add_edge(2, 1, 9)
        assert triangle.edge_element(1, 2) == 2
        assert len(triangle.edges) == 3

    def test_spanning_tree(self, triangle):
        parent, depth = triangle.spanning_tree(0)
        assert parent == {0: None, 1: 0, 2: 0}
        assert depth == {0: 0, 1: 1, 2: 1}

    def test_cycle_basis(self, triangle):
        cycles = triangle.cycle_basis(0)
        assert cycles == [[1, 0, 2]]
        assert triangle.cycle_elements(cycles[0]) == [1, 3, 2]

    def test_tree_has_no_cycles(self):
        graph = ToolGraph()
        graph.add_edge(0, 1, 1)
        graph.add_edge(1, 2, 2)
        assert graph.cycle_basis() == []

    def test_components_without_ground(self):
        graph = ToolGraph()
        graph.add_edge(0, 1, 1)
        graph.add_edge(5, 6, 2)
        graph.add_edge(6, 7, 3)
        graph.add_edge(5, 7, 4)
        assert graph.components() == [[0, 1], [5, 6, 7]]
        cycles = graph.cycle_basis(0)
        assert len(cycles) == 1
        assert sorted(graph.cycle_elements(cycles[0])) == [2, 3, 4]

    def test_cycle_count(self):
        # complete graph on four vertices: 6 edges - 4 vertices + 1
        graph = ToolGraph()
        element = 1
        for a in range(4):
            for b in range(a + 1, 4):
                graph.add_edge(a, b, element)
                element += 1
        cycles = graph.cycle_basis(0)
        assert len(cycles) == 3
        assert all(len(graph.cycle_elements(c)) == 3 for c in cycles)
