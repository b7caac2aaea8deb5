"""Tests for the step-by-step nodal solver."""

import json

import numpy as np
import pytest

from circuitcore.solver import NodeStepSolver, serialize_steps
from circuitcore.validation import KnownError


def titles(steps):
    return [s.title for s in steps]


class TestEquations:
    def test_regions(self, mna_container):
        mna_container.create_nodes().create_super_nodes()
        solver = NodeStepSolver(mna_container)
        assert solver.regions() == [[2, 3]]
        assert solver.region_label([2, 3]) == "Node: 2, Node: 3"

    def test_regions_without_sources_between_nodes(self, current_source_container):
        current_source_container.create_nodes()
        assert NodeStepSolver(current_source_container).regions() == [[1], [2]]

    def test_kcl_row(self, mna_container):
        mna_container.create_nodes().create_super_nodes()
        solver = NodeStepSolver(mna_container)
        equation = solver.kcl_equation([2, 3]).expand().apply_variables().simplify()
        row, rhs = solver.coefficients(equation)
        np.testing.assert_allclose(row, [-0.25, 0.375, 0.5])
        assert rhs == pytest.approx(0.0)

    def test_current_source_rows(self, current_source_container):
        current_source_container.create_nodes()
        solver = NodeStepSolver(current_source_container)
        rows = []
        for region in solver.regions():
            equation = solver.kcl_equation(region).expand().apply_variables().simplify()
            rows.append(solver.coefficients(equation))
        np.testing.assert_allclose([r for r, _ in rows], [[0.75, -0.5], [-0.5, 1.0]])
        assert [b for _, b in rows] == pytest.approx([2.0, 0.0])

    def test_resistor_current(self, basic_container):
        basic_container.create_nodes()
        solver = NodeStepSolver(basic_container)
        element = basic_container.get_element_by_id(2)
        assert solver.resistor_current(1, 2, element).equation_repr() == "(N1 - N2)/R2"
        assert solver.resistor_current(2, 0, basic_container.get_element_by_id(3)).equation_repr() == "N2/R3"

    def test_resets_node_values(self, basic_container):
        basic_container.create_nodes()
        basic_container.nodes()[0].set_value(7.0)
        NodeStepSolver(basic_container)
        assert not basic_container.nodes()[0].is_known()


class TestSolve:
    def test_basic(self, basic_container):
        basic_container.create_nodes()
        solver = NodeStepSolver(basic_container)
        steps = solver.solve()
        assert solver.node_voltages() == pytest.approx([1.0, 0.5])
        assert basic_container.get_element_by_id(2).current == pytest.approx(0.5)
        assert titles(steps) == [
            "Steps to solve the circuit:",
            "Resistor currents",
            "Kirchhoff's current law",
            "Voltage sources",
            "Solve for voltages:",
            "Currents",
        ]

    def test_mna(self, mna_container):
        mna_container.create_nodes().create_super_nodes()
        solver = NodeStepSolver(mna_container)
        solver.solve()
        assert solver.node_voltages() == pytest.approx([20.0, 24.0, -8.0])
        currents = [e.current for e in mna_container.resistors()]
        assert currents == pytest.approx([4.0, -1.0, 3.0])

    def test_supernode(self, supernode_container):
        supernode_container.create_nodes().create_super_nodes()
        solver = NodeStepSolver(supernode_container)
        solver.solve()
        assert solver.node_voltages() == pytest.approx([40.0 / 3.0, 10.0 / 3.0, 10.0])

    def test_current_source(self, current_source_container):
        current_source_container.create_nodes()
        solver = NodeStepSolver(current_source_container)
        steps = solver.solve()
        assert solver.node_voltages() == pytest.approx([4.0, 2.0])
        assert current_source_container.get_element_by_id(1).current == pytest.approx(2.0)
        # no voltage sources: the step is present but empty
        assert steps[3].sub_steps == []

    def test_agrees_with_matrix_solver(self, supernode_container):
        from circuitcore.solver import NodeMatrixSolver

        supernode_container.create_nodes().create_super_nodes()
        NodeMatrixSolver(supernode_container).solve()
        expected = [n.value for n in supernode_container.nodes()]
        solver = NodeStepSolver(supernode_container)
        solver.solve()
        assert solver.node_voltages() == pytest.approx(expected)

    def test_solve_twice(self, mna_container):
        mna_container.create_nodes().create_super_nodes()
        solver = NodeStepSolver(mna_container)
        solver.solve()
        solver.solve()
        assert solver.node_voltages() == pytest.approx([20.0, 24.0, -8.0])

    def test_matrix_solver_between_construct_and_solve(self, mna_container):
        from circuitcore.solver import NodeMatrixSolver

        mna_container.create_nodes().create_super_nodes()
        solver = NodeStepSolver(mna_container)
        NodeMatrixSolver(mna_container).solve()
        steps = solver.solve()
        assert solver.node_voltages() == pytest.approx([20.0, 24.0, -8.0])
        (kcl,) = steps[2].sub_steps
        assert "N_{1}" in kcl.operations[0].latex_string()

    def test_singular(self, singular_container):
        singular_container.create_nodes()
        with pytest.raises(KnownError) as exc:
            NodeStepSolver(singular_container).solve()
        assert exc.value.message.startswith("Matrix is not square")

    def test_requires_super_nodes(self, mna_container):
        mna_container.create_nodes()
        with pytest.raises(KnownError) as exc:
            NodeStepSolver(mna_container)
        assert exc.value.message == "Super nodes have not been created"

    def test_requires_nodes(self, basic_container):
        with pytest.raises(KnownError) as exc:
            NodeStepSolver(basic_container)
        assert exc.value.message == "Nodes have not been created"


class TestSteps:
    def test_kcl_sub_steps(self, mna_container):
        mna_container.create_nodes().create_super_nodes()
        steps = NodeStepSolver(mna_container).solve()
        (kcl,) = steps[2].sub_steps
        assert kcl.description == "Currents leaving Node: 2, Node: 3:"
        assert len(kcl.operations) == 3
        assert kcl.result is not None

    def test_source_equations(self, mna_container):
        mna_container.create_nodes().create_super_nodes()
        steps = NodeStepSolver(mna_container).solve()
        equations = [s.operations[0].equation_repr() for s in steps[3].sub_steps]
        assert equations == ["SRC(V)4 = N2 - N3", "SRC(V)5 = N1"]

    def test_serialized(self, basic_container):
        basic_container.create_nodes()
        data = json.loads(serialize_steps(NodeStepSolver(basic_container).solve()))
        assert len(data) == 6
        assert data[0]["title"] == "Steps to solve the circuit:"
        assert data[0]["sub_steps"][0]["operations"] == ["$N_{1}$"]
        assert "result" not in data[0]
        assert data[-1]["sub_steps"][0]["result"] == "$0.5$"
