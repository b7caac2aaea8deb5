"""Tests for circuitcore.components."""

import pytest

from circuitcore.components import Component, Element
from circuitcore.validation import KnownError, Status


class TestComponent:
    def test_labels(self):
        assert Component.GROUND.basic_string() == "GND"
        assert Component.RESISTOR.basic_string() == "R"
        assert Component.VOLTAGE_SRC.basic_string() == "SRC(V)"
        assert Component.CURRENT_SRC.basic_string() == "SRC(C)"
        assert Component.SWITCH.basic_string() == "Unknown"

    def test_units(self):
        assert Component.RESISTOR.unit_string() == "Ω"
        assert Component.VOLTAGE_SRC.unit_string() == "V"
        assert Component.CURRENT_SRC.unit_string() == "A"
        assert Component.INDUCTOR.unit_string() == "Unknown"

    def test_pretty(self):
        assert Component.GROUND.pretty_string() == "Ground"
        assert Component.VOLTAGE_SRC.pretty_string() == "Voltage"
        assert Component.CURRENT_SRC.pretty_string() == "Current"

    def test_is_source(self):
        assert Component.VOLTAGE_SRC.is_source()
        assert Component.CURRENT_SRC.is_source()
        assert not Component.RESISTOR.is_source()
        assert not Component.GROUND.is_source()

    def test_from_name(self):
        assert Component.from_name("VoltageSrc") is Component.VOLTAGE_SRC
        with pytest.raises(ValueError):
            Component.from_name("Diode")


class TestElementCreate:
    def test_resistor(self):
        element = Element.create(Component.RESISTOR, 1.0, [1], [2])
        assert element.name == "R"
        assert element.id == 0
        assert element.value == 1.0
        assert element.positive == [1]
        assert element.negative == [2]

    def test_ground_is_normalized(self):
        element = Element.create(Component.GROUND, 1.0, [1], [2])
        assert element.name == "GND"
        assert element.value == 0.0
        assert element.positive == [1, 2]
        assert element.negative == []

    def test_strings(self):
        element = Element.create(Component.RESISTOR, 1.0, [2], [3])
        element.id = 1
        assert element.pretty_string() == "R1: 1 Ω"
        assert element.basic_string() == "R1"
        assert element.latex_string() == "{R}_{1}"
        assert element.equation_repr() == "R1"

    def test_connected_to_ground(self):
        element = Element.create(Component.RESISTOR, 1.0, [2], [3])
        assert element.connected_to_ground(3)
        assert not element.connected_to_ground(0)


class TestElementValidate:
    def test_valid(self):
        element = Element.create(Component.RESISTOR, 1.0, [3], [2])
        element.id = 1
        assert element.validate() is Status.VALID

    def test_negative_value(self):
        element = Element.create(Component.RESISTOR, -0.5, [3], [2])
        element.id = 1
        with pytest.raises(KnownError) as exc:
            element.validate()
        assert exc.value.message == "Value cannot be zero or negative R1: -0.5 Ω"

    def test_connected_to_itself(self):
        element = Element.create(Component.RESISTOR, 1.0, [1], [2])
        element.id = 1
        with pytest.raises(KnownError) as exc:
            element.validate()
        assert exc.value.message == "Element cannot be connected to itself R1: 1 Ω"

    def test_ground_dual_polarity(self):
        element = Element(Component.GROUND, 0.0, [1], [2])
        with pytest.raises(KnownError) as exc:
            element.validate()
        assert exc.value.message == "Ground element cannot have dual polarity"

    def test_ground_value(self):
        element = Element.create(Component.GROUND, 0.0, [1])
        element.value = 1.0
        with pytest.raises(KnownError) as exc:
            element.validate()
        assert exc.value.message == "Ground element cannot have a value"

    def test_no_connections(self):
        element = Element.create(Component.RESISTOR, 1.0)
        with pytest.raises(KnownError) as exc:
            element.validate()
        assert exc.value.message == "Element has no connections"


class TestElementJson:
    def test_from_dict_ignores_solver_fields(self):
        element = Element.from_dict(
            {"value": 1.0, "id": 1, "class": "Resistor", "positive": [2], "negative": [3], "current": 9.0}
        )
        assert element.id == 1
        assert element.component is Component.RESISTOR
        assert element.current == 0.0
        assert element.name == "R"

    def test_to_dict(self):
        element = Element(Component.RESISTOR, 1.0, [2], [3], id=1)
        data = element.to_dict()
        assert data == {
            "name": "R",
            "id": 1,
            "value": 1.0,
            "current": 0.0,
            "voltage_drop": 0.0,
            "class": "Resistor",
            "positive": [2],
            "negative": [3],
            "pretty_string": "R1: 1 Ω",
            "latex_string": "{R}_{1}",
        }

    def test_round_trip(self):
        element = Element(Component.VOLTAGE_SRC, 5.0, [2], [0], id=4)
        loaded = Element.from_dict(element.to_dict())
        assert (loaded.id, loaded.value, loaded.component) == (4, 5.0, Component.VOLTAGE_SRC)
        assert (loaded.positive, loaded.negative) == ([2], [0])

    def test_missing_key(self):
        with pytest.raises(ValueError, match="class"):
            Element.from_dict({"value": 1.0})
