from __future__ import annotations
from enum import Enum


class Component(Enum):
    """
    Kind of a circuit element.

    The enum value is the name used in JSON circuit descriptions. Only the
    first four kinds are supported by the solvers; the rest are reserved.
    """

    GROUND = "Ground"
    RESISTOR = "Resistor"
    VOLTAGE_SRC = "VoltageSrc"
    CURRENT_SRC = "CurrentSrc"
    DEPENDENT_VOLTAGE = "DependentVoltage"
    DEPENDENT_CURRENT = "DependentCurrent"
    SWITCH = "Switch"
    INDUCTOR = "Inductor"
    CAPACITOR = "Capacitor"

    def basic_string(self) -> str:
        return _BASIC.get(self, "Unknown")

    def unit_string(self) -> str:
        return _UNITS.get(self, "Unknown")

    def pretty_string(self) -> str:
        return _PRETTY.get(self, "Unknown")

    def is_source(self) -> bool:
        return self in (Component.VOLTAGE_SRC, Component.CURRENT_SRC)

    @classmethod
    def from_name(cls, name: str) -> Component:
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown component class '{name}'.") from None


_BASIC = {
    Component.GROUND: "GND",
    Component.RESISTOR: "R",
    Component.VOLTAGE_SRC: "SRC(V)",
    Component.CURRENT_SRC: "SRC(C)",
}

_UNITS = {
    Component.GROUND: "V",
    Component.RESISTOR: "Ω",
    Component.VOLTAGE_SRC: "V",
    Component.CURRENT_SRC: "A",
}

_PRETTY = {
    Component.GROUND: "Ground",
    Component.RESISTOR: "Resistor",
    Component.VOLTAGE_SRC: "Voltage",
    Component.CURRENT_SRC: "Current",
}


class Simplification(Enum):
    """Reduction strategies accepted by ``Container.simplify``; none are implemented."""

    NONE = "None"
    SERIES = "Series"
    PARALLEL = "Parallel"
    NORTON = "Norton"
    THEVENIN = "Thevenin"
