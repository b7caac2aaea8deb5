from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from ..operations.math import EquationMember, format_number
from ..validation import KnownError, Status, Validation
from .component import Component


@dataclass(eq=False)
class Element(EquationMember, Validation):
    """
    A two-terminal circuit part.

    ``positive`` and ``negative`` list the ids of the elements sharing each
    terminal. A Ground element only uses ``positive``. ``current`` and
    ``voltage_drop`` are written by the solvers.
    """

    component: Component
    value: float
    positive: List[int] = field(default_factory=list)
    negative: List[int] = field(default_factory=list)
    id: int = 0
    name: str = ""
    current: float = 0.0
    voltage_drop: float = 0.0

    def __post_init__(self) -> None:
        self.value = float(self.value)
        self.positive = list(self.positive)
        self.negative = list(self.negative)
        if not self.name:
            self.name = self.component.basic_string()

    @classmethod
    def create(
        cls,
        component: Component,
        value: float,
        positive: Sequence[int] = (),
        negative: Sequence[int] = (),
    ) -> Element:
        """Build an element, folding a Ground's connections onto one side."""
        if component is Component.GROUND:
            return cls(component, 0.0, list(positive) + list(negative), [])
        return cls(component, value, list(positive), list(negative))

    # -- queries --

    def connections(self) -> List[int]:
        return self.positive + self.negative

    def connected_to(self, other: int) -> bool:
        return other in self.positive or other in self.negative

    def connected_to_ground(self, ground_id: int) -> bool:
        return self.connected_to(ground_id)

    def is_ground(self) -> bool:
        return self.component is Component.GROUND

    # -- rendering --

    def pretty_string(self) -> str:
        return f"{self.name}{self.id}: {format_number(self.value)} {self.component.unit_string()}"

    def basic_string(self) -> str:
        return f"{self.name}{self.id}"

    def equation_repr(self) -> str:
        return self.basic_string()

    def latex_string(self) -> str:
        return "{%s}_{%d}" % (self.name, self.id)

    def __str__(self) -> str:
        return self.pretty_string()

    # -- validation --

    def class_name(self) -> str:
        return "Element"

    def validate(self) -> Status:
        if self.component is Component.GROUND:
            if self.positive and self.negative:
                raise KnownError("Ground element cannot have dual polarity")
            if self.value != 0.0:
                raise KnownError("Ground element cannot have a value")
        elif self.value <= 0.0:
            raise KnownError(f"Value cannot be zero or negative {self.pretty_string()}")

        if not self.positive and not self.negative:
            raise KnownError("Element has no connections")
        if self.id in self.positive or self.id in self.negative:
            raise KnownError(f"Element cannot be connected to itself {self.pretty_string()}")
        return Status.VALID

    # -- JSON --

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Element:
        """
        Build an element from its JSON description.

        Only ``class``, ``value``, ``id``, ``positive`` and ``negative`` are
        read; solver outputs in the payload are ignored.
        """
        try:
            component = Component.from_name(data["class"])
            return cls(
                component=component,
                value=float(data["value"]),
                positive=[int(i) for i in data.get("positive", [])],
                negative=[int(i) for i in data.get("negative", [])],
                id=int(data.get("id", 0)),
            )
        except KeyError as exc:
            raise ValueError(f"Element description is missing {exc.args[0]!r}.") from None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "id": self.id,
            "value": self.value,
            "current": self.current,
            "voltage_drop": self.voltage_drop,
            "class": self.component.value,
            "positive": list(self.positive),
            "negative": list(self.negative),
            "pretty_string": self.pretty_string(),
            "latex_string": self.latex_string(),
        }
