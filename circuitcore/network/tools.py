from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
import math
from typing import List, Optional

from ..operations.math import EquationMember
from ..validation import KnownError, MultipleErrors, Status, Validation, check_weak_duplicates


class ToolType(Enum):
    NODE = "Node"
    MESH = "Mesh"
    SUPER_NODE = "SuperNode"
    SUPER_MESH = "SuperMesh"

    def __str__(self) -> str:
        return self.value


_PREFIX = {
    ToolType.NODE: "N",
    ToolType.MESH: "M",
    ToolType.SUPER_NODE: "SN",
    ToolType.SUPER_MESH: "SM",
}


@dataclass(eq=False)
class Tool(EquationMember, Validation):
    """
    Aggregate of elements used as a solving unit.

    ``members`` holds element ids owned by a :class:`~circuitcore.container.Container`;
    a tool never holds the elements themselves. ``ground`` is the id of the
    container's Ground element, used to reject nodes that include it.
    ``value`` is the solved voltage (nodes) or current (meshes), NaN until a
    solver writes it.
    """

    tool_type: ToolType
    members: List[int] = field(default_factory=list)
    id: int = 0
    value: float = math.nan
    ground: Optional[int] = None

    @classmethod
    def create_node(cls, members: List[int], ground: Optional[int] = None) -> Tool:
        return cls(ToolType.NODE, list(members), ground=ground)

    @classmethod
    def create_super_node(cls, members: List[int], ground: Optional[int] = None) -> Tool:
        return cls(ToolType.SUPER_NODE, list(members), ground=ground)

    @classmethod
    def create_mesh(cls, members: List[int], ground: Optional[int] = None) -> Tool:
        return cls(ToolType.MESH, list(members), ground=ground)

    def contains(self, element_id: int) -> bool:
        return element_id in self.members

    def same_members(self, members: List[int]) -> bool:
        return set(self.members) == set(members)

    def set_value(self, value: float) -> None:
        self.value = float(value)

    # -- rendering --

    def pretty_string(self) -> str:
        return f"{self.tool_type}: {self.id}"

    def basic_string(self) -> str:
        return str(self.members)

    def equation_repr(self) -> str:
        return f"{_PREFIX[self.tool_type]}{self.id}"

    def latex_string(self) -> str:
        return "%s_{%d}" % (_PREFIX[self.tool_type], self.id)

    def __str__(self) -> str:
        return f"Tool: {self.tool_type} Id:{self.id} Elements:{self.members}"

    # -- validation --

    def class_name(self) -> str:
        return str(self.tool_type)

    def validate(self) -> Status:
        if not self.members:
            raise KnownError("Tool has no members")
        if self.tool_type is ToolType.NODE and self.ground is not None and self.ground in self.members:
            raise KnownError("Tool contains a ground element")
        duplicates = check_weak_duplicates(self.members, lambda _: "Element")
        if duplicates:
            duplicates.append(KnownError(f"Tool {self.id} has duplicate members"))
            raise MultipleErrors(duplicates)
        return Status.VALID
