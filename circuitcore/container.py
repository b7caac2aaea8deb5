"""
Circuit container: owns the elements and the solving units derived from them.

Elements and tools live in two append-only lists. Tools refer to elements by
id only, so the container is the single place where either is mutated.
Topology passes run in order ``create_nodes -> create_super_nodes ->
create_meshes``; each re-validates the container and rolls its additions back
when validation fails.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple

from .components import Component, Element, Simplification
from .network import Tool, ToolGraph, ToolType
from .validation import (
    KnownError,
    Status,
    StatusError,
    Validation,
    check_duplicates,
    get_all_internal_status_errors,
    resolve,
)

if TYPE_CHECKING:
    from .interfaces import ContainerSetup

logger = logging.getLogger(__name__)

GROUND_VERTEX = 0

NodePair = Tuple[int, int, Element]


def _unique(ids: Iterable[int]) -> List[int]:
    out: List[int] = []
    for i in ids:
        if i not in out:
            out.append(i)
    return out


@dataclass
class Container(Validation):
    """
    Collection of elements and tools describing one circuit.
    """

    elements: List[Element] = field(default_factory=list)
    tools: List[Tool] = field(default_factory=list)
    id: int = 0
    _by_id: Dict[int, int] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        elements, self.elements = self.elements, []
        for element in elements:
            self._append(element)

    @classmethod
    def from_setup(cls, setup: ContainerSetup) -> Container:
        """Load a container keeping the element ids given by the caller."""
        container = cls()
        for element in setup.elements:
            container._append(element)
        logger.debug("Loaded %d elements", len(container.elements))
        return container

    # ------------------------------------------------------------ elements

    def _append(self, element: Element) -> None:
        self._by_id.setdefault(element.id, len(self.elements))
        self.elements.append(element)

    def _pop(self) -> Element:
        element = self.elements.pop()
        if self._by_id.get(element.id) == len(self.elements):
            del self._by_id[element.id]
        return element

    def add_element_core(self, element: Element) -> int:
        """Append without validation, assigning the next sequential id."""
        element.id = len(self.elements)
        self._append(element)
        return element.id

    def add_element(self, element: Element) -> int:
        """
        Insert one element and re-validate the container.

        The element receives the next sequential id. Nothing is kept when
        either the element or the resulting container is invalid.

        Raises:
            StatusError: The element or the container failed validation.
        """
        element.id = len(self.elements)
        element.validate()
        self._append(element)
        try:
            self.validate()
        except StatusError:
            self._pop()
            logger.warning("Rejected element %s", element.pretty_string())
            raise
        return element.id

    def add_elements(self, elements: Iterable[Element]) -> List[int]:
        """
        Insert a batch of elements as one all-or-nothing operation.

        Intermediate states are not validated, so a circuit can be built from
        scratch even though no single element forms a valid container.
        """
        size = len(self.elements)
        ids = [self.add_element_core(e) for e in elements]
        try:
            self.validate()
        except StatusError:
            while len(self.elements) > size:
                self._pop()
            logger.warning("Rejected batch of %d elements", len(ids))
            raise
        return ids

    def get_element_by_id(self, element_id: int) -> Element:
        if element_id not in self._by_id:
            raise KeyError(f"Element '{element_id}' not present in the circuit.")
        return self.elements[self._by_id[element_id]]

    def components(self) -> List[Element]:
        return [e for e in self.elements if not e.is_ground()]

    def elements_of(self, component: Component) -> List[Element]:
        return [e for e in self.elements if e.component is component]

    def voltage_sources(self) -> List[Element]:
        return self.elements_of(Component.VOLTAGE_SRC)

    def current_sources(self) -> List[Element]:
        return self.elements_of(Component.CURRENT_SRC)

    def resistors(self) -> List[Element]:
        return self.elements_of(Component.RESISTOR)

    @property
    def ground(self) -> Optional[Element]:
        grounds = self.elements_of(Component.GROUND)
        return grounds[0] if grounds else None

    def ground_id(self) -> Optional[int]:
        ground = self.ground
        return None if ground is None else ground.id

    # --------------------------------------------------------------- tools

    def tools_of(self, tool_type: ToolType) -> List[Tool]:
        return [t for t in self.tools if t.tool_type is tool_type]

    def nodes(self) -> List[Tool]:
        return self.tools_of(ToolType.NODE)

    def super_nodes(self) -> List[Tool]:
        return self.tools_of(ToolType.SUPER_NODE)

    def meshes(self) -> List[Tool]:
        return self.tools_of(ToolType.MESH)

    def get_tool_by_id(self, tool_id: int) -> Tool:
        for tool in self.tools:
            if tool.id == tool_id:
                return tool
        raise KeyError(f"Tool '{tool_id}' not present in the circuit.")

    def get_tools_for_element(self, element_id: int) -> List[Tool]:
        return [t for t in self.tools if t.contains(element_id)]

    def _next_tool_id(self) -> int:
        return self.tools[-1].id + 1 if self.tools else 1

    def _add_tools(self, tools: List[Tool]) -> None:
        size = len(self.tools)
        for tool in tools:
            tool.id = self._next_tool_id()
            self.tools.append(tool)
        try:
            self.validate()
        except StatusError:
            del self.tools[size:]
            raise

    def _require_nodes(self) -> List[Tool]:
        nodes = self.nodes()
        if not nodes:
            raise KnownError("No nodes present")
        return nodes

    # ------------------------------------------------------------ topology

    def create_nodes(self) -> Container:
        """
        Materialize one Node per electrically common point except ground.

        A candidate point is an element together with the elements on one of
        its terminals. Positive terminals are visited first, then negative
        terminals, both in insertion order. Candidates touching ground or
        matching an existing node's member set are skipped.
        """
        ground = self.ground_id()
        candidates = [e.positive + [e.id] for e in self.elements]
        candidates += [e.negative + [e.id] for e in self.elements]

        known = [set(n.members) for n in self.nodes()]
        created: List[Tool] = []
        for members in candidates:
            members = _unique(members)
            if ground is not None and ground in members:
                continue
            if set(members) in known:
                continue
            known.append(set(members))
            created.append(Tool.create_node(members, ground))

        self._add_tools(created)
        logger.debug("Created %d nodes", len(created))
        return self

    def create_super_nodes(self) -> Container:
        """
        Group the two terminals of every floating voltage source.

        Members are the elements on both terminals followed by the source.
        Sources with a terminal on ground are solved as ordinary nodes.
        """
        self._require_nodes()
        ground = self.ground_id()
        known = [set(t.members) for t in self.super_nodes()]
        created: List[Tool] = []
        for source in self.voltage_sources():
            if ground is not None and source.connected_to_ground(ground):
                continue
            members = _unique(source.positive + source.negative + [source.id])
            if set(members) in known:
                continue
            known.append(set(members))
            created.append(Tool.create_super_node(members, ground))

        self._add_tools(created)
        logger.debug("Created %d super nodes", len(created))
        return self

    def node_graph(self) -> ToolGraph:
        """
        Adjacency graph between nodes, plus the ground vertex ``0``.

        Ground is only present when some node member touches it.
        """
        nodes = sorted(self._require_nodes(), key=lambda n: n.id)
        ground = self.ground_id()
        graph = ToolGraph()
        for node in nodes:
            graph.add_vertex(node.id)

        for i, node in enumerate(nodes):
            if ground is not None:
                for member in node.members:
                    element = self.elements[self._by_id[member]] if member in self._by_id else None
                    if element is not None and element.connected_to_ground(ground):
                        graph.add_edge(node.id, GROUND_VERTEX, member)
                        break
            for other in nodes[i + 1:]:
                for member in node.members:
                    if other.contains(member):
                        graph.add_edge(node.id, other.id, member)
                        break
        return graph

    def create_meshes(self) -> Container:
        """
        One Mesh per fundamental cycle of the node graph, rooted at ground.

        Mesh members are the elements realizing the cycle's edges.
        """
        graph = self.node_graph()
        ground = self.ground_id()
        known = [set(m.members) for m in self.meshes()]
        created: List[Tool] = []
        for cycle in graph.cycle_basis(GROUND_VERTEX):
            members = graph.cycle_elements(cycle)
            if set(members) in known:
                continue
            known.append(set(members))
            created.append(Tool.create_mesh(members, ground))

        self._add_tools(created)
        logger.debug(
            "Created %d meshes from %d vertices and %d edges",
            len(created), len(graph.vertices), len(graph.edges),
        )
        return self

    def create_super_meshes(self) -> Container:
        raise KnownError("Super meshes are not implemented")

    def simplify(self, method: Simplification) -> Container:
        raise KnownError(f"Simplification '{method.value}' is not implemented")

    def _terminal_node(self, element: Element, side: List[int], nodes: List[Tool]) -> int:
        ground = self.ground_id()
        if ground is not None and ground in side:
            return GROUND_VERTEX
        members = set(side) | {element.id}
        for node in nodes:
            if set(node.members) == members:
                return node.id
        for node in nodes:
            if node.contains(element.id) and members & set(node.members) - {element.id}:
                return node.id
        raise KnownError(f"No node found for a terminal of {element.pretty_string()}")

    def get_all_node_pairs(self) -> List[NodePair]:
        """
        ``(positive node, negative node, element)`` for every non-ground element.

        Ground is reported as node ``0``.
        """
        nodes = self._require_nodes()
        return [
            (
                self._terminal_node(element, element.positive, nodes),
                self._terminal_node(element, element.negative, nodes),
                element,
            )
            for element in self.components()
        ]

    # ---------------------------------------------------------- validation

    def class_name(self) -> str:
        return "Container"

    def validate(self) -> Status:
        """
        Check the whole circuit and report every problem at once.

        * every element and tool is valid on its own
        * no two elements and no two tools share an id
        * every connection names an element of the circuit
        * at least one source and exactly one ground
        """
        errors: List[StatusError] = []
        errors += get_all_internal_status_errors(self.elements)
        errors += get_all_internal_status_errors(self.tools)
        errors += check_duplicates(self.elements)
        errors += check_duplicates(self.tools)

        ids = {e.id for e in self.elements}
        for element in self.elements:
            for ref in element.connections():
                if ref not in ids:
                    errors.append(KnownError(f"Element {element.id} is connected to unknown element {ref}"))

        if not any(e.component.is_source() for e in self.elements):
            errors.append(KnownError("No Sources"))
        if len(self.elements_of(Component.GROUND)) != 1:
            errors.append(KnownError("Multiple Grounds"))

        return resolve(errors)

    def __str__(self) -> str:
        elements = [e.pretty_string() for e in self.elements]
        tools = [str(t) for t in self.tools]
        return f"Container {{ elements: {elements}, tools: {tools} }}"
