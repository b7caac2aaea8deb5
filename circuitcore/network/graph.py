from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

Edge = Tuple[int, int]


def _key(a: int, b: int) -> Edge:
    return (a, b) if a <= b else (b, a)


@dataclass
class ToolGraph:
    """
    Undirected adjacency graph between solving units.

    Vertices are Node tool ids plus the ground vertex ``0``. Two vertices are
    joined when they share an element; the graph is simple, so each edge
    remembers only the first element that realizes it.

    Attributes:
        vertices: Registered vertex ids, in insertion order.
        edges: Mapping ``(low, high) -> element id`` realizing the edge.
    """
    vertices: List[int] = field(default_factory=list)
    edges: Dict[Edge, int] = field(default_factory=dict)

    def add_vertex(self, vertex: int) -> None:
        """
        Register a vertex. Adding an existing vertex is a no-op.

        Args:
            vertex: Tool id, or ``0`` for ground.
        """
        if vertex not in self.vertices:
            self.vertices.append(vertex)

    def add_edge(self, a: int, b: int, element: int) -> bool:
        """
        Join two vertices through ``element``.

        Both vertices are registered if missing. Self loops are ignored and an
        existing edge keeps its first element.

        Args:
            a: First vertex.
            b: Second vertex.
            element: Id of the element shared by both vertices.

        Returns:
            True when a new edge was created.
        """
        if a == b:
            return False
        self.add_vertex(a)
        self.add_vertex(b)
        key = _key(a, b)
        if key in self.edges:
            return False
        self.edges[key] = element
        return True

    def edge_element(self, a: int, b: int) -> int:
        return self.edges[_key(a, b)]

    def neighbours(self, vertex: int) -> List[int]:
        out = []
        for a, b in self.edges:
            if a == vertex:
                out.append(b)
            elif b == vertex:
                out.append(a)
        return sorted(out)

    def components(self) -> List[List[int]]:
        """
        Connected components, each sorted, ordered by their smallest vertex.
        """
        seen: set[int] = set()
        out: List[List[int]] = []
        for start in sorted(self.vertices):
            if start in seen:
                continue
            component = []
            queue = deque([start])
            seen.add(start)
            while queue:
                v = queue.popleft()
                component.append(v)
                for w in self.neighbours(v):
                    if w not in seen:
                        seen.add(w)
                        queue.append(w)
            out.append(sorted(component))
        return out

    def spanning_tree(self, root: int) -> Tuple[Dict[int, Optional[int]], Dict[int, int]]:
        """
        Breadth-first spanning tree of the component containing ``root``.

        Returns:
            Tuple containing:
            - parent: vertex -> parent vertex (``None`` for the root)
            - depth: vertex -> distance from the root
        """
        parent: Dict[int, Optional[int]] = {root: None}
        depth: Dict[int, int] = {root: 0}
        queue = deque([root])
        while queue:
            v = queue.popleft()
            for w in self.neighbours(v):
                if w not in parent:
                    parent[w] = v
                    depth[w] = depth[v] + 1
                    queue.append(w)
        return parent, depth

    def cycle_basis(self, root: int = 0) -> List[List[int]]:
        """
        Fundamental cycles of a spanning forest.

        Each component is spanned from ``root`` when it contains it, otherwise
        from its smallest vertex. Every non-tree edge closes exactly one cycle
        with the tree, so a component yields ``|E| - |V| + 1`` cycles.

        Args:
            root: Preferred root vertex (ground).

        Returns:
            List of cycles, each a list of vertices in traversal order. The
            closing edge runs from the last vertex back to the first.
        """
        cycles: List[List[int]] = []
        for component in self.components():
            start = root if root in component else component[0]
            parent, depth = self.spanning_tree(start)
            tree = {_key(v, p) for v, p in parent.items() if p is not None}
            members = set(component)
            for a, b in sorted(self.edges):
                if a not in members or (a, b) in tree:
                    continue
                cycles.append(self._close_cycle(a, b, parent, depth))
        return cycles

    @staticmethod
    def _close_cycle(a: int, b: int, parent: Dict[int, Optional[int]], depth: Dict[int, int]) -> List[int]:
        left = [a]
        right = [b]
        u, v = a, b
        while depth[u] > depth[v]:
            u = parent[u]
            left.append(u)
        while depth[v] > depth[u]:
            v = parent[v]
            right.append(v)
        while u != v:
            u = parent[u]
            v = parent[v]
            left.append(u)
            right.append(v)
        # both paths end at the common ancestor
        return left + list(reversed(right[:-1]))

    def cycle_elements(self, cycle: List[int]) -> List[int]:
        """Element ids along the edges of ``cycle``, closing edge included."""
        out: List[int] = []
        for i, v in enumerate(cycle):
            w = cycle[(i + 1) % len(cycle)]
            element = self.edge_element(v, w)
            if element not in out:
                out.append(element)
        return out
