from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List

import numpy as np

from ..operations import Negate, Operation, Sum, Value

Array = np.ndarray
Terms = List[Operation]


@dataclass
class StampData:
    """
    Shared view of the symbolic MNA system during stamping.

    Every cell of ``A`` and ``z`` holds a list of terms; :meth:`assemble`
    turns them into simplified sums once all elements are stamped.

    Attributes:
        A: Square table (size n+m) of term lists.
        z: Right-hand side, one term list per row.
        node_index: Mapping node tool id -> row/column index (ground excluded).
        aux_map: Mapping voltage source element id -> auxiliary index.
    """
    A: List[List[Terms]]
    z: List[Terms]
    node_index: Dict[int, int]
    aux_map: Dict[int, int]

    @classmethod
    def empty(cls, node_index: Dict[int, int], aux_map: Dict[int, int]) -> StampData:
        size = len(node_index) + len(aux_map)
        return cls(
            A=[[[] for _ in range(size)] for _ in range(size)],
            z=[[] for _ in range(size)],
            node_index=node_index,
            aux_map=aux_map,
        )

    @property
    def size(self) -> int:
        return len(self.z)

    def node(self, tool_id: int) -> int | None:
        return self.node_index.get(tool_id)

    def aux(self, element_id: int) -> int:
        return self.aux_map[element_id]

    def assemble(self) -> tuple[Array, Array]:
        """Object arrays ``(A, z)`` of simplified operations; empty cells become ``0``."""
        A = np.empty((self.size, self.size), dtype=object)
        z = np.empty(self.size, dtype=object)
        for i in range(self.size):
            for j in range(self.size):
                A[i, j] = _collect(self.A[i][j])
            z[i] = _collect(self.z[i])
        return A, z


def _collect(terms: Terms) -> Operation:
    if not terms:
        return Value(0.0)
    return Sum(terms).simplify()


def stamp_series_admittance(data: StampData, n_plus: int, n_minus: int, admittance: Operation) -> None:
    ip = data.node(n_plus)
    ineg = data.node(n_minus)
    if ip is not None:
        data.A[ip][ip].append(admittance)
    if ineg is not None:
        data.A[ineg][ineg].append(admittance)
    if ip is not None and ineg is not None:
        data.A[ip][ineg].append(Negate(admittance))
        data.A[ineg][ip].append(Negate(admittance))


def stamp_current_source(data: StampData, n_plus: int, n_minus: int, current: Operation) -> None:
    """
    Positive current leaves the source through n_plus.
    """
    ip = data.node(n_plus)
    ineg = data.node(n_minus)
    if ip is not None:
        data.z[ip].append(current)
    if ineg is not None:
        data.z[ineg].append(Negate(current))


def stamp_voltage_source(data: StampData, aux_idx: int, n_plus: int, n_minus: int, voltage: Operation) -> None:
    ip = data.node(n_plus)
    ineg = data.node(n_minus)
    if ip is not None:
        data.A[ip][aux_idx].append(Value(1.0))
        data.A[aux_idx][ip].append(Value(1.0))
    if ineg is not None:
        data.A[ineg][aux_idx].append(Value(-1.0))
        data.A[aux_idx][ineg].append(Value(-1.0))
    data.z[aux_idx].append(voltage)
