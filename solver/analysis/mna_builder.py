"""
MNA Builder - assembles the Modified Nodal Analysis system for one tick.

Unknown layout: node k (k >= 1) maps to row k - 1, and the i-th battery
in element order maps to row (node_count - 1) + i.  Node 0 is ground and
has no row.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np

from elements import Element
from solver.netlist import NodeMap

logger = logging.getLogger(__name__)


class MatrixDimensionError(RuntimeError):
    """Raised when the assembled system does not match the unknown count."""


@dataclass
class MNASystem:
    matrix: np.ndarray
    rhs: np.ndarray
    node_count: int
    voltage_sources: List[Element] = field(default_factory=list)
    _source_rows: Dict[str, int] = field(default_factory=dict, repr=False)

    @property
    def size(self) -> int:
        return len(self.rhs)

    def source_index(self, element: Element) -> int:
        """Row of a battery's branch-current unknown, or -1."""
        return self._source_rows.get(element.id, -1)


class MNABuilder:
    """
    Builds ``A x = Z`` from the element companion models.

    Conductances and current sources come from ``Element.norton``;
    batteries add one branch-current unknown each.
    """

    def __init__(self, node_map: NodeMap, dt: float):
        self.node_map = node_map
        self.dt = dt

    def build(self, elements) -> MNASystem:
        node_count = self.node_map.node_count
        voltage_sources = [e for e in elements if e.is_voltage_source]
        size = max(node_count - 1, 0) + len(voltage_sources)

        A = np.zeros((size, size))
        Z = np.zeros(size)

        for element in elements:
            if element.is_voltage_source:
                continue
            n1, n2 = self.node_map.nodes_of(element)
            if n1 is None or n2 is None or n1 == n2:
                continue
            conductance, current_source = element.norton(self.dt)
            self._apply_conductance_stamp(A, n1, n2, conductance)
            if current_source != 0:
                self._apply_current_source_stamp(Z, n1, n2, current_source)

        source_rows = {}
        for index, source in enumerate(voltage_sources):
            vs_index = (node_count - 1) + index
            source_rows[source.id] = vs_index
            n1, n2 = self.node_map.nodes_of(source)
            if n1 is None or n2 is None or n1 == n2:
                logger.warning(f"Battery {source.id} is shorted by its own terminals; not stamped")
                continue
            self._apply_voltage_source_stamp(A, Z, n1, n2, source.voltage, vs_index)

        system = MNASystem(A, Z, node_count, voltage_sources, source_rows)
        self._check_dimensions(system, elements)
        logger.debug(f"Assembled {system.size}x{system.size} MNA system "
                     f"({node_count} nodes, {len(voltage_sources)} sources, dt={self.dt})")
        return system

    def _check_dimensions(self, system: MNASystem, elements):
        """Compare the system against the nodes and sources the elements actually touch."""
        touched = {self.node_map.node_of(terminal.id) for element in elements
                   for terminal in (element.p1, element.p2)}
        touched.discard(None)
        sources = sum(1 for element in elements if element.is_voltage_source)
        expected = max(len(touched) - 1, 0) + sources
        if system.matrix.shape != (expected, expected) or system.rhs.shape != (expected,):
            raise MatrixDimensionError(
                f"MNA system is {system.matrix.shape} with rhs {system.rhs.shape}, expected {expected} unknowns")

    @staticmethod
    def _apply_conductance_stamp(A, n1, n2, conductance):
        if n1 > 0:
            A[n1 - 1, n1 - 1] += conductance
        if n2 > 0:
            A[n2 - 1, n2 - 1] += conductance
        if n1 > 0 and n2 > 0:
            A[n1 - 1, n2 - 1] -= conductance
            A[n2 - 1, n1 - 1] -= conductance

    @staticmethod
    def _apply_current_source_stamp(Z, n1, n2, current):
        """Source current flows from n1 to n2 through the element."""
        if n1 > 0:
            Z[n1 - 1] -= current
        if n2 > 0:
            Z[n2 - 1] += current

    @staticmethod
    def _apply_voltage_source_stamp(A, Z, node_pos, node_neg, voltage, vs_index):
        if node_pos > 0:
            A[vs_index, node_pos - 1] = 1
            A[node_pos - 1, vs_index] = 1
        if node_neg > 0:
            A[vs_index, node_neg - 1] = -1
            A[node_neg - 1, vs_index] = -1
        Z[vs_index] = voltage
