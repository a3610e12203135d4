"""
Current Calculator - turns the MNA solution back into element readings.

Node potentials come straight from the solution vector, battery currents
from their branch unknowns, and every other branch current from the
element's own companion model.
"""

import math
from typing import Dict

from solver.analysis.mna_builder import MNASystem
from solver.netlist import NodeMap


def _finite_or_zero(value) -> float:
    value = float(value)
    return 0.0 if math.isnan(value) else value


class CurrentCalculator:
    """
    Handles calculation of node potentials and element currents from a
    solved MNA system.
    """

    def __init__(self, node_map: NodeMap, system: MNASystem, solution, dt: float):
        self.node_map = node_map
        self.system = system
        self.solution = solution
        self.dt = dt
        self.node_potentials: Dict[int, float] = {}
        self.point_potentials: Dict[str, float] = {}
        self.element_currents: Dict[str, float] = {}

    def calculate_node_potentials(self) -> Dict[int, float]:
        self.node_potentials = {0: 0.0} if self.node_map.node_count else {}
        for node_id in range(1, self.node_map.node_count):
            self.node_potentials[node_id] = _finite_or_zero(self.solution[node_id - 1])
        return self.node_potentials

    def potential_of(self, terminal_id: str) -> float:
        node_id = self.node_map.node_of(terminal_id)
        if node_id is None:
            return 0.0
        return self.node_potentials.get(node_id, 0.0)

    def calculate_all(self, elements):
        """
        Calculate terminal potentials and currents for all elements.
        Returns dict with point_potentials and element_currents.
        """
        self.calculate_node_potentials()
        self.point_potentials = {}
        self.element_currents = {}

        for element in elements:
            v1 = self.potential_of(element.p1.id)
            v2 = self.potential_of(element.p2.id)
            self.point_potentials[element.p1.id] = v1
            self.point_potentials[element.p2.id] = v2

            if element.is_voltage_source:
                self._calculate_source_current(element)
            else:
                self.element_currents[element.id] = _finite_or_zero(element.branch_current(v1, v2, self.dt))

        return {
            'point_potentials': self.point_potentials,
            'element_currents': self.element_currents,
        }

    def _calculate_source_current(self, element):
        """Battery current is its own unknown in the MNA solution."""
        index = self.system.source_index(element)
        if index != -1:
            self.element_currents[element.id] = _finite_or_zero(self.solution[index])
