"""
One-tick circuit solver.

``solve_circuit`` runs the full pipeline for a list of elements:
terminals are resolved into nodes, the MNA system is assembled from each
element's companion model, solved by Gaussian elimination, and the
solution is turned back into terminal potentials and element currents.
The pipeline reads elements but never mutates them.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence

import numpy as np

from config import (CHANGE_THRESHOLD, DEFAULT_SOLVE_DT, FRAME_INTERVAL_MS, PIVOT_TOLERANCE,
                    SIMULATION_DT, SNAP_DISTANCE)
from elements import Element
from solver.analysis.current_calculator import CurrentCalculator
from solver.analysis.mna_builder import MNABuilder, MNASystem
from solver.linear import gaussian_elimination
from solver.netlist import NodeMap, resolve_nodes

logger = logging.getLogger(__name__)


@dataclass
class SimulationSettings:
    """Configuration settings for simulation"""
    dt: float = SIMULATION_DT
    snap_distance: float = SNAP_DISTANCE
    pivot_tolerance: float = PIVOT_TOLERANCE
    change_threshold: float = CHANGE_THRESHOLD
    frame_interval_ms: int = FRAME_INTERVAL_MS


@dataclass
class SolverResult:
    """Container for the outputs of one solved tick"""
    dt: float
    point_potentials: Dict[str, float] = field(default_factory=dict)
    element_currents: Dict[str, float] = field(default_factory=dict)
    node_potentials: Dict[int, float] = field(default_factory=dict)
    node_map: NodeMap = field(default_factory=NodeMap)
    system: Optional[MNASystem] = None
    solution: np.ndarray = field(default_factory=lambda: np.zeros(0))
    solve_time: float = 0.0

    def current_of(self, element_id: str) -> float:
        return self.element_currents.get(element_id, 0.0)

    def potential_of(self, terminal_id: str) -> float:
        return self.point_potentials.get(terminal_id, 0.0)


class CircuitSimulator:
    """Runs the resolve, assemble, solve and extract stages with fixed settings."""

    def __init__(self, settings: Optional[SimulationSettings] = None):
        self.settings = settings or SimulationSettings()

    def solve(self, elements: Sequence[Element], dt: Optional[float] = None) -> SolverResult:
        dt = self.settings.dt if dt is None else dt
        start = time.perf_counter()
        elements = list(elements)

        node_map = resolve_nodes(elements, self.settings.snap_distance)
        if node_map.node_count == 0:
            return SolverResult(dt=dt, node_map=node_map)

        system = MNABuilder(node_map, dt).build(elements)
        solution = gaussian_elimination(system.matrix, system.rhs, self.settings.pivot_tolerance)

        calculator = CurrentCalculator(node_map, system, solution, dt)
        results = calculator.calculate_all(elements)

        result = SolverResult(
            dt=dt,
            point_potentials=results['point_potentials'],
            element_currents=results['element_currents'],
            node_potentials=calculator.node_potentials,
            node_map=node_map,
            system=system,
            solution=solution,
            solve_time=time.perf_counter() - start,
        )
        logger.debug(f"Solved {len(elements)} elements in {result.solve_time * 1e3:.2f} ms")
        return result


def solve_circuit(elements: Sequence[Element], dt: float = DEFAULT_SOLVE_DT,
                  settings: Optional[SimulationSettings] = None) -> SolverResult:
    """Solve one tick of ``elements`` at time step ``dt`` (0 for DC)."""
    return CircuitSimulator(settings).solve(elements, dt)
