"""
Circuit solver: topology resolution, MNA assembly, linear solve and the
fixed-step transient driver.
"""

from solver.netlist import Node, NodeMap, resolve_nodes
from solver.linear import gaussian_elimination
from solver.simulator import CircuitSimulator, SimulationSettings, SolverResult, solve_circuit
from solver.transient import DriverState, TickReport, TransientDriver, TransientTrace

__all__ = [
    'Node',
    'NodeMap',
    'resolve_nodes',
    'gaussian_elimination',
    'CircuitSimulator',
    'SimulationSettings',
    'SolverResult',
    'solve_circuit',
    'DriverState',
    'TickReport',
    'TransientDriver',
    'TransientTrace',
]
