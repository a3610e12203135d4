"""Solver-wide constants shared by the element models, the solver and the CLI."""

# Topology
SNAP_DISTANCE = 10  # terminals closer than this (canvas units) share a node

# Element model
EPSILON_RESISTANCE = 1e-6   # "ideal" conductor
INFINITE_RESISTANCE = 1e9   # "ideal" open circuit

DEFAULT_RESISTANCE = 10
DEFAULT_VOLTAGE = 9
DEFAULT_CAPACITANCE = 1e-4
DEFAULT_INDUCTANCE = 1

# Linear solver
PIVOT_TOLERANCE = 1e-10

# Transient stepping
SIMULATION_DT = 0.05
DEFAULT_SOLVE_DT = 0.1
CHANGE_THRESHOLD = 1e-4
FRAME_INTERVAL_MS = 16

# Diagnostics
SHORT_CIRCUIT_CURRENT = 1e3

# Toolbox placement defaults for newly added elements
PLACEMENT_ORIGIN = (100, 100)
PLACEMENT_LENGTH = 100
PLACEMENT_OFFSET = 20
PLACEMENT_RESISTANCE = 10
PLACEMENT_VOLTAGE = 9
PLACEMENT_CAPACITANCE = 0.001
PLACEMENT_INDUCTANCE = 1
PLACEMENT_SWITCH_OPEN = True

ELEMENT_ID_LENGTH = 9
