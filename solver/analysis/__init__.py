"""
Analysis modules for circuit simulation.

This package contains the MNA assembly, result extraction, reporting,
diagnostics and plotting stages used by the solver.
"""

from .mna_builder import MatrixDimensionError, MNABuilder, MNASystem
from .current_calculator import CurrentCalculator
from .results_formatter import ResultsFormatter
from .diagnostics import CircuitGraph, CircuitValidator

__all__ = ['MNABuilder', 'MNASystem', 'MatrixDimensionError', 'CurrentCalculator',
           'ResultsFormatter', 'CircuitGraph', 'CircuitValidator']
