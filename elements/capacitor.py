from dataclasses import dataclass

from config import DEFAULT_CAPACITANCE, INFINITE_RESISTANCE
from elements.base import CompanionElement, ElementType, NortonEquivalent


@dataclass(eq=False)
class Capacitor(CompanionElement):
    """
    Backward-Euler capacitor.

    For a step dt the companion model is G = C/dt in parallel with a
    current source -G * V_prev, where V_prev is the committed voltage
    across the terminals.  At dt = 0 (DC) it is an open circuit.
    """

    element_type = ElementType.CAPACITOR
    property_defaults = {"capacitance": DEFAULT_CAPACITANCE}

    capacitance: float = DEFAULT_CAPACITANCE

    def norton(self, dt: float) -> NortonEquivalent:
        if dt > 0:
            conductance = self.capacitance / dt
            return NortonEquivalent(conductance, -conductance * self.previous_voltage)
        return NortonEquivalent(1.0 / INFINITE_RESISTANCE)

    def branch_current(self, v1: float, v2: float, dt: float) -> float:
        if dt > 0:
            return (self.capacitance / dt) * ((v1 - v2) - self.previous_voltage)
        return 0.0

    def voltage_drop_for(self, current, v1, v2):
        return v1 - v2
