from dataclasses import dataclass

from config import DEFAULT_INDUCTANCE, EPSILON_RESISTANCE
from elements.base import CompanionElement, ElementType, NortonEquivalent


@dataclass(eq=False)
class Inductor(CompanionElement):
    """
    Backward-Euler inductor.

    For a step dt the companion model is G = dt/L in parallel with a
    current source equal to the committed current.  At dt = 0 (DC) it is
    a short circuit.
    """

    element_type = ElementType.INDUCTOR
    property_defaults = {"inductance": DEFAULT_INDUCTANCE}

    inductance: float = DEFAULT_INDUCTANCE

    def norton(self, dt: float) -> NortonEquivalent:
        if dt > 0:
            return NortonEquivalent(dt / self.inductance, self.prev_current)
        return NortonEquivalent(1.0 / EPSILON_RESISTANCE)

    def branch_current(self, v1: float, v2: float, dt: float) -> float:
        if dt > 0:
            return self.prev_current + (v1 - v2) * dt / self.inductance
        return (v1 - v2) / EPSILON_RESISTANCE

    def voltage_drop_for(self, current, v1, v2):
        return v1 - v2
