from dataclasses import dataclass

from config import EPSILON_RESISTANCE
from elements.base import ElementType, ResistiveElement


@dataclass(eq=False)
class Wire(ResistiveElement):
    """Ideal conductor joining two terminals."""

    element_type = ElementType.WIRE

    def effective_resistance(self) -> float:
        return EPSILON_RESISTANCE

    def voltage_drop_for(self, current, v1, v2):
        return 0.0


@dataclass(eq=False)
class Ammeter(Wire):
    """Series current meter; electrically a wire, its reading is ``current``."""

    element_type = ElementType.AMMETER
