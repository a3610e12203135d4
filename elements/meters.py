from dataclasses import dataclass

from config import INFINITE_RESISTANCE
from elements.base import ElementType, ResistiveElement


@dataclass(eq=False)
class Voltmeter(ResistiveElement):
    """Parallel voltage meter with a near-infinite input resistance."""

    element_type = ElementType.VOLTMETER

    def effective_resistance(self) -> float:
        return INFINITE_RESISTANCE

    def voltage_drop_for(self, current, v1, v2):
        return v1 - v2

    @property
    def reading(self) -> float:
        return self.voltage_drop
