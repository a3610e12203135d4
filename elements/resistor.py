from dataclasses import dataclass

from config import DEFAULT_RESISTANCE
from elements.base import ElementType, ResistiveElement


@dataclass(eq=False)
class Resistor(ResistiveElement):
    element_type = ElementType.RESISTOR
    property_defaults = {"resistance": DEFAULT_RESISTANCE}

    resistance: float = DEFAULT_RESISTANCE

    def effective_resistance(self) -> float:
        return self.resistance

    def voltage_drop_for(self, current, v1, v2):
        return current * self.resistance


@dataclass(eq=False)
class Lightbulb(Resistor):
    """A resistor whose brightness the editor derives from ``current``."""

    element_type = ElementType.LIGHTBULB

    @property
    def power(self) -> float:
        return self.current ** 2 * self.resistance
