import logging
from dataclasses import dataclass

from config import EPSILON_RESISTANCE, INFINITE_RESISTANCE
from elements.base import ElementType, ResistiveElement

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Switch(ResistiveElement):
    """Wire when closed, effectively an open circuit when open."""

    element_type = ElementType.SWITCH
    property_defaults = {"is_open": False}
    json_names = {"is_open": "isOpen"}

    is_open: bool = False

    def effective_resistance(self) -> float:
        return INFINITE_RESISTANCE if self.is_open else EPSILON_RESISTANCE

    def voltage_drop_for(self, current, v1, v2):
        return 0.0

    def toggle(self) -> bool:
        self.is_open = not self.is_open
        logger.debug(f"Switch {self.id} {'opened' if self.is_open else 'closed'}")
        return self.is_open
