from dataclasses import dataclass

from config import DEFAULT_VOLTAGE
from elements.base import Element, ElementType


@dataclass(eq=False)
class Battery(Element):
    """
    Ideal voltage source.

    p1 is the positive terminal: the source enforces V(p1) - V(p2) = voltage.
    Its branch current (p1 to p2 through the source) is an extra MNA
    unknown, so it has no Norton equivalent.
    """

    element_type = ElementType.BATTERY
    property_defaults = {"voltage": DEFAULT_VOLTAGE}
    is_voltage_source = True

    voltage: float = DEFAULT_VOLTAGE

    def voltage_drop_for(self, current, v1, v2):
        return self.voltage
