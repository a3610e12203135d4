"""
Element factory and the built-in demonstration circuits.
"""

import logging
import random
import string
from typing import Callable, Dict, List, Optional

from config import (ELEMENT_ID_LENGTH, PLACEMENT_CAPACITANCE, PLACEMENT_INDUCTANCE, PLACEMENT_LENGTH,
                    PLACEMENT_OFFSET, PLACEMENT_ORIGIN, PLACEMENT_RESISTANCE, PLACEMENT_SWITCH_OPEN,
                    PLACEMENT_VOLTAGE)
from elements import Element, ElementType, TerminalPoint, element_class
from elements.circuit import Circuit

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_lowercase + string.digits

# Property values used when a preset does not set one explicitly
PRESET_DEFAULTS = {
    "resistance": PLACEMENT_RESISTANCE,
    "voltage": PLACEMENT_VOLTAGE,
    "is_open": False,
    "capacitance": PLACEMENT_CAPACITANCE,
    "inductance": PLACEMENT_INDUCTANCE,
}

# Property values of an element freshly added from the toolbox
PLACEMENT_DEFAULTS = dict(PRESET_DEFAULTS, is_open=PLACEMENT_SWITCH_OPEN)


def new_element_id() -> str:
    return "".join(random.choices(ID_ALPHABET, k=ELEMENT_ID_LENGTH))


def create_element(element_type, x1: float, y1: float, x2: float, y2: float,
                   element_id: Optional[str] = None, defaults: Optional[Dict] = None, **properties) -> Element:
    """
    Build an element of ``element_type`` between (x1, y1) and (x2, y2).

    Terminal ids are derived from the element id.  ``properties`` override
    ``defaults`` (the preset defaults when omitted); only the properties the
    element type actually has are applied.
    """
    cls = element_class(element_type)
    element_id = element_id or new_element_id()
    values = dict(PRESET_DEFAULTS if defaults is None else defaults)
    values.update(properties)
    kwargs = {name: value for name, value in values.items() if name in cls.property_defaults}
    return cls(
        id=element_id,
        p1=TerminalPoint(f"{element_id}-p1", x1, y1),
        p2=TerminalPoint(f"{element_id}-p2", x2, y2),
        **kwargs,
    )


def place_element(element_type, index: int, element_id: Optional[str] = None) -> Element:
    """New toolbox element, offset diagonally by its position in the circuit."""
    offset = index * PLACEMENT_OFFSET
    x, y = PLACEMENT_ORIGIN[0] + offset, PLACEMENT_ORIGIN[1] + offset
    return create_element(element_type, x, y, x + PLACEMENT_LENGTH, y,
                          element_id=element_id, defaults=PLACEMENT_DEFAULTS)


def add_element(circuit: Circuit, element_type) -> Element:
    return circuit.add(place_element(element_type, len(circuit)))


def series_circuit() -> List[Element]:
    return [
        create_element(ElementType.BATTERY, 100, 300, 100, 100, voltage=12),
        create_element(ElementType.WIRE, 100, 100, 300, 100),
        create_element(ElementType.SWITCH, 300, 100, 400, 100, is_open=True),
        create_element(ElementType.RESISTOR, 400, 100, 400, 200, resistance=10),
        create_element(ElementType.LIGHTBULB, 400, 200, 400, 300, resistance=10),
        create_element(ElementType.WIRE, 400, 300, 100, 300),
    ]


def parallel_circuit() -> List[Element]:
    return [
        create_element(ElementType.BATTERY, 100, 300, 100, 100, voltage=12),
        create_element(ElementType.WIRE, 100, 100, 300, 100),
        create_element(ElementType.SWITCH, 300, 100, 400, 100, is_open=True),
        create_element(ElementType.RESISTOR, 400, 100, 400, 300, resistance=20),
        create_element(ElementType.WIRE, 400, 100, 550, 100),
        create_element(ElementType.LIGHTBULB, 550, 100, 550, 300, resistance=20),
        create_element(ElementType.WIRE, 550, 300, 400, 300),
        create_element(ElementType.WIRE, 400, 300, 100, 300),
    ]


def rc_circuit() -> List[Element]:
    return [
        create_element(ElementType.BATTERY, 100, 300, 100, 100, voltage=9),
        create_element(ElementType.SWITCH, 100, 100, 300, 100, is_open=True),
        create_element(ElementType.RESISTOR, 300, 100, 500, 100, resistance=100),
        create_element(ElementType.CAPACITOR, 500, 100, 500, 300, capacitance=0.005),
        create_element(ElementType.WIRE, 500, 300, 100, 300),
    ]


def rl_circuit() -> List[Element]:
    return [
        create_element(ElementType.BATTERY, 100, 300, 100, 100, voltage=9),
        create_element(ElementType.SWITCH, 100, 100, 300, 100, is_open=True),
        create_element(ElementType.RESISTOR, 300, 100, 500, 100, resistance=10),
        create_element(ElementType.INDUCTOR, 500, 100, 500, 300, inductance=2),
        create_element(ElementType.WIRE, 500, 300, 100, 300),
    ]


PRESETS: Dict[str, Callable[[], List[Element]]] = {
    "series": series_circuit,
    "parallel": parallel_circuit,
    "rc": rc_circuit,
    "rl": rl_circuit,
}


def load_preset(name: str) -> Circuit:
    """Fresh ``Circuit`` for a named preset; raises KeyError for unknown names."""
    try:
        factory = PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown preset {name!r}; available: {', '.join(PRESETS)}") from None
    circuit = Circuit(factory(), name=name)
    logger.debug(f"Loaded preset '{name}' with {len(circuit)} elements")
    return circuit
