"""
Circuit element models.

Each element type lives in its own module; this package exposes the
registry that maps an ``ElementType`` to its class, plus the helpers to
build elements from circuit JSON.
"""

from typing import Any, Dict, Type

from elements.base import CompanionElement, Element, ElementType, NortonEquivalent, ResistiveElement, TerminalPoint
from elements.battery import Battery
from elements.capacitor import Capacitor
from elements.inductor import Inductor
from elements.meters import Voltmeter
from elements.resistor import Lightbulb, Resistor
from elements.switch import Switch
from elements.wire import Ammeter, Wire

ELEMENT_CLASSES: Dict[ElementType, Type[Element]] = {
    cls.element_type: cls
    for cls in (Wire, Resistor, Battery, Lightbulb, Switch, Voltmeter, Ammeter, Capacitor, Inductor)
}


def element_class(element_type) -> Type[Element]:
    """Look up the class for an ``ElementType`` or its string value."""
    try:
        return ELEMENT_CLASSES[ElementType(element_type)]
    except ValueError:
        raise ValueError(f"Unknown element type: {element_type!r}") from None


def element_from_dict(data: Dict[str, Any]) -> Element:
    if "type" not in data:
        raise ValueError(f"Element {data.get('id')!r} has no type")
    for terminal in ("p1", "p2"):
        if terminal not in data:
            raise ValueError(f"Element {data.get('id')!r} is missing terminal {terminal}")
    try:
        return element_class(data["type"]).from_dict(data)
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed element {data.get('id')!r}: {e}") from e


__all__ = [
    'Element',
    'CompanionElement',
    'ElementType',
    'NortonEquivalent',
    'ResistiveElement',
    'TerminalPoint',
    'Wire',
    'Ammeter',
    'Resistor',
    'Lightbulb',
    'Battery',
    'Switch',
    'Voltmeter',
    'Capacitor',
    'Inductor',
    'ELEMENT_CLASSES',
    'element_class',
    'element_from_dict',
]
