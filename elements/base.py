"""
Element base classes.

Every circuit element is a two-terminal branch described by two
``TerminalPoint`` objects on the canvas.  The editor owns the geometry and
the typed properties; the solver owns the computed readings and the
history used by the Backward-Euler companion models.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, NamedTuple

logger = logging.getLogger(__name__)


class ElementType(Enum):
    WIRE = "WIRE"
    RESISTOR = "RESISTOR"
    BATTERY = "BATTERY"
    LIGHTBULB = "LIGHTBULB"
    SWITCH = "SWITCH"
    VOLTMETER = "VOLTMETER"
    AMMETER = "AMMETER"
    CAPACITOR = "CAPACITOR"
    INDUCTOR = "INDUCTOR"


class NortonEquivalent(NamedTuple):
    """Conductance in parallel with a current source flowing from p1 to p2."""
    conductance: float
    current_source: float = 0.0


@dataclass
class TerminalPoint:
    id: str
    x: float
    y: float

    def distance_to(self, other: "TerminalPoint") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TerminalPoint":
        return cls(id=str(data["id"]), x=float(data["x"]), y=float(data["y"]))


# Solver-owned fields and their names in circuit JSON
STATE_FIELDS = {
    "current": "current",
    "voltage_drop": "voltageDrop",
    "p1_potential": "p1Potential",
    "p2_potential": "p2Potential",
    "prev_current": "prevCurrent",
    "prev_p1_potential": "prevP1Potential",
    "prev_p2_potential": "prevP2Potential",
}


# Every property name any element type understands
PROPERTY_NAMES = {"resistance", "voltage", "isOpen", "is_open", "capacitance", "inductance"}

_TRUE_STRINGS = {"true", "1", "yes", "on"}
_FALSE_STRINGS = {"false", "0", "no", "off", ""}


def parse_flag(value) -> bool:
    """Boolean property value; strings from circuit JSON are parsed, not truth-tested."""
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"Not a boolean: {value!r}")
    return bool(value)


@dataclass(eq=False)
class Element(ABC):
    """
    Base class of all two-terminal circuit elements.

    Subclasses declare their editable properties as dataclass fields and
    list them, with their defaults, in ``property_defaults``.  A falsy
    property value (missing or zero) is replaced by its default whenever
    the element is built or edited.
    """

    element_type: ClassVar[ElementType]
    property_defaults: ClassVar[Dict[str, Any]] = {}
    # attribute name -> circuit JSON name, where they differ
    json_names: ClassVar[Dict[str, str]] = {}
    is_voltage_source: ClassVar[bool] = False

    id: str
    p1: TerminalPoint
    p2: TerminalPoint

    current: float = 0.0
    voltage_drop: float = 0.0
    p1_potential: float = 0.0
    p2_potential: float = 0.0

    prev_current: float = 0.0
    prev_p1_potential: float = 0.0
    prev_p2_potential: float = 0.0

    def __post_init__(self):
        self._apply_defaults()

    @property
    def previous_voltage(self) -> float:
        return self.prev_p1_potential - self.prev_p2_potential

    def properties(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.property_defaults}

    def _coerce_property(self, name: str, value: Any) -> Any:
        """Typed value for property ``name``; raises ValueError if it cannot be converted."""
        default = self.property_defaults[name]
        if isinstance(default, bool):
            return parse_flag(value)
        if not value:
            return default
        try:
            number = float(value)
        except TypeError:
            raise ValueError(f"Not a number: {value!r}") from None
        if number == 0 or math.isnan(number):
            return default
        return number

    def _apply_defaults(self):
        for name in self.property_defaults:
            setattr(self, name, self._coerce_property(name, getattr(self, name)))

    def _attribute_name(self, name: str) -> str:
        for attribute, json_name in self.json_names.items():
            if name == json_name:
                return attribute
        return name

    def update_properties(self, **changes) -> Dict[str, Any]:
        """
        Merge property edits and return the resulting property values.

        Every edit is converted before any is written, so a rejected edit
        (ValueError) leaves the element unchanged.
        """
        staged = {}
        for key, value in changes.items():
            name = self._attribute_name(key)
            if name not in self.property_defaults:
                if key in PROPERTY_NAMES:
                    continue
                logger.warning(f"Ignoring unknown property '{key}' for {self.element_type.value} {self.id}")
                continue
            try:
                staged[name] = self._coerce_property(name, value)
            except ValueError as e:
                raise ValueError(f"Invalid {key} for {self.element_type.value} {self.id}: {e}") from e
        for name, value in staged.items():
            setattr(self, name, value)
        return self.properties()

    @abstractmethod
    def voltage_drop_for(self, current: float, v1: float, v2: float) -> float:
        """Displayed voltage across the element for a solved tick."""

    def store_solution(self, current: float, voltage_drop: float, v1: float, v2: float):
        self.current = current
        self.voltage_drop = voltage_drop
        self.p1_potential = v1
        self.p2_potential = v2
        self.prev_current = current
        self.prev_p1_potential = v1
        self.prev_p2_potential = v2

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.element_type.value,
            "p1": self.p1.to_dict(),
            "p2": self.p2.to_dict(),
            "properties": {self.json_names.get(name, name): value
                           for name, value in self.properties().items()},
            "state": {json_name: getattr(self, name) for name, json_name in STATE_FIELDS.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Element":
        field_names = {f.name for f in fields(cls)}
        kwargs = {}
        reverse_names = {json_name: name for name, json_name in cls.json_names.items()}
        for key, value in (data.get("properties") or {}).items():
            name = reverse_names.get(key, key)
            if name in cls.property_defaults and name in field_names:
                kwargs[name] = value
            elif key not in PROPERTY_NAMES:
                logger.warning(f"Ignoring unknown property '{key}' for {cls.element_type.value} {data.get('id')}")
        # solved state may also sit at the top level of the element
        state = data.get("state") or data
        for name, json_name in STATE_FIELDS.items():
            if json_name in state:
                kwargs[name] = float(state[json_name])
        return cls(
            id=str(data["id"]),
            p1=TerminalPoint.from_dict(data["p1"]),
            p2=TerminalPoint.from_dict(data["p2"]),
            **kwargs,
        )


class CompanionElement(Element):
    """Branch stamped as a Norton companion model rather than a source unknown."""

    @abstractmethod
    def norton(self, dt: float) -> NortonEquivalent:
        """Companion model of this branch for a step of ``dt`` seconds."""

    @abstractmethod
    def branch_current(self, v1: float, v2: float, dt: float) -> float:
        """Current from p1 to p2 given the solved terminal potentials."""


class ResistiveElement(CompanionElement):
    """Memoryless branch modelled as a plain conductance."""

    @abstractmethod
    def effective_resistance(self) -> float:
        pass

    def norton(self, dt: float) -> NortonEquivalent:
        return NortonEquivalent(1.0 / self.effective_resistance())

    def branch_current(self, v1: float, v2: float, dt: float) -> float:
        return (v1 - v2) / self.effective_resistance()
