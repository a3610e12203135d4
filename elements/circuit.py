"""
Circuit arena.

Holds the elements of one circuit keyed by id, in insertion order.  The
editor side adds, moves, edits and deletes elements through this class;
the transient driver only reads snapshots and writes solved state back.
"""

import json
import logging
from typing import Any, Dict, Iterator, List, Optional

from elements import Element, element_from_dict
from elements.switch import Switch

logger = logging.getLogger(__name__)

CIRCUIT_FORMAT_VERSION = 1


class Circuit:
    def __init__(self, elements=None, name: str = "untitled"):
        self.name = name
        self._elements: Dict[str, Element] = {}
        for element in elements or []:
            self.add(element)

    def __len__(self):
        return len(self._elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(list(self._elements.values()))

    def __contains__(self, element_id):
        return element_id in self._elements

    def elements(self) -> List[Element]:
        """Ordered snapshot of the current elements."""
        return list(self._elements.values())

    def get(self, element_id: str) -> Optional[Element]:
        return self._elements.get(element_id)

    def add(self, element: Element) -> Element:
        if element.id in self._elements:
            raise ValueError(f"Element {element.id} already in circuit")
        if element.p1.id == element.p2.id:
            raise ValueError(f"Element {element.id} uses terminal id {element.p1.id!r} for both terminals")
        for terminal in (element.p1, element.p2):
            owner = self._terminal_owner(terminal.id)
            if owner is not None:
                raise ValueError(f"Terminal id {terminal.id!r} of {element.id} is already used by {owner}")
        self._elements[element.id] = element
        logger.debug(f"Added {element.element_type.value} {element.id}")
        return element

    def _terminal_owner(self, terminal_id: str) -> Optional[str]:
        for other in self._elements.values():
            if terminal_id in (other.p1.id, other.p2.id):
                return other.id
        return None

    def remove(self, element_id: str) -> Optional[Element]:
        element = self._elements.pop(element_id, None)
        if element is None:
            logger.warning(f"Element {element_id} not in circuit")
        else:
            logger.debug(f"Removed {element.element_type.value} {element_id}")
        return element

    def clear(self):
        self._elements.clear()

    def _require(self, element_id: str) -> Element:
        try:
            return self._elements[element_id]
        except KeyError:
            raise KeyError(f"No element with id {element_id}") from None

    def update_properties(self, element_id: str, **changes) -> Dict[str, Any]:
        return self._require(element_id).update_properties(**changes)

    def toggle_switch(self, element_id: str) -> bool:
        element = self._require(element_id)
        if not isinstance(element, Switch):
            raise TypeError(f"Element {element_id} is a {element.element_type.value}, not a switch")
        return element.toggle()

    def set_all_switches(self, is_open: bool):
        for element in self:
            if isinstance(element, Switch):
                element.is_open = is_open

    def move_terminal(self, element_id: str, terminal: str, x: float, y: float):
        if terminal not in ("p1", "p2"):
            raise ValueError(f"Unknown terminal {terminal!r}")
        point = getattr(self._require(element_id), terminal)
        point.x = x
        point.y = y

    def reset_state(self):
        """Zero every solved reading and the transient history."""
        for element in self:
            element.store_solution(0.0, 0.0, 0.0, 0.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": CIRCUIT_FORMAT_VERSION,
            "name": self.name,
            "elements": [element.to_dict() for element in self],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Circuit":
        if not isinstance(data, dict) or not isinstance(data.get("elements", []), list):
            raise ValueError("Circuit data must be an object with an 'elements' list")
        circuit = cls(name=data.get("name", "untitled"))
        for element_data in data.get("elements", []):
            circuit.add(element_from_dict(element_data))
        return circuit

    def save(self, file_path):
        with open(file_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=4)
        logger.info(f"Circuit saved to {file_path}")

    @classmethod
    def load_file(cls, file_path) -> "Circuit":
        with open(file_path, 'r') as f:
            circuit_data = json.load(f)
        circuit = cls.from_dict(circuit_data)
        logger.info(f"Loaded {len(circuit)} elements from {file_path}")
        return circuit

    def __repr__(self):
        return f"Circuit({self.name!r}, {len(self)} elements)"
