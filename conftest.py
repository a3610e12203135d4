import matplotlib

matplotlib.use("Agg")

import pytest
from PyQt6.QtCore import QCoreApplication

from elements import ElementType
from presets import create_element


def build_loop(*parts):
    """
    Close ``parts`` into one loop: element k runs from (100k, 0) to the next
    element's start, and the last element returns to the origin.
    Each part is an ElementType or an (ElementType, properties) pair; ids are e0, e1, ...
    """
    elements = []
    count = len(parts)
    for k, part in enumerate(parts):
        element_type, properties = part if isinstance(part, tuple) else (part, {})
        x1 = 100 * k
        x2 = 100 * ((k + 1) % count)
        elements.append(create_element(element_type, x1, 0, x2, 0, element_id=f"e{k}", **properties))
    return elements


@pytest.fixture
def loop():
    return build_loop


@pytest.fixture
def battery_resistor_loop():
    return build_loop(
        (ElementType.BATTERY, {"voltage": 9}),
        (ElementType.SWITCH, {"is_open": False}),
        (ElementType.RESISTOR, {"resistance": 10}),
    )


@pytest.fixture(scope="session")
def qapp():
    return QCoreApplication.instance() or QCoreApplication([])
