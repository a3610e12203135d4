import logging

import pytest

from config import EPSILON_RESISTANCE, INFINITE_RESISTANCE
from elements import (Ammeter, Battery, Capacitor, CompanionElement, ElementType, Inductor, Lightbulb,
                      Resistor, Switch, TerminalPoint, Voltmeter, Wire, element_class, element_from_dict)


def _points(element_id="x"):
    return TerminalPoint(f"{element_id}-p1", 0, 0), TerminalPoint(f"{element_id}-p2", 100, 0)


def make(cls, element_id="x", **kwargs):
    p1, p2 = _points(element_id)
    return cls(id=element_id, p1=p1, p2=p2, **kwargs)


def test_terminal_distance():
    assert TerminalPoint("a", 0, 0).distance_to(TerminalPoint("b", 3, 4)) == 5


@pytest.mark.parametrize("cls,conductance", [
    (Wire, 1 / EPSILON_RESISTANCE),
    (Ammeter, 1 / EPSILON_RESISTANCE),
    (Voltmeter, 1 / INFINITE_RESISTANCE),
])
def test_fixed_conductances(cls, conductance):
    norton = make(cls).norton(0.05)
    assert norton.conductance == pytest.approx(conductance)
    assert norton.current_source == 0


def test_resistor_and_lightbulb_use_resistance():
    assert make(Resistor, resistance=20).norton(0.05).conductance == pytest.approx(0.05)
    assert make(Lightbulb, resistance=4).norton(0).conductance == pytest.approx(0.25)


def test_switch_conductance_follows_state():
    switch = make(Switch, is_open=True)
    assert switch.norton(0).conductance == pytest.approx(1 / INFINITE_RESISTANCE)
    assert switch.toggle() is False
    assert switch.norton(0).conductance == pytest.approx(1 / EPSILON_RESISTANCE)


def test_capacitor_companion_model():
    capacitor = make(Capacitor, capacitance=0.002, prev_p1_potential=3.0, prev_p2_potential=1.0)
    conductance, current_source = capacitor.norton(0.01)
    assert conductance == pytest.approx(0.2)
    assert current_source == pytest.approx(-0.4)
    assert capacitor.norton(0).conductance == pytest.approx(1 / INFINITE_RESISTANCE)
    assert capacitor.norton(0).current_source == 0


def test_capacitor_branch_current():
    capacitor = make(Capacitor, capacitance=0.002, prev_p1_potential=3.0, prev_p2_potential=1.0)
    assert capacitor.branch_current(5.0, 1.0, 0.01) == pytest.approx(0.2 * (4.0 - 2.0))
    assert capacitor.branch_current(5.0, 1.0, 0) == 0


def test_inductor_companion_model():
    inductor = make(Inductor, inductance=2, prev_current=0.3)
    conductance, current_source = inductor.norton(0.1)
    assert conductance == pytest.approx(0.05)
    assert current_source == pytest.approx(0.3)
    assert inductor.norton(0).conductance == pytest.approx(1 / EPSILON_RESISTANCE)
    assert inductor.branch_current(2.0, 1.0, 0.1) == pytest.approx(0.3 + 0.05)
    assert inductor.branch_current(2e-6, 1e-6, 0) == pytest.approx(1.0)


def test_battery_has_no_norton_equivalent():
    battery = make(Battery)
    assert battery.is_voltage_source
    assert not isinstance(battery, CompanionElement)
    assert not hasattr(battery, "norton")
    for cls in (Wire, Resistor, Switch, Capacitor, Inductor):
        assert issubclass(cls, CompanionElement)


def test_rejected_edit_leaves_element_unchanged():
    resistor = make(Resistor, resistance=33)
    with pytest.raises(ValueError):
        resistor.update_properties(resistance="ten")
    assert resistor.resistance == 33
    assert resistor.norton(0.05).conductance == pytest.approx(1 / 33)

    switch = make(Switch)
    with pytest.raises(ValueError):
        switch.update_properties(isOpen="maybe")
    assert switch.is_open is False


def test_numeric_strings_are_converted():
    resistor = make(Resistor)
    assert resistor.update_properties(resistance="47") == {"resistance": 47.0}
    assert resistor.update_properties(resistance="0") == {"resistance": 10}


@pytest.mark.parametrize("raw,expected", [
    ("false", False), ("False", False), ("0", False), ("", False),
    ("true", True), ("TRUE", True), ("1", True), (True, True), (0, False),
])
def test_switch_state_from_json_strings(raw, expected):
    data = make(Switch, element_id="sw").to_dict()
    data["properties"] = {"isOpen": raw}
    assert element_from_dict(data).is_open is expected


def test_defaults():
    assert make(Resistor).resistance == 10
    assert make(Battery).voltage == 9
    assert make(Capacitor).capacitance == pytest.approx(1e-4)
    assert make(Inductor).inductance == 1
    assert make(Switch).is_open is False


def test_falsy_properties_fall_back_to_defaults():
    assert make(Resistor, resistance=0).resistance == 10
    assert make(Battery, voltage=None).voltage == 9
    resistor = make(Resistor, resistance=33)
    resistor.update_properties(resistance=0)
    assert resistor.resistance == 10


def test_update_properties_accepts_json_names(caplog):
    switch = make(Switch)
    with caplog.at_level(logging.WARNING):
        properties = switch.update_properties(isOpen=True, colour="red")
    assert properties == {"is_open": True}
    assert "colour" in caplog.text


@pytest.mark.parametrize("cls,kwargs,expected", [
    (Battery, {"voltage": 12}, 12),
    (Voltmeter, {}, 3.0),
    (Capacitor, {}, 3.0),
    (Inductor, {}, 3.0),
    (Wire, {}, 0.0),
    (Switch, {}, 0.0),
    (Ammeter, {}, 0.0),
    (Resistor, {"resistance": 5}, 1.0),
    (Lightbulb, {"resistance": 5}, 1.0),
])
def test_voltage_drop_rules(cls, kwargs, expected):
    assert make(cls, **kwargs).voltage_drop_for(0.2, 4.0, 1.0) == pytest.approx(expected)


def test_store_solution_writes_history():
    inductor = make(Inductor)
    inductor.store_solution(0.5, 1.5, 4.0, 2.5)
    assert (inductor.current, inductor.voltage_drop) == (0.5, 1.5)
    assert (inductor.p1_potential, inductor.p2_potential) == (4.0, 2.5)
    assert inductor.prev_current == 0.5
    assert inductor.previous_voltage == pytest.approx(1.5)


def test_dict_round_trip_keeps_properties_and_state():
    switch = make(Switch, element_id="sw", is_open=True)
    switch.store_solution(1e-9, 0.0, 9.0, 0.0)
    data = switch.to_dict()
    assert data["type"] == "SWITCH"
    assert data["properties"] == {"isOpen": True}
    assert data["state"]["p1Potential"] == 9.0

    restored = element_from_dict(data)
    assert isinstance(restored, Switch)
    assert restored.to_dict() == data


def test_element_from_dict_rejects_bad_input():
    with pytest.raises(ValueError):
        element_from_dict({"id": "q", "type": "TRANSISTOR", "p1": {}, "p2": {}})
    with pytest.raises(ValueError):
        element_from_dict({"id": "q", "type": "WIRE", "p1": {"id": "q-p1", "x": 0, "y": 0}})
    with pytest.raises(ValueError):
        element_from_dict({"id": "q", "type": "WIRE", "p1": {"id": "q-p1"}, "p2": {"id": "q-p2"}})


def test_registry_covers_every_type():
    for element_type in ElementType:
        assert element_class(element_type).element_type is element_type
    assert element_class("LIGHTBULB") is Lightbulb


def test_element_from_flat_editor_record(caplog):
    data = {
        "id": "abc",
        "type": "RESISTOR",
        "p1": {"id": "abc-p1", "x": 100, "y": 100},
        "p2": {"id": "abc-p2", "x": 200, "y": 100},
        "properties": {"resistance": 0, "voltage": 9, "isOpen": True, "capacitance": 0.001, "inductance": 1},
        "current": 0.25,
        "voltageDrop": 2.5,
        "p1Potential": 5,
        "p2Potential": 2.5,
        "prevCurrent": 0.25,
    }
    with caplog.at_level(logging.WARNING):
        resistor = element_from_dict(data)
    assert resistor.resistance == 10
    assert resistor.current == 0.25
    assert resistor.prev_p1_potential == 0
    assert caplog.text == ""


def test_lightbulb_power_and_voltmeter_reading():
    bulb = make(Lightbulb, resistance=20)
    bulb.store_solution(0.5, 10.0, 10.0, 0.0)
    assert bulb.power == pytest.approx(5.0)
    voltmeter = make(Voltmeter)
    voltmeter.store_solution(1e-9, 4.5, 4.5, 0.0)
    assert voltmeter.reading == 4.5
