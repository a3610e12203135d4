import numpy as np
import pytest

from elements import ElementType
from presets import create_element
from solver.analysis.mna_builder import MatrixDimensionError, MNABuilder, MNASystem
from solver.netlist import resolve_nodes


def _assemble(elements, dt=0.05):
    node_map = resolve_nodes(elements)
    return node_map, MNABuilder(node_map, dt).build(elements)


def test_unknown_count_is_nodes_minus_one_plus_sources(battery_resistor_loop):
    node_map, system = _assemble(battery_resistor_loop)
    assert node_map.node_count == 3
    assert system.size == (3 - 1) + 1
    assert system.matrix.shape == (3, 3)
    assert system.source_index(battery_resistor_loop[0]) == 2
    assert system.source_index(battery_resistor_loop[1]) == -1


def test_conductance_stamp_is_symmetric(loop):
    elements = loop((ElementType.RESISTOR, {"resistance": 4}), (ElementType.RESISTOR, {"resistance": 2}))
    _, system = _assemble(elements)
    # two nodes; only node 1 has a row, fed by both resistors
    assert system.matrix.shape == (1, 1)
    assert system.matrix[0, 0] == pytest.approx(0.25 + 0.5)


def test_voltage_source_stamp(battery_resistor_loop):
    node_map, system = _assemble(battery_resistor_loop)
    battery = battery_resistor_loop[0]
    n1, n2 = node_map.nodes_of(battery)
    assert (n1, n2) == (0, 1)
    row = system.source_index(battery)
    assert system.matrix[row, n2 - 1] == -1
    assert system.matrix[n2 - 1, row] == -1
    assert system.rhs[row] == 9
    assert np.allclose(system.matrix, system.matrix.T)


def test_current_source_direction(loop):
    elements = loop((ElementType.WIRE, {}), (ElementType.WIRE, {}), (ElementType.INDUCTOR, {"inductance": 1}))
    inductor = elements[2]
    inductor.prev_current = 0.5
    node_map, system = _assemble(elements, dt=0.1)
    n1, n2 = node_map.nodes_of(inductor)
    assert (n1, n2) == (2, 0)
    # current leaves n1 through the inductor
    assert system.rhs[n1 - 1] == pytest.approx(-0.5)


def test_self_loops_are_skipped():
    resistor = create_element(ElementType.RESISTOR, 0, 0, 3, 0, element_id="r")
    battery = create_element(ElementType.BATTERY, 50, 50, 52, 50, element_id="b")
    node_map, system = _assemble([resistor, battery])
    assert node_map.node_count == 2
    assert system.size == 2
    assert not system.matrix.any()
    assert not system.rhs.any()


def test_dt_zero_uses_dc_models(loop):
    elements = loop((ElementType.BATTERY, {}), (ElementType.CAPACITOR, {}), (ElementType.INDUCTOR, {}))
    _, system = _assemble(elements, dt=0)
    assert system.size == 3
    assert not system.rhs[:2].any()


def test_dimension_check_rejects_mismatched_system(battery_resistor_loop):
    node_map = resolve_nodes(battery_resistor_loop)
    builder = MNABuilder(node_map, 0.05)
    system = MNASystem(np.zeros((2, 2)), np.zeros(2), node_map.node_count, [battery_resistor_loop[0]])
    with pytest.raises(MatrixDimensionError):
        builder._check_dimensions(system, battery_resistor_loop)


def test_stale_node_map_is_rejected(battery_resistor_loop):
    # nodes resolved for the whole loop, but only the battery is assembled
    builder = MNABuilder(resolve_nodes(battery_resistor_loop), 0.05)
    with pytest.raises(MatrixDimensionError):
        builder.build(battery_resistor_loop[:1])
