"""
Results Formatter - plain-text presentation of element readings.

Produces one line per element with its geometry, value, current and
voltage drop, followed by the solved node voltages.
"""

import numpy as np

from elements import ElementType


class ResultsFormatter:
    """
    Handles formatting and presentation of simulation results.
    """

    def __init__(self, elements, result=None):
        self.elements = list(elements)
        self.result = result

    def get_results_description(self, include_nodes=True):
        """
        Generate comprehensive description of the circuit state.
        """
        if not self.elements:
            return "No simulation results available."

        description = "Circuit State:\n"
        description += self._format_elements()

        if include_nodes and self.result is not None:
            description += self._format_node_voltages()

        return description

    def describe_element(self, element):
        """One-line description of an element and its latest readings."""
        return (f"- {element.element_type.value} (ID: {element.id[:4]}) "
                f"at ({round(element.p1.x)},{round(element.p1.y)}) to ({round(element.p2.x)},{round(element.p2.y)}). "
                f"Value: {self._format_element_value(element)}. "
                f"Current: {element.current:.3f}A. Voltage Drop: {element.voltage_drop:.3f}V.")

    def _format_elements(self):
        return "".join(f"  {self.describe_element(element)}\n" for element in self.elements) + "\n"

    def _format_element_value(self, element):
        element_type = element.element_type
        if element_type is ElementType.BATTERY:
            return f"{element.voltage:g}V"
        if element_type is ElementType.RESISTOR:
            return f"{element.resistance:g}Ω"
        if element_type is ElementType.LIGHTBULB:
            return f"{element.resistance:g}Ω (Bulb)"
        if element_type is ElementType.SWITCH:
            return "Open" if element.is_open else "Closed"
        if element_type is ElementType.AMMETER:
            return f"Reading: {abs(element.current):.4f}A"
        if element_type is ElementType.VOLTMETER:
            return f"Reading: {abs(element.voltage_drop):.4f}V"
        if element_type is ElementType.CAPACITOR:
            return f"{element.capacitance * 1e6:g}µF"
        if element_type is ElementType.INDUCTOR:
            return f"{element.inductance:g}H"
        return "-"

    def _format_node_voltages(self):
        """Format node voltage results."""
        description = "Node Voltages:\n"
        node_potentials = self.result.node_potentials

        if not node_potentials:
            return description + "  No node voltage data.\n"

        for node_id in sorted(node_potentials):
            voltage = node_potentials[node_id]
            if self._is_invalid_value(voltage):
                continue
            ground_status = " (Ground)" if node_id == 0 else ""
            formatted_voltage = self._format_value_with_unit(voltage, 'V')
            description += f"  Node {node_id}{ground_status}: {formatted_voltage}\n"

        return description

    def _is_invalid_value(self, value):
        """Check if value is invalid (None, NaN, or infinite)."""
        if value is None:
            return True
        if isinstance(value, float) and (np.isnan(value) or np.isinf(value)):
            return True
        return False

    def _format_value_with_unit(self, value, unit):
        """Format numerical value with appropriate SI prefix and unit."""
        abs_val = abs(value)
        if abs_val == 0:
            return f"0 {unit}"
        for scale, prefix in ((1, ''), (1e-3, 'm'), (1e-6, 'μ'), (1e-9, 'n')):
            if abs_val >= scale:
                return f"{value / scale:.6g} {prefix}{unit}"
        return f"{value:.2e} {unit}"

    def get_summary_stats(self):
        """Get summary statistics of the circuit readings."""
        currents = [abs(e.current) for e in self.elements if not self._is_invalid_value(e.current)]
        node_potentials = self.result.node_potentials if self.result is not None else {}
        return {
            'num_elements': len(self.elements),
            'num_nodes': len(node_potentials),
            'max_voltage': max(node_potentials.values()) if node_potentials else 0,
            'min_voltage': min(node_potentials.values()) if node_potentials else 0,
            'max_current': max(currents) if currents else 0,
        }
