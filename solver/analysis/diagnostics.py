"""
Circuit diagnostics.

Graph-based checks on a circuit and, when available, on a solved tick.
Problems are reported as (errors, warnings) text lists; nothing here
raises for a malformed circuit.
"""

import logging
from typing import List, Optional, Sequence, Set, Tuple

import networkx as nx

from config import SHORT_CIRCUIT_CURRENT, SNAP_DISTANCE
from elements import Element
from solver.netlist import NodeMap, resolve_nodes

logger = logging.getLogger(__name__)


class CircuitGraph:
    """Node/element multigraph of a resolved circuit."""

    def __init__(self, elements: Sequence[Element], node_map: Optional[NodeMap] = None,
                 snap_distance: float = SNAP_DISTANCE):
        self.elements = list(elements)
        self.node_map = node_map or resolve_nodes(self.elements, snap_distance)
        self.graph = nx.MultiGraph()  # parallel elements share a node pair
        self._build_graph()

    def _build_graph(self):
        for node in self.node_map.nodes:
            self.graph.add_node(node.node_id, x=node.x, y=node.y)
        for element in self.elements:
            n1, n2 = self.node_map.nodes_of(element)
            if n1 is None or n2 is None:
                continue
            self.graph.add_edge(n1, n2, key=element.id, element=element)

    def find_connected_subgraphs(self) -> List[Set[int]]:
        return [set(component) for component in nx.connected_components(self.graph)]

    def elements_in(self, nodes: Set[int]) -> List[Element]:
        return [data['element'] for _, _, data in self.graph.subgraph(nodes).edges(data=True)]

    def cyclomatic_number(self) -> int:
        """Independent loops, counting parallel edges and ignoring self-loops."""
        edges = self.graph.number_of_edges() - nx.number_of_selfloops(self.graph)
        return edges - self.graph.number_of_nodes() + nx.number_connected_components(self.graph)

    def open_terminals(self) -> List[str]:
        return [terminal_id
                for node in self.node_map.nodes if node.degree == 1
                for terminal_id in node.terminal_ids]


class CircuitValidator:
    """Circuit validation and error detection"""

    def __init__(self, elements: Sequence[Element], result=None, snap_distance: float = SNAP_DISTANCE):
        self.elements = list(elements)
        self.result = result
        node_map = result.node_map if result is not None and result.node_map.node_count else None
        self.circuit_graph = CircuitGraph(self.elements, node_map, snap_distance)
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def validate(self) -> Tuple[List[str], List[str]]:
        """Comprehensive circuit validation"""
        self.errors = []
        self.warnings = []
        if not self.elements:
            self.warnings.append("Circuit is empty")
            return self.errors, self.warnings

        self._validate_connectivity()
        self._validate_sources()
        self._validate_currents()

        if self.errors or self.warnings:
            logger.debug(f"Validation found {len(self.errors)} errors and {len(self.warnings)} warnings")
        return self.errors, self.warnings

    def _label(self, element: Element) -> str:
        return f"{element.element_type.value} {element.id}"

    def _validate_connectivity(self):
        node_map = self.circuit_graph.node_map
        for terminal_id in self.circuit_graph.open_terminals():
            self.warnings.append(f"Terminal {terminal_id} is not connected to anything")

        for element in self.elements:
            if not element.is_voltage_source and node_map.is_self_loop(element):
                self.warnings.append(f"{self._label(element)} has both terminals on one node and carries no current")

        subgraphs = self.circuit_graph.find_connected_subgraphs()
        if len(subgraphs) > 1:
            self.warnings.append(f"Circuit has {len(subgraphs)} disconnected subgraphs")

        if self.circuit_graph.cyclomatic_number() == 0:
            self.warnings.append("Circuit has no closed loop; no current can flow")

    def _validate_sources(self):
        node_map = self.circuit_graph.node_map
        batteries = [e for e in self.elements if e.is_voltage_source]
        if not batteries:
            self.warnings.append("Circuit has no battery")
            return

        for battery in batteries:
            if node_map.is_self_loop(battery):
                self.errors.append(f"{self._label(battery)} is shorted by its own terminals")

        for nodes in self.circuit_graph.find_connected_subgraphs():
            members = self.circuit_graph.elements_in(nodes)
            if members and not any(e.is_voltage_source for e in members):
                self.warnings.append(f"Subgraph with nodes {sorted(nodes)} has no battery")

    def _validate_currents(self):
        if self.result is None:
            return
        for element in self.elements:
            current = self.result.current_of(element.id)
            if abs(current) > SHORT_CIRCUIT_CURRENT:
                self.errors.append(f"Short circuit: {self._label(element)} carries {current:.3g} A")
