"""
Topology resolution.

Terminals are clustered into electrical nodes purely by position.  Each
unassigned terminal becomes the representative of a new node and claims
every later unassigned terminal lying strictly within the snap distance
of it.  The clustering is single-hop: a terminal close only to a
non-representative member of a node starts (or joins) another node.
Node 0 is the ground reference.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from config import SNAP_DISTANCE
from elements import Element, TerminalPoint

logger = logging.getLogger(__name__)


@dataclass
class Node:
    node_id: int
    x: float
    y: float
    terminal_ids: List[str] = field(default_factory=list)

    @property
    def is_ground(self) -> bool:
        return self.node_id == 0

    @property
    def degree(self) -> int:
        return len(self.terminal_ids)

    def __repr__(self):
        return f"Node({self.node_id}, Terminals: {len(self.terminal_ids)}, Ground: {self.is_ground})"


@dataclass
class NodeMap:
    nodes: List[Node] = field(default_factory=list)
    terminal_to_node: Dict[str, int] = field(default_factory=dict)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    def node_of(self, terminal_id: str) -> Optional[int]:
        return self.terminal_to_node.get(terminal_id)

    def nodes_of(self, element: Element) -> Tuple[Optional[int], Optional[int]]:
        return self.node_of(element.p1.id), self.node_of(element.p2.id)

    def is_self_loop(self, element: Element) -> bool:
        n1, n2 = self.nodes_of(element)
        return n1 == n2


def _ordered_terminals(elements: Sequence[Element]) -> List[TerminalPoint]:
    terminals = []
    for element in elements:
        terminals.append(element.p1)
        terminals.append(element.p2)
    return terminals


def resolve_nodes(elements: Sequence[Element], snap_distance: float = SNAP_DISTANCE) -> NodeMap:
    """Group element terminals into nodes; terminals are visited p1 before p2."""
    node_map = NodeMap()
    terminals = _ordered_terminals(elements)
    assigned = set()

    for i, representative in enumerate(terminals):
        if representative.id in assigned:
            continue
        node = Node(node_map.node_count, representative.x, representative.y)
        node_map.nodes.append(node)
        assigned.add(representative.id)
        node.terminal_ids.append(representative.id)
        node_map.terminal_to_node[representative.id] = node.node_id

        for j in range(i + 1, len(terminals)):
            candidate = terminals[j]
            if candidate.id in assigned:
                continue
            if representative.distance_to(candidate) < snap_distance:
                assigned.add(candidate.id)
                node.terminal_ids.append(candidate.id)
                node_map.terminal_to_node[candidate.id] = node.node_id

    logger.debug(f"Resolved {len(terminals)} terminals into {node_map.node_count} nodes")
    return node_map
