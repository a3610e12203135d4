"""
Transient driver.

Advances the circuit in fixed Backward-Euler steps.  Each tick solves a
snapshot of the circuit and computes every element's new readings; the
readings (and the history the companion models read on the next tick)
are committed only when some element's current or voltage drop moved by
more than the change threshold.  An uncommitted tick leaves the circuit
exactly as it was.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

from solver.scheduler import ManualScheduler, TickScheduler
from solver.simulator import CircuitSimulator, SimulationSettings, SolverResult

logger = logging.getLogger(__name__)


class DriverState(Enum):
    IDLE = "idle"
    STEPPING = "stepping"


@dataclass
class TickReport:
    tick: int
    time: float
    changed: bool
    result: SolverResult
    currents: Dict[str, float] = field(default_factory=dict)
    voltage_drops: Dict[str, float] = field(default_factory=dict)


class TransientDriver:
    def __init__(self, circuit, scheduler: Optional[TickScheduler] = None,
                 settings: Optional[SimulationSettings] = None):
        self.circuit = circuit
        self.settings = settings or SimulationSettings()
        self.scheduler = scheduler or ManualScheduler()
        self.simulator = CircuitSimulator(self.settings)
        self.state = DriverState.IDLE
        self.tick_count = 0
        self.commit_count = 0
        self.time = 0.0
        self._listeners: List[Callable[[TickReport], None]] = []
        self._stop_at: Optional[int] = None
        self.on_stopped: Optional[Callable[[], None]] = None

    @property
    def dt(self) -> float:
        return self.settings.dt

    def add_listener(self, listener: Callable[[TickReport], None]):
        """Register a callable notified after every committed tick."""
        self._listeners.append(listener)

    def remove_listener(self, listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start(self, max_ticks: Optional[int] = None):
        """Begin stepping on every scheduler frame, optionally for ``max_ticks`` ticks."""
        if self.state is DriverState.STEPPING:
            return
        self._stop_at = None if max_ticks is None else self.tick_count + max_ticks
        self.state = DriverState.STEPPING
        self.scheduler.start(self._on_frame)
        logger.info(f"Transient stepping started (dt={self.dt} s)")

    def stop(self):
        if self.state is DriverState.IDLE:
            return
        self.scheduler.stop()
        self.state = DriverState.IDLE
        logger.info(f"Transient stepping stopped after {self.tick_count} ticks "
                    f"({self.commit_count} committed)")
        if self.on_stopped is not None:
            self.on_stopped()

    def teardown(self):
        self.stop()
        self._listeners.clear()

    def _on_frame(self):
        if self.state is not DriverState.STEPPING:
            return
        self.step()
        if self._stop_at is not None and self.tick_count >= self._stop_at:
            self.stop()

    def step(self) -> TickReport:
        """Advance one tick at the configured time step."""
        elements = self.circuit.elements()
        result = self.simulator.solve(elements, self.dt)
        threshold = self.settings.change_threshold

        updates = []
        changed = False
        for element in elements:
            current = result.current_of(element.id)
            v1 = result.potential_of(element.p1.id)
            v2 = result.potential_of(element.p2.id)
            drop = element.voltage_drop_for(current, v1, v2)
            if abs(current - element.current) > threshold or abs(drop - element.voltage_drop) > threshold:
                changed = True
            updates.append((element, current, drop, v1, v2))

        self.tick_count += 1
        self.time += self.dt

        if changed:
            for element, current, drop, v1, v2 in updates:
                element.store_solution(current, drop, v1, v2)
            self.commit_count += 1
        else:
            logger.debug(f"Tick {self.tick_count}: no significant change, not committed")

        report = TickReport(
            self.tick_count, self.time, changed, result,
            currents={element.id: current for element, current, _, _, _ in updates},
            voltage_drops={element.id: drop for element, _, drop, _, _ in updates},
        )
        if changed:
            for listener in list(self._listeners):
                listener(report)
        return report

    def run(self, ticks: int) -> List[TickReport]:
        return [self.step() for _ in range(ticks)]

    def reset(self):
        """Stop and clear both the simulated clock and the element state."""
        self.stop()
        self.tick_count = 0
        self.commit_count = 0
        self.time = 0.0
        self.circuit.reset_state()


@dataclass
class TransientTrace:
    """Listener recording per-element time series of committed ticks."""
    times: List[float] = field(default_factory=list)
    currents: Dict[str, List[float]] = field(default_factory=dict)
    voltage_drops: Dict[str, List[float]] = field(default_factory=dict)
    element_ids: Optional[List[str]] = None

    def __call__(self, report: TickReport):
        self.times.append(report.time)
        for element_id, current in report.currents.items():
            if self.element_ids is not None and element_id not in self.element_ids:
                continue
            self.currents.setdefault(element_id, []).append(current)
            self.voltage_drops.setdefault(element_id, []).append(report.voltage_drops[element_id])

    def series(self, element_id: str, quantity: str = "current") -> List[float]:
        source = self.currents if quantity == "current" else self.voltage_drops
        return source.get(element_id, [])
