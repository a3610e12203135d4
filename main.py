"""
Command-line entry point.

Usage::

    python main.py presets
    python main.py solve --preset series --close-switches
    python main.py solve circuit.json --dt 0
    python main.py run --preset rc --close-switches --ticks 200 --plot rc.png
    python main.py run --preset rl --close-switches --ticks 100 --realtime
    python main.py export --preset parallel parallel.json
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from PyQt6.QtCore import QCoreApplication

from config import SIMULATION_DT
from elements.circuit import Circuit
from presets import PRESETS, load_preset
from solver import SimulationSettings, TransientDriver, TransientTrace, solve_circuit
from solver.analysis import CircuitValidator, ResultsFormatter
from solver.scheduler import QtTimerScheduler

logger = logging.getLogger(__name__)


def try_load_circuit(args: argparse.Namespace):
    """Load the circuit named on the command line; returns (circuit, error)."""
    if args.preset:
        try:
            return load_preset(args.preset), ""
        except KeyError as e:
            return None, str(e.args[0])

    if not args.circuit:
        return None, "a circuit file or --preset is required"

    path = Path(args.circuit)
    if not path.exists():
        return None, f"file not found: {args.circuit}"
    try:
        return Circuit.load_file(path), ""
    except json.JSONDecodeError as e:
        return None, f"invalid JSON in {args.circuit}: {e}"
    except ValueError as e:
        return None, f"invalid circuit file: {e}"


def _prepare_circuit(args: argparse.Namespace):
    circuit, error = try_load_circuit(args)
    if circuit is None:
        print(f"Error: {error}", file=sys.stderr)
        return None
    if args.close_switches:
        circuit.set_all_switches(False)
    return circuit


def _print_diagnostics(elements, result):
    errors, warnings = CircuitValidator(elements, result).validate()
    for err in errors:
        print(f"Error: {err}")
    for warning in warnings:
        print(f"Warning: {warning}")


def cmd_presets(args: argparse.Namespace) -> int:
    for name in PRESETS:
        print(name)
    return 0


def cmd_solve(args: argparse.Namespace) -> int:
    """Solve a single tick and store the readings on the elements."""
    circuit = _prepare_circuit(args)
    if circuit is None:
        return 1

    elements = circuit.elements()
    logger.info(f"Solving {len(elements)} elements at dt={args.dt}")
    result = solve_circuit(elements, args.dt)
    for element in elements:
        current = result.current_of(element.id)
        v1 = result.potential_of(element.p1.id)
        v2 = result.potential_of(element.p2.id)
        element.store_solution(current, element.voltage_drop_for(current, v1, v2), v1, v2)

    print(ResultsFormatter(elements, result).get_results_description())
    _print_diagnostics(elements, result)
    return 0


def _run_realtime(driver: TransientDriver, ticks: int):
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    driver.scheduler = QtTimerScheduler(driver.settings.frame_interval_ms)

    driver.on_stopped = app.quit
    driver.start(max_ticks=ticks)
    app.exec()
    driver.on_stopped = None


def cmd_run(args: argparse.Namespace) -> int:
    """Step the circuit through the transient driver."""
    circuit = _prepare_circuit(args)
    if circuit is None:
        return 1

    settings = SimulationSettings(dt=args.dt)
    driver = TransientDriver(circuit, settings=settings)
    trace = TransientTrace(element_ids=args.element or None)
    driver.add_listener(trace)

    logger.info(f"Running {circuit.name} for {args.ticks} ticks at dt={args.dt}")
    if args.realtime:
        _run_realtime(driver, args.ticks)
    else:
        driver.run(args.ticks)
    driver.teardown()

    elements = circuit.elements()
    print(f"Simulated {driver.time:.3f} s in {driver.tick_count} ticks ({driver.commit_count} committed)")
    print(ResultsFormatter(elements).get_results_description(include_nodes=False))
    _print_diagnostics(elements, None)

    if args.plot:
        from solver.analysis.plotting import plot_trace

        plot_trace(trace, args.element or None, args.quantity, args.plot)
        print(f"Plot written to {args.plot}", file=sys.stderr)
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    try:
        circuit = load_preset(args.preset)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return 1
    circuit.save(args.output)
    print(f"Preset '{args.preset}' written to {args.output}", file=sys.stderr)
    return 0


def _add_circuit_arguments(parser: argparse.ArgumentParser, default_dt: float):
    parser.add_argument("circuit", nargs="?", help="Path to circuit JSON file")
    parser.add_argument("--preset", help=f"Use a built-in circuit ({', '.join(PRESETS)})")
    parser.add_argument("--dt", type=float, default=default_dt, help=f"Time step in seconds (default: {default_dt})")
    parser.add_argument("--close-switches", action="store_true", help="Close every switch before solving")


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="circuit-sim",
        description="Solve canvas circuits and step them through time from the command line.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("presets", help="List the built-in circuits")

    solve_parser = subparsers.add_parser("solve", help="Solve one tick and print the readings")
    _add_circuit_arguments(solve_parser, 0.0)

    run_parser = subparsers.add_parser("run", help="Run the transient driver for a number of ticks")
    _add_circuit_arguments(run_parser, SIMULATION_DT)
    run_parser.add_argument("--ticks", type=int, default=100, help="Number of ticks (default: 100)")
    run_parser.add_argument("--element", action="append", help="Element id to trace (repeatable)")
    run_parser.add_argument("--quantity", choices=["current", "voltage_drop"], default="current",
                            help="Traced quantity to plot (default: current)")
    run_parser.add_argument("--plot", help="Save a plot of the traced quantity to this file")
    run_parser.add_argument("--realtime", action="store_true", help="Pace ticks with a Qt timer")

    exp_parser = subparsers.add_parser("export", help="Write a built-in circuit as JSON")
    exp_parser.add_argument("--preset", required=True, help="Preset name")
    exp_parser.add_argument("output", help="Output JSON file path")

    return parser


def main(argv=None) -> int:
    """CLI entry point. Returns exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    handlers = {
        "presets": cmd_presets,
        "solve": cmd_solve,
        "run": cmd_run,
        "export": cmd_export,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
