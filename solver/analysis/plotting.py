"""
Plots of transient traces and solved node voltages.
"""

import logging

import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)

QUANTITY_LABELS = {
    'current': ("Current (A)", "Transient Current"),
    'voltage_drop': ("Voltage (V)", "Transient Voltage"),
}


def plot_trace(trace, element_ids=None, quantity='current', path=None):
    """
    Line plot of one recorded quantity against simulated time.

    ``trace`` is a ``TransientTrace``; ``element_ids`` defaults to every
    element it recorded.  The figure is saved to ``path`` when given and
    returned either way.
    """
    if quantity not in QUANTITY_LABELS:
        raise ValueError(f"Unknown quantity {quantity!r}; expected one of {sorted(QUANTITY_LABELS)}")
    ylabel, title = QUANTITY_LABELS[quantity]
    element_ids = element_ids or sorted(trace.currents)

    fig = plt.figure(figsize=(10, 6))
    for element_id in element_ids:
        values = trace.series(element_id, quantity)
        if not values:
            logger.warning(f"No recorded {quantity} for element {element_id}")
            continue
        # elements added mid-run have shorter series
        plt.plot(trace.times[-len(values):], values, label=element_id)
    plt.title(title, fontsize=14)
    plt.xlabel('Time (s)')
    plt.ylabel(ylabel)
    if plt.gca().lines:
        plt.legend()
    plt.tight_layout()

    if path:
        fig.savefig(path)
        plt.close(fig)
        logger.info(f"Saved {quantity} plot to {path}")
    return fig


def plot_node_voltages(result, path=None):
    """Bar chart of the solved node potentials."""
    node_ids = sorted(result.node_potentials)
    voltages = [result.node_potentials[node_id] for node_id in node_ids]
    node_labels = [f"Node {node_id}" + (" (GND)" if node_id == 0 else "") for node_id in node_ids]

    fig = plt.figure(figsize=(12, 7))
    bars = plt.bar(node_labels, voltages, color='teal')
    plt.ylabel("Voltage (V)", fontsize=12)
    plt.title("Node Voltages", fontsize=14)
    plt.xticks(rotation=45, ha='right')
    for bar in bars:
        yval = bar.get_height()
        plt.text(bar.get_x() + bar.get_width()/2.0, yval, f'{yval:.2f}V', va='bottom', ha='center', fontsize=9)
    plt.tight_layout()

    if path:
        fig.savefig(path)
        plt.close(fig)
    return fig
