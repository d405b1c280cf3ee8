""" Network-wide sums of node state. """

from collections import namedtuple

NetworkTotals = namedtuple(
    'NetworkTotals', 'total_inflow total_absorbed total_outflow')

def calculate_totals(nodes):
    """ Sums flows over `nodes`.

    Totals are always recomputed from scratch. `total_inflow` counts
    only external flow, so flow passed between nodes isn't counted
    twice.

    Args:
        nodes (Iterable[FlowNode]): The nodes of a network.

    Returns:
        NetworkTotals: `(total_inflow, total_absorbed, total_outflow)`.
    """
    total_inflow = 0
    total_absorbed = 0
    total_outflow = 0
    for node in nodes:
        total_inflow += node.external_flow
        total_absorbed += node.absorbed
        total_outflow += node.outflow
    return NetworkTotals(total_inflow, total_absorbed, total_outflow)
