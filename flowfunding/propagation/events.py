""" Structured events emitted while propagating flow.

`FlowPropagator` reports its progress by passing `PropagationEvent`
records to an observer: any callable taking one event. The default
observer, `log_event`, writes them to this module's logger.
"""

import logging
import math
from collections import namedtuple

logger = logging.getLogger(__name__)

EVENT_STARTED = 'started'
EVENT_ITERATION = 'iteration'
EVENT_FINISHED = 'finished'
EVENT_OVERFLOW_CREATED = 'overflow_created'
EVENT_OVERFLOW_REMOVED = 'overflow_removed'
EVENT_OVERFLOW_UPDATED = 'overflow_updated'

# Iteration events are logged on this interval (and on convergence):
LOG_INTERVAL = 10

PropagationEvent = namedtuple(
    'PropagationEvent', 'kind iteration max_change converged data')
# Only `kind` is required:
PropagationEvent.__new__.__defaults__ = (0, None, False, None)

def format_flow(rate):
    """ Formats a flow rate to one decimal place, e.g. `'12.5'`. """
    return '{:.1f}'.format(rate)

def format_percentage(fraction):
    """ Formats a fraction as a whole percentage, e.g. `'25%'`. """
    # Round half up, rather than Python's round-half-to-even:
    return str(int(math.floor(fraction * 100 + 0.5))) + '%'

def describe_network(network):
    """ Summarizes the state of each node that has any flow.

    Returns:
        list[str]: One line per node, like
        `'Alice           in:  100.0 abs:   50.0 out:   50.0 [saturated]'`.
    """
    lines = []
    for node in network.nodes:
        if node.inflow > 0 or node.absorbed > 0 or node.outflow > 0:
            lines.append(
                node.name.ljust(15) +
                ' in: ' + format_flow(node.inflow).rjust(6) +
                ' abs: ' + format_flow(node.absorbed).rjust(6) +
                ' out: ' + format_flow(node.outflow).rjust(6) +
                ' [' + node.status + ']')
    return lines

def log_event(event):
    """ Writes `event` to the `flowfunding.propagation.events` logger. """
    data = event.data or {}
    if event.kind == EVENT_STARTED:
        logger.debug(
            "Flow propagation started for %r (%d nodes, %d allocations)",
            data.get('network'), data.get('nodes', 0),
            data.get('allocations', 0))
    elif event.kind == EVENT_ITERATION:
        if event.iteration % LOG_INTERVAL == 0 or event.converged:
            logger.debug(
                "Iteration %d: max change = %.3f",
                event.iteration, event.max_change)
    elif event.kind == EVENT_OVERFLOW_CREATED:
        logger.info(
            "Created overflow sink %r receiving %s unallocated flow",
            data.get('node_id'), format_flow(data.get('inflow', 0)))
    elif event.kind == EVENT_OVERFLOW_REMOVED:
        logger.info(
            "Removed overflow sink %r (no longer needed)",
            data.get('node_id'))
    elif event.kind == EVENT_OVERFLOW_UPDATED:
        logger.debug(
            "Overflow sink %r now receiving %s unallocated flow",
            data.get('node_id'), format_flow(data.get('inflow', 0)))
    elif event.kind == EVENT_FINISHED:
        _log_finished(event, data)

def _log_finished(event, data):
    """ Logs the outcome of a run and a summary of the final state. """
    if event.converged:
        logger.info("Converged after %d iterations", event.iteration)
    else:
        logger.warning(
            "Max iterations reached after %d iterations "
            "(last max change = %.3f)", event.iteration, event.max_change)
    totals = data.get('totals')
    if totals is not None:
        logger.info(
            "Total inflow: %s, absorbed: %s, outflow: %s",
            format_flow(totals.total_inflow),
            format_flow(totals.total_absorbed),
            format_flow(totals.total_outflow))
    network = data.get('network')
    if network is not None and logger.isEnabledFor(logging.DEBUG):
        for line in describe_network(network):
            logger.debug("  %s", line)
