""" Propagates flow through a network until it reaches a steady state.

Algorithm:
1. Reset every node's inflow to its external flow.
2. For each iteration:
    a. Calculate absorption and outflow for each node.
    b. Distribute outflow along allocations.
    c. Replace inflows with external flow plus allocated flow.
3. Repeat until the largest change in any node's inflow falls below
   the convergence threshold, or the iteration cap is reached.
4. Add or remove the overflow sink as needed.
5. Seed particles for animation and sum network totals.
"""

from collections import namedtuple
from flowfunding.settings import Settings
from flowfunding.propagation.events import (
    PropagationEvent, log_event, EVENT_STARTED, EVENT_ITERATION,
    EVENT_FINISHED, EVENT_OVERFLOW_CREATED, EVENT_OVERFLOW_REMOVED,
    EVENT_OVERFLOW_UPDATED)
from flowfunding.propagation.overflow import (
    OverflowStrategy, OVERFLOW_CREATED, OVERFLOW_REMOVED, OVERFLOW_UPDATED)
from flowfunding.propagation.particles import generate_flow_particles

PropagationResult = namedtuple(
    'PropagationResult', 'network iterations converged particles totals')

_OVERFLOW_EVENTS = {
    OVERFLOW_CREATED: EVENT_OVERFLOW_CREATED,
    OVERFLOW_REMOVED: EVENT_OVERFLOW_REMOVED,
    OVERFLOW_UPDATED: EVENT_OVERFLOW_UPDATED}

def _routing_table(network, nodes):
    """ Maps each node id to its `(target id, percentage)` pairs.

    The allocations can't change during a run, so this is built once.
    """
    return {
        node.id: [
            (allocation.target_node_id, allocation.percentage)
            for allocation in network.outgoing_allocations(node.id)]
        for node in nodes}

def iterate(nodes, routes):
    """ Performs one propagation iteration on `nodes`, in place.

    Nodes with outflow but no routes drop that outflow for this
    iteration; it is left for the overflow sink.

    Args:
        nodes (list[FlowNode]): Every node in the network. *Mutated.*
        routes (dict[str, list[tuple[str, float]]]): Each node's
            outgoing `(target id, percentage)` pairs.

    Returns:
        float: The largest absolute change in any node's inflow.
    """
    for node in nodes:
        node.update_properties()

    new_inflows = {node.id: node.external_flow for node in nodes}
    for node in nodes:
        if node.outflow <= 0:
            continue
        for target_id, percentage in routes[node.id]:
            new_inflows[target_id] += node.outflow * percentage

    max_change = 0
    for node in nodes:
        new_inflow = new_inflows.get(node.id, node.external_flow)
        max_change = max(max_change, abs(new_inflow - node.inflow))
        node.inflow = new_inflow
    return max_change

class FlowPropagator(object):
    """ Computes the steady-state distribution of flow in a network.

    Callable. Propagation mutates the network's nodes in place (and may
    add or remove the overflow sink); the same network is returned in
    the result. Callers must not edit a network while it is being
    propagated.

    Reaching `max_iterations` without converging is not an error: the
    best-effort state is returned with `converged=False`.

    Args:
        settings (Settings): Source of `max_iterations`,
            `convergence_threshold` and the overflow and particle
            parameters. Optional; defaults to `Settings()`.
        observer (Callable[[PropagationEvent], None]): Receives an
            event for each stage of a run. Optional; defaults to
            `log_event`, which writes to the standard logging module.
        overflow_strategy (OverflowStrategy, str): Manages the overflow
            sink, or the key of an `OverflowStrategy` method. Optional;
            defaults to `settings.overflow_strategy`.

    Attributes:
        max_iterations (int): Upper bound on iterations per run.
        convergence_threshold (float): A run converges once no node's
            inflow changes by this much between iterations.
    """

    def __init__(self, settings=None, *, observer=None, overflow_strategy=None):
        if settings is None:
            settings = Settings()
        self.settings = settings
        self.max_iterations = settings.max_iterations
        self.convergence_threshold = settings.convergence_threshold
        self.observer = observer if observer is not None else log_event

        if overflow_strategy is None:
            overflow_strategy = settings.overflow_strategy
        if not isinstance(overflow_strategy, OverflowStrategy):
            overflow_strategy = OverflowStrategy(
                overflow_strategy,
                threshold=settings.overflow_threshold,
                position=settings.overflow_node_position)
        self.overflow_strategy = overflow_strategy

    def __call__(self, network):
        return self.propagate(network)

    def propagate(self, network):
        """ Propagates flow through `network`.

        Args:
            network (FlowNetwork): The network. *Mutated.*

        Returns:
            PropagationResult: `(network, iterations, converged,
            particles, totals)`.

        Raises:
            DanglingReferenceError: `network` refers to a node or
                allocation that doesn't exist.
        """
        network.validate()
        nodes = network.nodes
        routes = _routing_table(network, nodes)
        self.observer(PropagationEvent(EVENT_STARTED, data={
            'network': network.name,
            'nodes': len(nodes),
            'allocations': len(network.allocations)}))

        for node in nodes:
            node.inflow = node.external_flow

        iterations = 0
        max_change = 0
        converged = False
        while iterations < self.max_iterations and not converged:
            iterations += 1
            max_change = iterate(nodes, routes)
            converged = max_change < self.convergence_threshold
            self.observer(PropagationEvent(
                EVENT_ITERATION, iterations, max_change, converged))

        # The loop leaves inflows one step ahead of the other state:
        for node in nodes:
            node.update_properties()

        change = self.overflow_strategy(network)
        if change is not None:
            self.observer(PropagationEvent(
                _OVERFLOW_EVENTS[change.action], iterations, max_change,
                converged, {'node_id': change.node_id,
                            'inflow': change.inflow}))

        particles = generate_flow_particles(network, self.settings)
        totals = network.totals
        self.observer(PropagationEvent(
            EVENT_FINISHED, iterations, max_change, converged,
            {'network': network, 'totals': totals}))

        return PropagationResult(
            network, iterations, converged, particles, totals)

def propagate(network, settings=None, *, observer=None, overflow_strategy=None):
    """ Propagates flow through `network` with a one-off `FlowPropagator`.

    See `FlowPropagator` for a description of the arguments.

    Returns:
        PropagationResult: `(network, iterations, converged, particles,
        totals)`.
    """
    propagator = FlowPropagator(
        settings, observer=observer, overflow_strategy=overflow_strategy)
    return propagator.propagate(network)
