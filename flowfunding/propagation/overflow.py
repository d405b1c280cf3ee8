""" Manages the overflow sink: a synthetic node for unallocated flow.

A node with outflow but no outgoing allocations has nowhere to send
its excess. When any node is in that state, an overflow sink is added
to the network to absorb the excess. Once no node is, and no allocation
routes flow into the sink, it is removed. These topology changes happen
strictly after the propagation loop has finished, never between
iterations.
"""

from collections import namedtuple
from flowfunding.network.node import create_overflow_node, OVERFLOW_NODE_ID
from flowfunding.utility.precision import FLOW_TOLERANCE
from flowfunding.utility.register import (
    MethodRegister, registered_method_named)

OVERFLOW_CREATED = 'created'
OVERFLOW_REMOVED = 'removed'
OVERFLOW_UPDATED = 'updated'

SET_ONCE_KEY = 'Set once'
RECOMPUTE_KEY = 'Recompute'

# Describes what an `OverflowStrategy` call did to the network:
OverflowChange = namedtuple('OverflowChange', 'action node_id inflow')

def _unallocated_nodes(network):
    """ Yields non-sink nodes that have no outgoing allocations. """
    for node in network.nodes:
        if not node.is_overflow_sink and not network.has_outgoing_allocations(
                node.id):
            yield node

def needs_overflow_node(network, threshold=FLOW_TOLERANCE):
    """ Returns True if any node has outflow with nowhere to go.

    That is, if any non-sink node has more than `threshold` outflow and
    no outgoing allocations.
    """
    return any(
        node.outflow > threshold for node in _unallocated_nodes(network))

def unallocated_outflow(network):
    """ Sums the outflow of non-sink nodes with no outgoing allocations. """
    return sum(
        node.outflow for node in _unallocated_nodes(network)
        if node.outflow > 0)

def allocated_inflow(network, node_id):
    """ Sums the flow that allocations route into `node_id`. """
    return sum(
        network.node(allocation.source_node_id).outflow * allocation.percentage
        for allocation in network.incoming_allocations(node_id))

def _sink_targeted(network):
    """ Returns True if any allocation routes flow into the sink. """
    return (
        network.overflow_node_id is not None
        and bool(network.incoming_allocations(network.overflow_node_id)))

def _overflow_node_id(network):
    """ Returns an unused id for a new overflow sink. """
    node_id = OVERFLOW_NODE_ID
    suffix = 1
    while node_id in network:
        suffix += 1
        node_id = OVERFLOW_NODE_ID + '-' + str(suffix)
    return node_id

class OverflowStrategy(MethodRegister):
    """ Inserts, removes and (optionally) refeeds the overflow sink.

    Callable. Call with a network whose node properties are up to date
    (i.e. after propagation); the network is mutated in place.

    Two strategies are provided:

    * "Set once": Insert a sink when one is needed and none exists,
      setting its inflow to the current unallocated outflow. Remove the
      sink when no node needs it and no allocation routes flow into it.
      Otherwise do nothing; in particular, a sink that is kept has its
      inflow left as the propagation run computed it. Since the sink
      takes part in each run like a node with no external flow, that is
      only the flow allocated to it on any run after the one that
      created it.
    * "Recompute": As above, but a sink that is kept has its inflow
      recomputed on every call as the flow allocated to it plus the
      current unallocated outflow.

    Attributes:
        strategy (str, func): Either a key for one of the strategies
            above or the strategy method itself.
        threshold (float): Nodes with more unallocated outflow than
            this need the sink.
        position (tuple[float, float]): The position given to a new
            sink.

    Args:
        network (FlowNetwork): A network whose node properties reflect
            the latest propagation run. *Mutated.*

    Returns:
        OverflowChange | None: What was done to the sink, or None if
        nothing was done.
    """

    def __init__(
            self, strategy=SET_ONCE_KEY, threshold=FLOW_TOLERANCE,
            position=(600, 300)):
        # Fail early on unrecognized strategies:
        self.strategy = self.registered_method_key(strategy)
        self.threshold = threshold
        self.position = tuple(position)

    def __call__(self, network):
        return self.call_registered_method(self.strategy, network)

    @registered_method_named(SET_ONCE_KEY)
    def strategy_set_once(self, network):
        """ Inserts or removes the sink; never refeeds an existing one. """
        needed = needs_overflow_node(network, self.threshold)
        if needed and network.overflow_node_id is None:
            return self.insert(network)
        if (
                not needed and network.overflow_node_id is not None
                and not _sink_targeted(network)):
            return self.remove(network)
        return None

    @registered_method_named(RECOMPUTE_KEY)
    def strategy_recompute(self, network):
        """ Inserts or removes the sink, and refeeds a kept sink. """
        change = self.strategy_set_once(network)
        if change is None and network.overflow_node_id is not None:
            return self.refeed(network)
        return change

    def insert(self, network):
        """ Adds a sink fed by all currently-unallocated outflow. """
        inflow = unallocated_outflow(network)
        sink = create_overflow_node(
            self.position, node_id=_overflow_node_id(network))
        network.add_node(sink)
        network.overflow_node_id = sink.id
        sink.inflow = inflow
        sink.update_properties()
        return OverflowChange(OVERFLOW_CREATED, sink.id, sink.inflow)

    def remove(self, network):
        """ Removes the sink and any allocations from it. """
        node_id = network.overflow_node_id
        network.remove_node(node_id)
        return OverflowChange(OVERFLOW_REMOVED, node_id, 0)

    def refeed(self, network):
        """ Resets the sink's inflow from the current outflow of other nodes. """
        sink = network.overflow_node
        sink.inflow = (
            allocated_inflow(network, sink.id) + unallocated_outflow(network))
        sink.update_properties()
        return OverflowChange(OVERFLOW_UPDATED, sink.id, sink.inflow)
