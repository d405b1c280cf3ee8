""" Provides the `FlowNode` class and the node property updater.

A node receives flow (external injections plus flow allocated to it by
other nodes), absorbs as much as its capacity allows, and passes the
excess on as outflow.
"""

from collections import namedtuple
from flowfunding.utility.precision import (
    INFINITY, STATUS_TOLERANCE, within_tolerance)

STATUS_STARVED = 'starved'
STATUS_MINIMUM = 'minimum'
STATUS_HEALTHY = 'healthy'
STATUS_SATURATED = 'saturated'
FLOW_STATUSES = (
    STATUS_STARVED, STATUS_MINIMUM, STATUS_HEALTHY, STATUS_SATURATED)

OVERFLOW_NODE_ID = 'overflow-sink'
OVERFLOW_NODE_NAME = 'Overflow'

NodeProperties = namedtuple('NodeProperties', 'absorbed outflow status')

def flow_status(absorbed, min_absorption, max_absorption):
    """ Classifies a node by the flow it absorbs.

    The checks are evaluated in order: starved, saturated, minimum,
    healthy. So a node whose `min_absorption` equals its
    `max_absorption` and which absorbs exactly that much is saturated.

    Returns:
        str: One of the values in `FLOW_STATUSES`.
    """
    if absorbed < min_absorption:
        return STATUS_STARVED
    if absorbed >= max_absorption:
        return STATUS_SATURATED
    if within_tolerance(absorbed, min_absorption, STATUS_TOLERANCE):
        return STATUS_MINIMUM
    return STATUS_HEALTHY

def compute_properties(inflow, min_absorption, max_absorption):
    """ Computes absorbed flow, outflow and status for a given inflow.

    A node absorbs as much of its inflow as it can, up to
    `max_absorption`. Whatever it can't absorb is outflow.

    Args:
        inflow (float): Total flow entering the node.
        min_absorption (float): Flow needed to not be starved.
        max_absorption (float): Ceiling on absorbed flow. May be
            infinite.

    Returns:
        NodeProperties: An `(absorbed, outflow, status)` tuple.
    """
    absorbed = min(inflow, max_absorption)
    outflow = max(0, inflow - absorbed)
    status = flow_status(absorbed, min_absorption, max_absorption)
    return NodeProperties(absorbed, outflow, status)

class FlowNode(object):
    """ An account in a flow network.

    `inflow`, `absorbed`, `outflow` and `status` are computed state.
    They are set by `update_properties` and by the propagation engine
    and should not be edited elsewhere.

    Args:
        node_id (str): A unique, stable identifier.
        name (str): A display name. Optional; defaults to `node_id`.
        min_absorption (float): Flow needed to leave the `starved`
            state. Optional; defaults to 0.
        max_absorption (float): Ceiling on absorbed flow. Optional;
            defaults to infinity.
        external_flow (float): Flow injected into this node each cycle.
            Optional; defaults to 0.
        position (tuple[float, float]): An `(x, y)` hint for renderers.
            Not used by any calculation. Optional.
        is_overflow_sink (bool): True only for the synthetic overflow
            sink. Optional; defaults to False.

    Attributes:
        id (str): The node's identifier.
        inflow (float): Total flow entering this node this cycle.
        absorbed (float): Portion of `inflow` retained by this node.
        outflow (float): Portion of `inflow` passed on.
        status (str): One of `FLOW_STATUSES`.
    """
    # pylint: disable=too-many-instance-attributes,too-many-arguments

    def __init__(
            self, node_id, name=None, min_absorption=0,
            max_absorption=INFINITY, external_flow=0, position=(0, 0),
            is_overflow_sink=False):
        self.id = node_id  # pylint: disable=invalid-name
        self.name = name if name is not None else str(node_id)
        self.min_absorption = min_absorption
        self.max_absorption = max_absorption
        self.external_flow = external_flow
        self.position = tuple(position)
        self.is_overflow_sink = is_overflow_sink

        # Computed state. Nothing has flowed until propagation runs:
        self.inflow = 0
        self.absorbed = 0
        self.outflow = 0
        self.status = flow_status(0, min_absorption, max_absorption)

    def update_properties(self):
        """ Recomputes `absorbed`, `outflow` and `status` in place.

        Returns:
            FlowNode: This node, for chaining.
        """
        self.absorbed, self.outflow, self.status = compute_properties(
            self.inflow, self.min_absorption, self.max_absorption)
        return self

    def copy(self):
        """ Returns a copy of this node, including its computed state. """
        node = FlowNode(
            self.id, name=self.name,
            min_absorption=self.min_absorption,
            max_absorption=self.max_absorption,
            external_flow=self.external_flow,
            position=self.position,
            is_overflow_sink=self.is_overflow_sink)
        node.inflow = self.inflow
        node.absorbed = self.absorbed
        node.outflow = self.outflow
        node.status = self.status
        return node

    def to_dict(self):
        """ Returns a JSON-compatible snapshot of this node. """
        return {
            'id': self.id,
            'name': self.name,
            'min_absorption': self.min_absorption,
            'max_absorption': self.max_absorption,
            'external_flow': self.external_flow,
            'position': list(self.position),
            'is_overflow_sink': self.is_overflow_sink,
            'inflow': self.inflow,
            'absorbed': self.absorbed,
            'outflow': self.outflow,
            'status': self.status}

    @classmethod
    def from_dict(cls, vals):
        """ Builds a node from a dict like those emitted by `to_dict`.

        Only `id` is required. Computed state, if present, is restored
        as-is; it will be overwritten by the next propagation run.
        """
        node = cls(
            vals['id'], name=vals.get('name'),
            min_absorption=vals.get('min_absorption', 0),
            max_absorption=vals.get('max_absorption', INFINITY),
            external_flow=vals.get('external_flow', 0),
            position=vals.get('position', (0, 0)),
            is_overflow_sink=vals.get('is_overflow_sink', False))
        for attr in ('inflow', 'absorbed', 'outflow', 'status'):
            if attr in vals:
                setattr(node, attr, vals[attr])
        return node

    def __repr__(self):
        return (
            'FlowNode(' + repr(self.id) + ', inflow=' + str(self.inflow) +
            ', absorbed=' + str(self.absorbed) +
            ', outflow=' + str(self.outflow) +
            ', status=' + repr(self.status) + ')')

def update_node_properties(node):
    """ Returns a copy of `node` with its computed properties updated.

    This leaves `node` unchanged. The propagation engine updates nodes
    in place instead, via `FlowNode.update_properties`.
    """
    return node.copy().update_properties()

def create_overflow_node(position=(600, 300), node_id=OVERFLOW_NODE_ID):
    """ Creates the synthetic overflow sink.

    The sink has no minimum, no ceiling and no external flow. It
    receives the outflow that other nodes have no allocation for, plus
    any flow allocated to it directly.
    """
    return FlowNode(
        node_id, name=OVERFLOW_NODE_NAME,
        min_absorption=0, max_absorption=INFINITY,
        external_flow=0, position=position,
        is_overflow_sink=True)
