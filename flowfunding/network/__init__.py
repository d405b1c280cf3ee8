""" A package for modelling flow networks: nodes, allocations and edits. """

# See flowfunding.__init__.py for version, author, and licensing info.

__all__ = ['node', 'allocation', 'totals', 'base', 'edit']

from flowfunding.network.node import (
    FlowNode, NodeProperties, flow_status, compute_properties,
    update_node_properties, create_overflow_node,
    STATUS_STARVED, STATUS_MINIMUM, STATUS_HEALTHY, STATUS_SATURATED,
    FLOW_STATUSES, OVERFLOW_NODE_ID, OVERFLOW_NODE_NAME)
from flowfunding.network.allocation import (
    Allocation, normalize_allocations, percentages_valid)
from flowfunding.network.totals import NetworkTotals, calculate_totals
from flowfunding.network.base import FlowNetwork, read_network
from flowfunding.network.edit import (
    set_external_flow, add_node, delete_node, create_allocation,
    update_allocation_percentage, delete_allocation)
