""" A package for simulating flow circulating through a funding network.

Accounts absorb flow up to a capacity band and pass their excess on to
other accounts in fixed proportions. This package computes where the
flow settles.
"""

__all__ = ['errors', 'network', 'propagation', 'settings', 'utility']

__version__ = '0.0.1'
__author__ = 'Christopher Scott'
__copyright__ = 'Copyright (C) 2019 Christopher Scott'
__license__ = 'All rights reserved'

from flowfunding.errors import (
    FlowNetworkError, DanglingReferenceError, DuplicateIdError,
    InvalidAllocationError, InvalidPercentageError, InvalidFlowError)
from flowfunding.settings import Settings
from flowfunding.network import (
    FlowNode, Allocation, FlowNetwork, NetworkTotals,
    normalize_allocations, update_node_properties, calculate_totals,
    create_overflow_node, read_network,
    set_external_flow, add_node, delete_node, create_allocation,
    update_allocation_percentage, delete_allocation,
    STATUS_STARVED, STATUS_MINIMUM, STATUS_HEALTHY, STATUS_SATURATED)
from flowfunding.propagation import (
    FlowPropagator, PropagationResult, propagate, OverflowStrategy,
    needs_overflow_node, FlowParticle, generate_flow_particles,
    update_flow_particles, PropagationEvent, log_event)
