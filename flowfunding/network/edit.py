""" Editing operations applied to a network between propagation runs.

Each operation mutates `network` and returns it. Operations that touch
allocations renormalize the affected source node's allocations, so the
network always satisfies the normalization rule afterwards.

Flow and percentage inputs are clamped to their valid ranges by
default. Pass `strict=True` to have out-of-range values rejected
instead. NaN is always rejected.
"""

import itertools
from flowfunding.errors import InvalidFlowError, InvalidPercentageError
from flowfunding.network.allocation import Allocation
from flowfunding.network.node import FlowNode
from flowfunding.utility.precision import clamp, is_nan

DEFAULT_PERCENTAGE = 0.5
ALLOCATION_ID_PREFIX = 'alloc_'
NODE_ID_PREFIX = 'node_'

def _check_flow(value, strict):
    """ Returns `value` clamped to be non-negative. """
    if is_nan(value):
        raise InvalidFlowError('Flow cannot be NaN.')
    if strict and value < 0:
        raise InvalidFlowError(
            'Flow must be non-negative, got ' + str(value) + '.')
    return clamp(value, lower=0)

def _check_percentage(value, strict):
    """ Returns `value` clamped to [0, 1]. """
    if is_nan(value):
        raise InvalidPercentageError('Percentage cannot be NaN.')
    if strict and not 0 <= value <= 1:
        raise InvalidPercentageError(
            'Percentage must be in [0, 1], got ' + str(value) + '.')
    return clamp(value, lower=0, upper=1)

def _unique_id(prefix, taken):
    """ Returns the first of `prefix1`, `prefix2`, ... not in `taken`. """
    for i in itertools.count(1):
        candidate = prefix + str(i)
        if candidate not in taken:
            return candidate

def set_external_flow(network, node_id, value, *, strict=False):
    """ Sets the flow injected into `node_id` each cycle.

    Negative values are clamped to 0 unless `strict` is True. The
    overflow sink never receives external flow.

    Raises:
        DanglingReferenceError: No node has id `node_id`.
        InvalidFlowError: `value` is NaN, or is negative and `strict`
            is True, or `node_id` is the overflow sink.
    """
    node = network.node(node_id)
    if node.is_overflow_sink:
        raise InvalidFlowError(
            'Cannot inject external flow into overflow sink ' +
            repr(node_id) + '.')
    node.external_flow = _check_flow(value, strict)
    return network

def add_node(
        network, name, min_absorption=0, max_absorption=None,
        external_flow=0, position=(0, 0), *, node_id=None, strict=False):
    """ Adds a new node, generating a unique id if none is given.

    `max_absorption` defaults to `min_absorption` plus 50 flow units.

    Raises:
        DuplicateIdError: `node_id` is already in use.
        InvalidFlowError: A threshold or `external_flow` is NaN, or
            (with `strict`) negative, or `max_absorption` is below
            `min_absorption`.
    """
    # pylint: disable=too-many-arguments
    min_absorption = _check_flow(min_absorption, strict)
    if max_absorption is None:
        max_absorption = min_absorption + 50
    max_absorption = _check_flow(max_absorption, strict)
    if max_absorption < min_absorption:
        raise InvalidFlowError(
            'max_absorption (' + str(max_absorption) +
            ') is below min_absorption (' + str(min_absorption) + ').')
    if node_id is None:
        node_id = _unique_id(NODE_ID_PREFIX, network)
    node = FlowNode(
        node_id, name=name,
        min_absorption=min_absorption, max_absorption=max_absorption,
        external_flow=_check_flow(external_flow, strict),
        position=position)
    network.add_node(node)
    return network

def delete_node(network, node_id):
    """ Removes a node and every allocation to or from it.

    The remaining allocations of nodes that allocated to it are
    renormalized.

    Raises:
        DanglingReferenceError: No node has id `node_id`.
    """
    network.remove_node(node_id)
    return network

def create_allocation(
        network, source_id, target_id,
        initial_percentage=DEFAULT_PERCENTAGE, *,
        allocation_id=None, strict=False):
    """ Adds an allocation, then renormalizes the source's allocations.

    Note that normalization means the new allocation rarely keeps
    `initial_percentage`: a node's first allocation always ends up at
    100%, and otherwise all of the source's percentages are rescaled to
    sum to 1.

    If `allocation_id` isn't given, the first unused id of the form
    `alloc_<n>` is used.

    Raises:
        DanglingReferenceError: `source_id` or `target_id` is missing.
        InvalidAllocationError: `source_id` equals `target_id`.
        InvalidPercentageError: `initial_percentage` is NaN, or (with
            `strict`) outside [0, 1].
        DuplicateIdError: `allocation_id` is already in use.
    """
    percentage = _check_percentage(initial_percentage, strict)
    if allocation_id is None:
        taken = {allocation.id for allocation in network.allocations}
        allocation_id = _unique_id(ALLOCATION_ID_PREFIX, taken)
    network.add_allocation(
        Allocation(allocation_id, source_id, target_id, percentage))
    network.normalize_outgoing(source_id)
    return network

def update_allocation_percentage(
        network, allocation_id, percentage, *, strict=False):
    """ Sets an allocation's percentage, then renormalizes its siblings.

    Raises:
        DanglingReferenceError: No allocation has id `allocation_id`.
        InvalidPercentageError: `percentage` is NaN, or (with
            `strict`) outside [0, 1].
    """
    percentage = _check_percentage(percentage, strict)
    allocation = network.allocation(allocation_id)
    network.replace_allocations([allocation.copy(percentage=percentage)])
    network.normalize_outgoing(allocation.source_node_id)
    return network

def delete_allocation(network, allocation_id):
    """ Removes an allocation, then renormalizes its remaining siblings.

    Raises:
        DanglingReferenceError: No allocation has id `allocation_id`.
    """
    allocation = network.remove_allocation(allocation_id)
    network.normalize_outgoing(allocation.source_node_id)
    return network
