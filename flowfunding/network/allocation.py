""" Provides the `Allocation` edge type and the allocation normalizer. """

from dataclasses import dataclass, replace, asdict
from flowfunding.utility.precision import (
    PERCENTAGE_TOLERANCE, within_tolerance)

@dataclass
class Allocation:
    """ A directed edge routing a share of a node's outflow to another.

    Attributes:
        id (str): A unique identifier.
        source_node_id (str): The node whose outflow is allocated.
        target_node_id (str): The node receiving the allocated flow.
        percentage (float): The share of the source's outflow routed to
            the target, as a fraction in [0, 1] (e.g. 0.25 is 25%).
    """
    # pylint: disable=invalid-name
    id: str
    source_node_id: str
    target_node_id: str
    percentage: float = 1.0

    def copy(self, **changes):
        """ Returns a copy of this allocation, with optional changes. """
        return replace(self, **changes)

    def to_dict(self):
        """ Returns a JSON-compatible snapshot of this allocation. """
        return asdict(self)

    @classmethod
    def from_dict(cls, vals):
        """ Builds an allocation from a dict like those from `to_dict`. """
        return cls(
            vals['id'], vals['source_node_id'], vals['target_node_id'],
            vals.get('percentage', 1.0))

def normalize_allocations(allocations):
    """ Corrects the percentages of one node's outgoing allocations.

    The returned allocations have the same ids and endpoints as the
    input, but their percentages sum to 1:

    * A lone allocation gets 100%, whatever its nominal value.
    * If the percentages sum to exactly 0, each gets an equal share.
    * If they already sum to 1 (within `PERCENTAGE_TOLERANCE`), they
      are left as they are.
    * Otherwise, each is scaled by `1 / sum`.

    The input allocations are not modified.

    Args:
        allocations (Iterable[Allocation]): Allocations which all share
            the same source node.

    Returns:
        list[Allocation]: Copies of `allocations`, in the same order,
        with corrected percentages.
    """
    allocations = list(allocations)
    if not allocations:
        return []

    if len(allocations) == 1:
        return [allocations[0].copy(percentage=1.0)]

    total = sum(allocation.percentage for allocation in allocations)

    if total == 0:
        share = 1.0 / len(allocations)
        return [allocation.copy(percentage=share) for allocation in allocations]

    # Skip rescaling when it would only add floating-point noise:
    if within_tolerance(total, 1.0, PERCENTAGE_TOLERANCE):
        return [allocation.copy() for allocation in allocations]

    return [
        allocation.copy(percentage=allocation.percentage / total)
        for allocation in allocations]

def percentages_valid(allocations):
    """ Returns True if `allocations` satisfy the normalization rule.

    That is, there are no allocations, or exactly one at 100%, or
    several whose percentages sum to 1 within `PERCENTAGE_TOLERANCE`.
    """
    allocations = list(allocations)
    if not allocations:
        return True
    if len(allocations) == 1:
        return allocations[0].percentage == 1.0
    total = sum(allocation.percentage for allocation in allocations)
    return within_tolerance(total, 1.0, PERCENTAGE_TOLERANCE)
