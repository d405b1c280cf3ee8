""" Provides the `FlowNetwork` class.

Wraps a networkx multigraph: nodes are keyed by node id and hold a
`FlowNode`, and each allocation is an edge keyed by allocation id.
"""

import networkx
from flowfunding.errors import (
    DanglingReferenceError, DuplicateIdError, InvalidAllocationError)
from flowfunding.network.node import FlowNode
from flowfunding.network.allocation import Allocation, normalize_allocations
from flowfunding.network.totals import calculate_totals
from flowfunding.utility.value_reader import ValueReader

NODE_KEY = "node"
ALLOCATION_KEY = "allocation"

class FlowNetwork(object):
    """ A network of accounts connected by allocation edges.

    Nodes are stored once, in the graph, and are mutated in place by
    the propagation engine. Network totals are never stored; they are
    summed from the nodes each time they are read.

    Iteration over `nodes` and `allocations` follows insertion order.

    Args:
        name (str): A display name. Optional.
        nodes (Iterable[FlowNode]): Nodes to add. Optional.
        allocations (Iterable[Allocation]): Allocations to add, after
            all of `nodes`. They are added as given, without
            normalization. Optional.
        overflow_node_id (str): The id of the overflow sink among
            `nodes`, if there is one. Optional.

    Attributes:
        name (str): A display name.
        graph (networkx.MultiDiGraph): The underlying graph.
        overflow_node_id (str | None): The id of the overflow sink, if
            the network currently has one.
    """

    def __init__(
            self, name='', nodes=None, allocations=None,
            overflow_node_id=None):
        self.name = name
        self.graph = networkx.MultiDiGraph()
        self.overflow_node_id = None
        if nodes is not None:
            for node in nodes:
                self.add_node(node)
        if allocations is not None:
            for allocation in allocations:
                self.add_allocation(allocation)
        if overflow_node_id is not None:
            # Raises DanglingReferenceError if the sink isn't present:
            self.node(overflow_node_id)
            self.overflow_node_id = overflow_node_id

    def __contains__(self, node_id):
        return node_id in self.graph

    def __len__(self):
        return self.graph.number_of_nodes()

    def __repr__(self):
        return (
            'FlowNetwork(' + repr(self.name) + ', ' + str(len(self)) +
            ' nodes, ' + str(self.graph.number_of_edges()) +
            ' allocations)')

    @property
    def nodes(self):
        """ list[FlowNode]: All nodes, in insertion order. """
        return [node for _, node in self.graph.nodes(data=NODE_KEY)]

    @property
    def node_ids(self):
        """ list[str]: The ids of all nodes, in insertion order. """
        return list(self.graph.nodes)

    @property
    def allocations(self):
        """ list[Allocation]: All allocations, grouped by source. """
        return [
            allocation for _, _, allocation
            in self.graph.edges(data=ALLOCATION_KEY)]

    @property
    def overflow_node(self):
        """ FlowNode | None: The overflow sink, if there is one. """
        if self.overflow_node_id is None:
            return None
        return self.node(self.overflow_node_id)

    @property
    def totals(self):
        """ NetworkTotals: Sums of external flow, absorption and outflow. """
        return calculate_totals(self.nodes)

    @property
    def total_inflow(self):
        """ float: The sum of all nodes' external flow. """
        return self.totals.total_inflow

    @property
    def total_absorbed(self):
        """ float: The sum of all nodes' absorbed flow. """
        return self.totals.total_absorbed

    @property
    def total_outflow(self):
        """ float: The sum of all nodes' outflow. """
        return self.totals.total_outflow

    def node(self, node_id):
        """ Returns the node with id `node_id`.

        Raises:
            DanglingReferenceError: No node has id `node_id`.
        """
        if node_id not in self.graph:
            raise DanglingReferenceError(
                'No node with id ' + repr(node_id) + '.')
        node = self.graph.nodes[node_id].get(NODE_KEY)
        if node is None:
            raise DanglingReferenceError(
                'Node id ' + repr(node_id) + ' has no node record.')
        return node

    def allocation(self, allocation_id):
        """ Returns the allocation with id `allocation_id`.

        Raises:
            DanglingReferenceError: No allocation has id `allocation_id`.
        """
        for _, _, key, allocation in self.graph.edges(
                keys=True, data=ALLOCATION_KEY):
            if key == allocation_id:
                return allocation
        raise DanglingReferenceError(
            'No allocation with id ' + repr(allocation_id) + '.')

    def has_allocation(self, allocation_id):
        """ Returns True if an allocation has id `allocation_id`. """
        return any(
            key == allocation_id for _, _, key in self.graph.edges(keys=True))

    def outgoing_allocations(self, node_id):
        """ Returns the allocations whose source is `node_id`. """
        if node_id not in self.graph:
            raise DanglingReferenceError(
                'No node with id ' + repr(node_id) + '.')
        return [
            allocation for _, _, allocation
            in self.graph.out_edges(node_id, data=ALLOCATION_KEY)]

    def incoming_allocations(self, node_id):
        """ Returns the allocations whose target is `node_id`. """
        if node_id not in self.graph:
            raise DanglingReferenceError(
                'No node with id ' + repr(node_id) + '.')
        return [
            allocation for _, _, allocation
            in self.graph.in_edges(node_id, data=ALLOCATION_KEY)]

    def has_outgoing_allocations(self, node_id):
        """ Returns True if `node_id` allocates its outflow anywhere. """
        return self.graph.out_degree(node_id) > 0

    def add_node(self, node):
        """ Adds `node` to the network.

        Raises:
            DuplicateIdError: A node with the same id already exists.
        """
        if node.id in self.graph:
            raise DuplicateIdError(
                'A node with id ' + repr(node.id) + ' already exists.')
        self.graph.add_node(node.id, **{NODE_KEY: node})
        return node

    def remove_node(self, node_id):
        """ Removes a node along with every allocation to or from it.

        Nodes that allocated to the removed node have their remaining
        allocations renormalized. If the removed node is the overflow
        sink, `overflow_node_id` is cleared.

        Returns:
            FlowNode: The removed node.

        Raises:
            DanglingReferenceError: No node has id `node_id`.
        """
        node = self.node(node_id)
        sources = [
            source for source in self.graph.predecessors(node_id)
            if source != node_id]
        self.graph.remove_node(node_id)
        if self.overflow_node_id == node_id:
            self.overflow_node_id = None
        for source in sources:
            self.normalize_outgoing(source)
        return node

    def add_allocation(self, allocation):
        """ Adds `allocation` as an edge, without normalizing.

        Most client code should use `flowfunding.network.edit`, which
        normalizes the source's allocations afterwards.

        Raises:
            DanglingReferenceError: The source or target isn't a node in
                this network.
            InvalidAllocationError: The source and target are the same.
            DuplicateIdError: An allocation with the same id exists.
        """
        for node_id in (allocation.source_node_id, allocation.target_node_id):
            if node_id not in self.graph:
                raise DanglingReferenceError(
                    'Allocation ' + repr(allocation.id) +
                    ' refers to missing node ' + repr(node_id) + '.')
        if allocation.source_node_id == allocation.target_node_id:
            raise InvalidAllocationError(
                'Allocation ' + repr(allocation.id) +
                ' would route a node\'s outflow back to itself.')
        if self.has_allocation(allocation.id):
            raise DuplicateIdError(
                'An allocation with id ' + repr(allocation.id) +
                ' already exists.')
        self.graph.add_edge(
            allocation.source_node_id, allocation.target_node_id,
            key=allocation.id, **{ALLOCATION_KEY: allocation})
        return allocation

    def remove_allocation(self, allocation_id):
        """ Removes an allocation, without normalizing its siblings.

        Returns:
            Allocation: The removed allocation.

        Raises:
            DanglingReferenceError: No allocation has id `allocation_id`.
        """
        allocation = self.allocation(allocation_id)
        self.graph.remove_edge(
            allocation.source_node_id, allocation.target_node_id,
            key=allocation_id)
        return allocation

    def replace_allocations(self, allocations):
        """ Swaps existing allocations for new versions with the same ids.

        Each replacement must keep its original endpoints.

        Raises:
            DanglingReferenceError: An allocation's id, source or target
                doesn't match an existing allocation.
        """
        for allocation in allocations:
            edge = (
                allocation.source_node_id, allocation.target_node_id,
                allocation.id)
            if not self.graph.has_edge(*edge):
                raise DanglingReferenceError(
                    'No allocation with id ' + repr(allocation.id) +
                    ' from ' + repr(allocation.source_node_id) +
                    ' to ' + repr(allocation.target_node_id) + '.')
            self.graph.edges[edge][ALLOCATION_KEY] = allocation

    def normalize_outgoing(self, node_id):
        """ Normalizes the allocations whose source is `node_id`.

        Allocations from other nodes are left untouched.

        Returns:
            list[Allocation]: The normalized allocations.
        """
        normalized = normalize_allocations(self.outgoing_allocations(node_id))
        self.replace_allocations(normalized)
        return normalized

    def validate(self):
        """ Checks referential integrity.

        networkx creates endpoints implicitly when an edge is added
        directly to `graph`, so this finds nodes without a `FlowNode`
        record as well as edges without an `Allocation`.

        Raises:
            DanglingReferenceError: A reference points at nothing.
        """
        for node_id, node in self.graph.nodes(data=NODE_KEY):
            if node is None:
                raise DanglingReferenceError(
                    'Node id ' + repr(node_id) + ' has no node record; ' +
                    'an allocation refers to a node that does not exist.')
        for source, target, key, allocation in self.graph.edges(
                keys=True, data=ALLOCATION_KEY):
            if allocation is None or (
                    allocation.id, allocation.source_node_id,
                    allocation.target_node_id) != (key, source, target):
                raise DanglingReferenceError(
                    'Edge ' + repr(key) + ' from ' + repr(source) + ' to ' +
                    repr(target) + ' has no matching allocation record.')
        if (
                self.overflow_node_id is not None
                and self.overflow_node_id not in self.graph):
            raise DanglingReferenceError(
                'Overflow node ' + repr(self.overflow_node_id) +
                ' is not in the network.')

    def copy(self):
        """ Returns an independent copy of this network. """
        return FlowNetwork(
            self.name,
            nodes=[node.copy() for node in self.nodes],
            allocations=[allocation.copy() for allocation in self.allocations],
            overflow_node_id=self.overflow_node_id)

    def to_dict(self):
        """ Returns a JSON-compatible snapshot, including totals. """
        totals = self.totals
        return {
            'name': self.name,
            'nodes': [node.to_dict() for node in self.nodes],
            'allocations': [
                allocation.to_dict() for allocation in self.allocations],
            'overflow_node_id': self.overflow_node_id,
            'total_inflow': totals.total_inflow,
            'total_absorbed': totals.total_absorbed,
            'total_outflow': totals.total_outflow}

    @classmethod
    def from_dict(cls, vals):
        """ Builds a network from a dict like those emitted by `to_dict`.

        Totals in `vals` are ignored; they are always recomputed.
        """
        return cls(
            vals.get('name', ''),
            nodes=[FlowNode.from_dict(node) for node in vals.get('nodes', [])],
            allocations=[
                Allocation.from_dict(allocation)
                for allocation in vals.get('allocations', [])],
            overflow_node_id=vals.get('overflow_node_id'))

def read_network(filename):
    """ Reads a network from a JSON file.

    The file holds a dict in the format emitted by
    `FlowNetwork.to_dict`. Relative paths are resolved from
    `flowfunding/data/`. Unbounded ceilings may be written as the JSON
    constant `Infinity`.
    """
    # Node ids like "1" must stay str:
    reader = ValueReader(filename, numeric_convert=False)
    return FlowNetwork.from_dict(reader.values)
