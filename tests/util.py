""" Provides convenience classes and methods for testing. """

import unittest
from flowfunding import (
    FlowNetwork, FlowNode, Allocation)

# How many digits to round results to:
PLACES_PRECISION = 4

def linear_network():
    """ Alice -> Bob -> Carol, with 100 flow entering at Alice. """
    return FlowNetwork(
        'Linear',
        nodes=[
            FlowNode('alice', 'Alice', 10, 50, external_flow=100),
            FlowNode('bob', 'Bob', 10, 30),
            FlowNode('carol', 'Carol', 10, 40)],
        allocations=[
            Allocation('a1', 'alice', 'bob', 1.0),
            Allocation('a2', 'bob', 'carol', 1.0)])

def split_network():
    """ A source split 60/40 between two projects feeding a commons. """
    return FlowNetwork(
        'Split',
        nodes=[
            FlowNode('source', 'Source', 10, 20, external_flow=100),
            FlowNode('project_a', 'Project A', 15, 40),
            FlowNode('project_b', 'Project B', 15, 40),
            FlowNode('commons', 'Commons', 10, 30)],
        allocations=[
            Allocation('s_a', 'source', 'project_a', 0.6),
            Allocation('s_b', 'source', 'project_b', 0.4),
            Allocation('a_c', 'project_a', 'commons', 1.0),
            Allocation('b_c', 'project_b', 'commons', 1.0)])

def lone_network(external_flow=200, max_absorption=20):
    """ A single node with no allocations. """
    return FlowNetwork(
        'Lone',
        nodes=[FlowNode(
            'lone', 'Lone', 0, max_absorption, external_flow=external_flow)])

def feed(network):
    """ Gives each node its external flow as inflow and updates it. """
    for node in network.nodes:
        node.inflow = node.external_flow
        node.update_properties()
    return network

class EventRecorder(object):
    """ An observer that keeps every event passed to it. """

    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    def kinds(self):
        """ The `kind` of each recorded event, in order. """
        return [event.kind for event in self.events]

class TestCaseFlows(unittest.TestCase):
    """ A test case with assertions for node state. """

    def assertNode(
            self, node, inflow=None, absorbed=None, outflow=None,
            status=None, places=PLACES_PRECISION):
        """ Checks each of `node`'s computed properties that is given. """
        # pylint: disable=invalid-name,too-many-arguments
        # The naming here uses the style of unittest `assert*` methods.
        if inflow is not None:
            self.assertAlmostEqual(node.inflow, inflow, places=places)
        if absorbed is not None:
            self.assertAlmostEqual(node.absorbed, absorbed, places=places)
        if outflow is not None:
            self.assertAlmostEqual(node.outflow, outflow, places=places)
        if status is not None:
            self.assertEqual(node.status, status)

    def assertConserved(self, network, places=9):
        """ Checks `absorbed + outflow == inflow` for every node. """
        # pylint: disable=invalid-name
        for node in network.nodes:
            self.assertAlmostEqual(
                node.absorbed + node.outflow, node.inflow, places=places)
            self.assertGreaterEqual(node.absorbed, 0)
            self.assertLessEqual(node.absorbed, node.max_absorption)
