""" Unit tests for the overflow sink lifecycle. """

import unittest
from flowfunding import (
    FlowNetwork, FlowNode, propagate, create_allocation, delete_allocation,
    set_external_flow, OverflowStrategy, needs_overflow_node)
from flowfunding.network.node import OVERFLOW_NODE_ID
from flowfunding.propagation import (
    unallocated_outflow, OVERFLOW_CREATED, OVERFLOW_REMOVED,
    OVERFLOW_UPDATED, EVENT_OVERFLOW_CREATED, EVENT_OVERFLOW_REMOVED,
    EVENT_OVERFLOW_UPDATED)
from tests.util import (
    TestCaseFlows, EventRecorder, feed, lone_network, linear_network)

def sinks(network):
    """ Returns all overflow sinks in `network`. """
    return [node for node in network.nodes if node.is_overflow_sink]

class TestNeedsOverflowNode(unittest.TestCase):
    """ Tests `needs_overflow_node` and `unallocated_outflow`. """

    def test_unallocated(self):
        """ Test a node with outflow and no allocations. """
        network = feed(lone_network())
        self.assertTrue(needs_overflow_node(network))
        self.assertEqual(unallocated_outflow(network), 180)

    def test_below_threshold(self):
        """ Test that trivial outflow doesn't need a sink. """
        network = feed(lone_network(external_flow=20.005))
        self.assertFalse(needs_overflow_node(network))
        self.assertTrue(needs_overflow_node(network, threshold=0.001))

    def test_allocated(self):
        """ Test that allocated outflow doesn't need a sink. """
        network = linear_network()
        propagate(network, observer=EventRecorder())
        self.assertFalse(needs_overflow_node(network))
        self.assertEqual(unallocated_outflow(network), 0)

    def test_sink_ignored(self):
        """ Test that the sink itself never needs a sink. """
        network = FlowNetwork(nodes=[
            FlowNode('sink', is_overflow_sink=True, max_absorption=0)])
        network.node('sink').inflow = 50
        network.node('sink').update_properties()
        self.assertFalse(needs_overflow_node(network))
        self.assertEqual(unallocated_outflow(network), 0)

class TestOverflowLifecycle(TestCaseFlows):
    """ Tests inserting and removing the sink during propagation. """

    def setUp(self):
        self.recorder = EventRecorder()

    def test_insert(self):
        """ Test that unallocated excess creates a sink. """
        network = lone_network()
        result = propagate(network, observer=self.recorder)
        self.assertEqual(len(sinks(network)), 1)
        self.assertEqual(network.overflow_node_id, OVERFLOW_NODE_ID)
        sink = network.overflow_node
        self.assertNode(sink, inflow=180, absorbed=180, outflow=0)
        self.assertEqual(sink.position, (600, 300))
        self.assertIn(EVENT_OVERFLOW_CREATED, self.recorder.kinds())
        # The sink is included in the result's totals:
        self.assertAlmostEqual(result.totals.total_absorbed, 200)
        self.assertAlmostEqual(result.totals.total_outflow, 180)

    def test_insert_sums_nodes(self):
        """ Test that the sink collects from every unallocated node. """
        network = FlowNetwork(nodes=[
            FlowNode('x', max_absorption=0, external_flow=50),
            FlowNode('y', max_absorption=10, external_flow=40),
            FlowNode('z', max_absorption=100, external_flow=40)])
        propagate(network, observer=self.recorder)
        self.assertNode(network.overflow_node, inflow=80)

    def test_insert_ignores_allocated_nodes(self):
        """ Test that only unallocated outflow feeds the sink. """
        network = linear_network()
        network.node('carol').max_absorption = 5
        propagate(network, observer=self.recorder)
        # Only Carol's 15 excess is unallocated:
        self.assertNode(network.overflow_node, inflow=15)

    def test_remove(self):
        """ Test that allocating the excess removes the sink. """
        network = lone_network()
        propagate(network, observer=self.recorder)
        network.add_node(FlowNode('big', max_absorption=1000))
        create_allocation(network, 'lone', 'big', allocation_id='l_b')
        propagate(network, observer=self.recorder)
        self.assertEqual(sinks(network), [])
        self.assertIsNone(network.overflow_node_id)
        self.assertNode(network.node('big'), inflow=180)
        self.assertIn(EVENT_OVERFLOW_REMOVED, self.recorder.kinds())

    def test_remove_when_flow_drops(self):
        """ Test that the sink goes once there is no excess left. """
        network = lone_network()
        propagate(network, observer=self.recorder)
        set_external_flow(network, 'lone', 10)
        propagate(network, observer=self.recorder)
        self.assertIsNone(network.overflow_node_id)

    def test_kept_while_only_allocation_targets_it(self):
        """ Test a sink that receives a node's only allocation. """
        network = lone_network()
        propagate(network, observer=self.recorder)
        create_allocation(
            network, 'lone', OVERFLOW_NODE_ID, 1, allocation_id='to_sink')
        result = propagate(network, observer=self.recorder)
        self.assertEqual(network.overflow_node_id, OVERFLOW_NODE_ID)
        self.assertTrue(network.has_allocation('to_sink'))
        self.assertNode(network.overflow_node, inflow=180, absorbed=180)
        self.assertFalse(needs_overflow_node(network))
        # No flow goes missing from the totals:
        self.assertAlmostEqual(result.totals.total_absorbed, 200)
        self.assertNotIn(EVENT_OVERFLOW_REMOVED, self.recorder.kinds())

    def test_targeted_sink_stable(self):
        """ Test that repeated runs neither remove nor re-add the sink. """
        network = lone_network()
        propagate(network, observer=self.recorder)
        create_allocation(
            network, 'lone', OVERFLOW_NODE_ID, 1, allocation_id='to_sink')
        propagate(network, observer=self.recorder)
        first = network.to_dict()
        recorder = EventRecorder()
        propagate(network, observer=recorder)
        self.assertEqual(network.to_dict(), first)
        self.assertNotIn(EVENT_OVERFLOW_CREATED, recorder.kinds())
        self.assertNotIn(EVENT_OVERFLOW_REMOVED, recorder.kinds())

    def test_kept_while_shared_allocation_targets_it(self):
        """ Test a sink that receives part of a node's outflow. """
        network = lone_network()
        propagate(network, observer=self.recorder)
        network.add_node(FlowNode('other', max_absorption=1000))
        create_allocation(
            network, 'lone', OVERFLOW_NODE_ID, 1, allocation_id='to_sink')
        create_allocation(
            network, 'lone', 'other', 1, allocation_id='to_other')
        propagate(network, observer=self.recorder)
        self.assertEqual(network.overflow_node_id, OVERFLOW_NODE_ID)
        self.assertNode(network.overflow_node, inflow=90)
        self.assertNode(network.node('other'), inflow=90)
        self.assertAlmostEqual(network.allocation('to_other').percentage, 0.5)

    def test_removed_once_untargeted(self):
        """ Test that deleting the allocation to the sink frees it. """
        network = lone_network()
        propagate(network, observer=self.recorder)
        network.add_node(FlowNode('big', max_absorption=1000))
        create_allocation(
            network, 'lone', OVERFLOW_NODE_ID, 1, allocation_id='to_sink')
        create_allocation(network, 'lone', 'big', 1, allocation_id='to_big')
        propagate(network, observer=self.recorder)
        delete_allocation(network, 'to_sink')
        propagate(network, observer=self.recorder)
        self.assertIsNone(network.overflow_node_id)
        self.assertNode(network.node('big'), inflow=180)

    def test_reinsert(self):
        """ Test that a removed sink comes back when needed again. """
        network = lone_network()
        propagate(network, observer=self.recorder)
        network.add_node(FlowNode('big', max_absorption=1000))
        create_allocation(network, 'lone', 'big', allocation_id='l_b')
        propagate(network, observer=self.recorder)
        delete_allocation(network, 'l_b')
        propagate(network, observer=self.recorder)
        self.assertEqual(len(sinks(network)), 1)
        self.assertNode(network.overflow_node, inflow=180)

    def test_no_sink_needed(self):
        """ Test that no sink is created for a fully-allocated network. """
        network = linear_network()
        propagate(network, observer=self.recorder)
        self.assertEqual(sinks(network), [])
        self.assertNotIn(EVENT_OVERFLOW_CREATED, self.recorder.kinds())

    def test_id_collision(self):
        """ Test that a user node with the sink's id isn't clobbered. """
        network = FlowNetwork(nodes=[FlowNode(
            OVERFLOW_NODE_ID, max_absorption=0, external_flow=10)])
        propagate(network, observer=self.recorder)
        self.assertEqual(network.overflow_node_id, OVERFLOW_NODE_ID + '-2')
        self.assertFalse(network.node(OVERFLOW_NODE_ID).is_overflow_sink)

class TestSinkRefeeding(TestCaseFlows):
    """ Tests the "Set once" and "Recompute" strategies on later runs. """

    def test_set_once_not_refed(self):
        """ Test that a kept sink isn't refed under "Set once". """
        network = lone_network()
        propagate(network, observer=EventRecorder())
        recorder = EventRecorder()
        propagate(network, observer=recorder)
        self.assertEqual(len(sinks(network)), 1)
        # The sink took part in the run with no external flow:
        self.assertNode(network.overflow_node, inflow=0, absorbed=0)
        self.assertNotIn(EVENT_OVERFLOW_UPDATED, recorder.kinds())

    def test_recompute_refed(self):
        """ Test that a kept sink is refed under "Recompute". """
        network = lone_network()
        propagate(network, overflow_strategy='Recompute',
                  observer=EventRecorder())
        set_external_flow(network, 'lone', 300)
        recorder = EventRecorder()
        propagate(network, overflow_strategy='Recompute', observer=recorder)
        self.assertEqual(len(sinks(network)), 1)
        self.assertNode(network.overflow_node, inflow=280, absorbed=280)
        self.assertIn(EVENT_OVERFLOW_UPDATED, recorder.kinds())

    def test_recompute_keeps_allocated_flow(self):
        """ Test that refeeding counts flow allocated to the sink. """
        network = lone_network()
        propagate(network, overflow_strategy='Recompute',
                  observer=EventRecorder())
        create_allocation(
            network, 'lone', OVERFLOW_NODE_ID, 1, allocation_id='to_sink')
        propagate(network, overflow_strategy='Recompute',
                  observer=EventRecorder())
        self.assertNode(network.overflow_node, inflow=180, absorbed=180)

class TestOverflowStrategy(unittest.TestCase):
    """ Tests calling `OverflowStrategy` directly. """

    def setUp(self):
        self.network = feed(lone_network())

    def test_created(self):
        """ Test the change reported on insertion. """
        strategy = OverflowStrategy(position=(1, 2))
        change = strategy(self.network)
        self.assertEqual(change.action, OVERFLOW_CREATED)
        self.assertEqual(change.node_id, OVERFLOW_NODE_ID)
        self.assertEqual(change.inflow, 180)
        self.assertEqual(self.network.overflow_node.position, (1, 2))

    def test_noop(self):
        """ Test that "Set once" does nothing the second time. """
        strategy = OverflowStrategy()
        strategy(self.network)
        self.assertIsNone(strategy(self.network))

    def test_removed(self):
        """ Test the change reported on removal. """
        strategy = OverflowStrategy()
        strategy(self.network)
        self.network.node('lone').inflow = 0
        self.network.node('lone').update_properties()
        change = strategy(self.network)
        self.assertEqual(change.action, OVERFLOW_REMOVED)
        self.assertIsNone(self.network.overflow_node_id)

    def test_recompute_updated(self):
        """ Test the change reported when refeeding. """
        strategy = OverflowStrategy(OverflowStrategy.strategy_recompute)
        strategy(self.network)
        change = strategy(self.network)
        self.assertEqual(change.action, OVERFLOW_UPDATED)
        self.assertEqual(change.inflow, 180)

    def test_unknown_strategy(self):
        """ Test that unknown strategy keys are rejected. """
        with self.assertRaises(KeyError):
            OverflowStrategy('Never')

if __name__ == '__main__':
    unittest.main()
