""" A package for propagating flow through a network.

Provides the propagation engine, the overflow sink manager, particle
seeding for animation and the structured events reported by the engine.
"""

# See flowfunding.__init__.py for version, author, and licensing info.

__all__ = ['engine', 'overflow', 'particles', 'events']

from flowfunding.propagation.engine import (
    FlowPropagator, PropagationResult, propagate, iterate)
from flowfunding.propagation.overflow import (
    OverflowStrategy, OverflowChange, needs_overflow_node,
    unallocated_outflow, allocated_inflow, SET_ONCE_KEY, RECOMPUTE_KEY,
    OVERFLOW_CREATED, OVERFLOW_REMOVED, OVERFLOW_UPDATED)
from flowfunding.propagation.particles import (
    FlowParticle, generate_flow_particles, update_flow_particles,
    particle_count)
from flowfunding.propagation.events import (
    PropagationEvent, log_event, describe_network, format_flow,
    format_percentage, EVENT_STARTED, EVENT_ITERATION, EVENT_FINISHED,
    EVENT_OVERFLOW_CREATED, EVENT_OVERFLOW_REMOVED, EVENT_OVERFLOW_UPDATED)
