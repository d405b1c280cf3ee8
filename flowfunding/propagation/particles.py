""" Seeds and animates particles that visualize flow along allocations.

Particles are plain data for a renderer. They are derived from a
propagation result and never feed back into it.
"""

import math
from dataclasses import dataclass, replace
from flowfunding.settings import Settings

@dataclass
class FlowParticle:
    """ A particle travelling along an allocation arrow.

    Attributes:
        id (str): A unique identifier.
        allocation_id (str): The allocation the particle travels along.
            Particles headed for the overflow sink use a virtual id of
            the form `virtual_<node id>_overflow`.
        progress (float): Position along the arrow, in [0, 1).
        amount (float): The flow this particle represents.
        speed (float): Progress made per frame.
    """
    # pylint: disable=invalid-name
    id: str
    allocation_id: str
    progress: float
    amount: float
    speed: float

def particle_count(flow, flow_unit, max_count):
    """ Returns `floor(flow / flow_unit)`, clamped to [1, `max_count`]. """
    return min(max_count, max(1, int(math.floor(flow / flow_unit))))

def generate_flow_particles(network, settings=None):
    """ Seeds particles in proportion to the flow along each allocation.

    Each allocation whose source has outflow gets evenly-spaced
    particles. If the network has an overflow sink, each node sending
    outflow to it also gets particles along a virtual allocation.

    Args:
        network (FlowNetwork): A network after propagation.
        settings (Settings): Provides the particle parameters.
            Optional; defaults to `Settings()`.

    Returns:
        list[FlowParticle]: The seeded particles.
    """
    if settings is None:
        settings = Settings()

    particles = []
    for allocation in network.allocations:
        source = network.node(allocation.source_node_id)
        if source.outflow <= 0:
            continue
        flow = source.outflow * allocation.percentage
        count = particle_count(
            flow, settings.particle_flow_unit, settings.max_particles)
        speed = (
            settings.particle_base_speed +
            flow / settings.particle_speed_divisor)
        for i in range(count):
            particles.append(FlowParticle(
                'particle_' + str(len(particles)), allocation.id,
                i / count, flow / count, speed))

    if network.overflow_node_id is None:
        return particles

    for node in network.nodes:
        if (
                node.is_overflow_sink or node.outflow <= 0
                or network.has_outgoing_allocations(node.id)):
            continue
        count = particle_count(
            node.outflow, settings.overflow_particle_flow_unit,
            settings.max_overflow_particles)
        for i in range(count):
            particles.append(FlowParticle(
                'particle_overflow_' + str(len(particles)),
                'virtual_' + str(node.id) + '_overflow',
                i / count, node.outflow / count,
                settings.particle_base_speed))
    return particles

def update_flow_particles(particles):
    """ Advances each particle by its speed for one frame.

    Particles that reach the end of their arrow restart at its
    beginning.

    Returns:
        list[FlowParticle]: New particles; the inputs are unchanged.
    """
    updated = []
    for particle in particles:
        progress = particle.progress + particle.speed
        if progress >= 1.0:
            progress = 0
        updated.append(replace(particle, progress=progress))
    return updated
