""" This module provides user-modifiable settings for the application.

It provides the `Settings` class, which exposes the parameters of the
propagation engine, the overflow sink and particle seeding as
attributes with sensible defaults.
"""

from flowfunding.utility.value_reader import (
    ValueReader, ValueReaderAttribute as Attr)

FILENAME_DEFAULT = 'settings.json'

class Settings(ValueReader):
    """ Container for variables used to control application settings.

    All settings are exposed as attributes of `Settings` objects. For
    example, `Settings().max_iterations` will return the value of the
    `'max_iterations'` key in `data/settings.json`.

    Each attribute has a default value, used when a value isn't read in
    from file (and `use_defaults` is True). Settings can also be
    overridden by keyword argument, which is handy in tests:
    `Settings(max_iterations=5)`.

    By default, this class reads from `flowfunding/data/settings.json`.
    All relative paths are resolved from `flowfunding/data`, so if you
    want to open a file elsewhere use an absolute path!

    Arguments:
        filename (str): The filename of a JSON file to read.
            The file must be UTF-8 encoded.
            Optional. Defaults to `flowfunding/data/settings.json`.
        numeric_convert (bool): If True, any float-convertible str
            keys or values will be converted to a numeric type on read.
            Optional. Defaults to True.
        use_defaults (bool): If True, any attribute which doesn't have
            a value read in from file will return its default value.
            Optional. Defaults to True.
        **overrides (dict[str, Any]): Values that take precedence over
            anything read from file.

    Attributes:
        max_iterations (int): Upper bound on propagation iterations.
            Defaults to 100.
        convergence_threshold (float): Propagation converges once the
            largest per-node change in inflow is below this value.
            Defaults to 0.01.
        overflow_threshold (float): A node needs the overflow sink if
            its unallocated outflow exceeds this value.
            Defaults to 0.01.
        overflow_strategy (str): Key of the `OverflowStrategy` method
            that manages the overflow sink. Defaults to 'Set once'.
        overflow_node_position (list[float]): The `(x, y)` position
            given to a newly-created overflow sink.
            Defaults to `[600, 300]`.
        particle_flow_unit (float): Flow represented by one particle on
            an allocation. Defaults to 10.
        max_particles (int): Most particles seeded per allocation.
            Defaults to 10.
        overflow_particle_flow_unit (float): Flow represented by one
            particle headed to the overflow sink. Defaults to 20.
        max_overflow_particles (int): Most particles seeded per node
            for flow headed to the overflow sink. Defaults to 5.
        particle_base_speed (float): Speed of a particle carrying no
            flow, as a fraction of an edge per frame. Defaults to 0.01.
        particle_speed_divisor (float): Particles speed up by
            `flow / particle_speed_divisor`. Defaults to 1000.
    """

    # Propagation engine
    max_iterations = Attr(100)
    convergence_threshold = Attr(0.01)

    # Overflow sink
    overflow_threshold = Attr(0.01)
    overflow_strategy = Attr('Set once')
    overflow_node_position = Attr([600, 300])

    # Particle seeding
    particle_flow_unit = Attr(10)
    max_particles = Attr(10)
    overflow_particle_flow_unit = Attr(20)
    max_overflow_particles = Attr(5)
    particle_base_speed = Attr(0.01)
    particle_speed_divisor = Attr(1000)

    def __init__(
            self, filename=None, *,
            numeric_convert=True, use_defaults=True, **overrides):

        if filename is None:
            filename = FILENAME_DEFAULT

        super().__init__(
            filename,
            numeric_convert=numeric_convert,
            use_defaults=use_defaults)

        for key, value in overrides.items():
            if not isinstance(getattr(type(self), key, None), Attr):
                raise AttributeError(
                    "'" + key + "' is not a recognized setting.")
            setattr(self, key, value)
