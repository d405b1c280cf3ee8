""" Lets a class offer alternative behaviours selectable by name.

Used by `OverflowStrategy`, whose behaviour is chosen by a key read
from settings.
"""

from functools import partial

_REGISTERED_METHOD_ATTR = '_registered_method'
_REGISTERED_METHOD_KEY = '_registered_method_key'

def registered_method_named(key):
    """ Registers a method under `key` instead of its function name. """
    return partial(registered_method, key=key)

def registered_method(func, key=None):
    """ Marks `func` as a selectable behaviour of its `MethodRegister`. """
    setattr(func, _REGISTERED_METHOD_ATTR, True)
    if key is None:
        key = func.__name__
    setattr(func, _REGISTERED_METHOD_KEY, key)
    return func

class MethodRegister:
    """ A class with user-selectable, registered methods.

    Subclasses decorate alternative behaviours with `registered_method`
    or `registered_method_named`, then dispatch to the one chosen by
    client code through `call_registered_method`. A behaviour can be
    chosen by its key (e.g. a name read from a settings file) or by a
    reference to the method itself.

    Example:
        ```
        class Sink(MethodRegister):

            @registered_method_named("Keep")
            def keep(self, network):
                return network

        Sink().call_registered_method("Keep", network)
        Sink().call_registered_method(Sink.keep, network)
        ```
    """

    def __init_subclass__(cls, **kwargs):
        """ Builds this subclass's registry of selectable methods. """
        super().__init_subclass__(**kwargs)
        # Each subclass gets its own registry, seeded with any methods
        # registered by its parents:
        cls.registered_methods = dict(getattr(cls, 'registered_methods', {}))
        for name in dir(cls):
            attr = getattr(cls, name)
            if callable(attr) and getattr(attr, _REGISTERED_METHOD_ATTR, False):
                key = getattr(attr, _REGISTERED_METHOD_KEY, name)
                cls.registered_methods[key] = attr

    @classmethod
    def registered_method_key(cls, method):
        """ Returns the registry key for `method` (a key or a method).

        Raises:
            KeyError: `method` is not a registered method or a key for one.
        """
        if isinstance(method, str) and method in cls.registered_methods:
            return method
        if hasattr(method, _REGISTERED_METHOD_KEY):
            key = getattr(method, _REGISTERED_METHOD_KEY)
            if key in cls.registered_methods:
                return key
        name = getattr(method, '__name__', str(method))
        raise KeyError(
            "Parameter \"" + name +
            "\" does not name a registered method.")

    def call_registered_method(self, method, *args, **kwargs):
        """ Calls `method` decorated by `registered_method`[`_named`].

        `method` may be a registry key, an unbound (class) method, or a
        bound (instance) method.

        Raises:
            KeyError: `method` is not a registered method or a key for one.
        """
        key = self.registered_method_key(method)
        # Registered methods are stored unbound, so pass `self`:
        return self.registered_methods[key](self, *args, **kwargs)
