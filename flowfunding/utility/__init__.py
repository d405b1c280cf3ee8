""" A package with various self-contained methods and classes.

These are used throughout the application and provide numerical
tolerances, reading values from JSON files, and user-selectable
(registered) methods.
"""

# See flowfunding.__init__.py for version, author, and licensing info.

__all__ = ['precision', 'value_reader', 'register']

from flowfunding.utility import precision, value_reader, register
from flowfunding.utility.precision import (
    PERCENTAGE_TOLERANCE, STATUS_TOLERANCE, FLOW_TOLERANCE, INFINITY,
    clamp, is_nan, within_tolerance)
from flowfunding.utility.value_reader import (
    ValueReader, ValueReaderAttribute, resolve_data_path)
from flowfunding.utility.register import (
    MethodRegister, registered_method, registered_method_named)
