""" Numerical tolerances used when comparing flows and percentages.

Used throughout the application, without any dependency on any other
modules from this project.
"""

import math

# Outgoing percentages within this distance of 1 are left untouched by
# the normalizer.
PERCENTAGE_TOLERANCE = 0.0001

# A node whose absorbed flow is within this distance of its minimum
# reports the `minimum` status.
STATUS_TOLERANCE = 0.01

# Default for both the convergence test and the overflow predicate.
FLOW_TOLERANCE = 0.01

INFINITY = float('inf')

def clamp(value, lower=None, upper=None):
    """ Restricts `value` to the closed interval [`lower`, `upper`].

    Either bound may be omitted (`None`), in which case `value` is
    unbounded on that side.

    Raises:
        ValueError: `value` is NaN.
    """
    if is_nan(value):
        raise ValueError('Cannot clamp NaN.')
    if lower is not None and value < lower:
        return lower
    if upper is not None and value > upper:
        return upper
    return value

def is_nan(value):
    """ Returns True if `value` is a NaN of any numeric type. """
    # Types that `math.isnan` rejects fall back to self-inequality:
    try:
        return math.isnan(value)
    except TypeError:
        return value != value  # pylint: disable=comparison-with-itself

def within_tolerance(first, second, tolerance):
    """ Returns True if `first` and `second` differ by less than `tolerance`. """
    return abs(first - second) < tolerance
