""" Exceptions raised by flow networks and their editing operations.

Non-convergence of the propagation engine is not represented here: it
is a normal outcome, reported via `PropagationResult.converged`.
"""

class FlowNetworkError(Exception):
    """ Base class for errors raised by this package. """

class DanglingReferenceError(FlowNetworkError, KeyError):
    """ A node or allocation id does not refer to anything in the network.

    Raised, for example, when an allocation names a source or target
    node that isn't in the network.
    """

    def __str__(self):
        # KeyError quotes its message; show it plainly instead.
        return Exception.__str__(self)

class DuplicateIdError(FlowNetworkError, ValueError):
    """ A node or allocation id is already in use. """

class InvalidAllocationError(FlowNetworkError, ValueError):
    """ An allocation is degenerate (e.g. a node allocating to itself). """

class InvalidPercentageError(InvalidAllocationError):
    """ An allocation percentage is NaN or outside of [0, 1]. """

class InvalidFlowError(FlowNetworkError, ValueError):
    """ A flow value is NaN or negative. """
