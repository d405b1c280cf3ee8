""" Unit tests for the `flowfunding.propagation` package. """
