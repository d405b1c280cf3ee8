""" Unit tests for the `flowfunding.utility` package. """
