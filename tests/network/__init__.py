""" Unit tests for the `flowfunding.network` package. """
