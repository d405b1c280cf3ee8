""" Unit tests for the `flowfunding` package. """
