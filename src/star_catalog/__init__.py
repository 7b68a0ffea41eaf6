"""Reconcile FK5, BSC, Hipparcos and NGC 2000.0 into one binary star catalog."""

__version__ = "0.1.0"
