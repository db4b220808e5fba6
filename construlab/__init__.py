"""Construlab Pro — construction materials estimator service."""

__version__ = "1.0.0"
