"""Operational alerting engine for the rental back office."""

__version__ = "1.0.0"
