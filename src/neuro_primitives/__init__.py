"""Neurobiological primitive estimation from life-event logs."""

__version__ = "0.1.0"
