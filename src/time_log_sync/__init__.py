"""Synchronize a local CSV time log with TimeCamp."""

__version__ = "0.1.0"
