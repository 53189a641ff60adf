"""Periodic status card for a peer-to-peer node."""

__version__ = "0.1.0"
