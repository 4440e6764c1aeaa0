"""Batch shareholding data extraction client for Refinitiv DataScope Select."""

__version__ = "1.0.0"
