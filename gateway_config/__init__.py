"""Helium gateway configuration GATT service."""
__version__ = "0.1.0"
