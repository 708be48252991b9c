"""TotalCompMX - total compensation calculator for Mexico."""

__version__ = "0.1.0"
