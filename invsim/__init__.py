"""Historical investment return simulator."""

__version__ = "0.1.0"
