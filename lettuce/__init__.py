"""An in-memory key-value and list store served over a Redis-style protocol."""

__version__ = "0.1.0"
__all__ = ["__version__"]