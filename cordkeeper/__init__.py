"""Cordkeeper: track firewood burned over the heating season."""

__version__ = "0.1.0"

__all__ = ["__version__"]
