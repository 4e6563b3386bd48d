"""Advertising campaign billing calculator: pricing models and evaluation engine."""

__version__ = "0.1.0"
