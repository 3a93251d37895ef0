"""Performance review score calculation and review lifecycle engine."""

__version__ = "1.0.0"
