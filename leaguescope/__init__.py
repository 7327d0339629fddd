"""Scope resolution and scoped list controllers for league administration clients."""

__version__ = "0.1.0"
