"""Reactive Brigandine character sheet with per-character durable storage."""

__version__ = "0.1.0"
