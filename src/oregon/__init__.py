"""Settlers of Oregon: rules engine and self-play tooling."""

__version__ = "1.0.0"
