"""Policies that choose actions for a seat."""

from .base import CallablePolicy, Policy
from .random_agent import RandomAgent

__all__ = ["CallablePolicy", "Policy", "RandomAgent"]
