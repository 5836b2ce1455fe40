"""Substrate Tools - The introspection operations substrate can run."""

from .base import Tool

__all__ = [
    "Tool",
]
