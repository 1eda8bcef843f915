"""Core numerical primitives for SLPNet."""

from . import activations, learn, model, types

__all__ = ["activations", "learn", "model", "types"]
