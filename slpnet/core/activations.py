"""Activation strategies for SLPNet.

An activator supplies an elementwise nonlinearity ``activate`` and its first
derivative ``activate_d``.  The derivative is expressed in terms of the
*activated* value, so callers must pass the output of ``activate`` to
``activate_d``, never the pre-activation input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Protocol

import numpy as np

from .types import Array


class Activator(Protocol):
    """Protocol implemented by activation strategies."""

    def activate(self, z: Array) -> Array:
        """Apply the activation elementwise to ``z``."""

    def activate_d(self, a: Array) -> Array:
        """Return the derivative at the already activated values ``a``."""


@dataclass(frozen=True)
class Sigmoid:
    """Logistic function ``1 / (1 + exp(-z))``.

    The exponential is evaluated in at least double precision and the result
    cast back to the input's floating dtype.
    """

    def activate(self, z: Array) -> Array:
        z = np.asarray(z)
        wide = np.promote_types(z.dtype, np.float64)
        # exp(-z) overflows to inf for very negative z and the result saturates to 0.
        with np.errstate(over="ignore", under="ignore"):
            out = 1.0 / (1.0 + np.exp(-z.astype(wide)))
        if np.issubdtype(z.dtype, np.floating):
            return out.astype(z.dtype, copy=False)
        return out

    def activate_d(self, a: Array) -> Array:
        a = np.asarray(a)
        return a * (a.dtype.type(1) - a)


@dataclass(frozen=True)
class Tanh:
    """Hyperbolic tangent; ``tanh'(z) = 1 - tanh(z)**2``."""

    def activate(self, z: Array) -> Array:
        return np.tanh(z)

    def activate_d(self, a: Array) -> Array:
        a = np.asarray(a)
        return a.dtype.type(1) - np.square(a)


@dataclass(frozen=True)
class ReLU:
    """Rectified linear unit; the slope is 1 wherever the output is positive."""

    def activate(self, z: Array) -> Array:
        z = np.asarray(z)
        return np.maximum(z, z.dtype.type(0))

    def activate_d(self, a: Array) -> Array:
        a = np.asarray(a)
        return (a > 0).astype(a.dtype)


@dataclass(frozen=True)
class Identity:
    """Linear activation, mostly useful for regression and testing."""

    def activate(self, z: Array) -> Array:
        return np.array(z, copy=True)

    def activate_d(self, a: Array) -> Array:
        return np.ones_like(a)


class ActivatorRegistry:
    """Central registry for activation strategies."""

    def __init__(self) -> None:
        self._registry: Dict[str, Activator] = {}

    def register(self, name: str, activator: Activator) -> None:
        for attr in ("activate", "activate_d"):
            if not callable(getattr(activator, attr, None)):
                raise TypeError(f"Activator {name!r} does not provide {attr}()")
        self._registry[name.lower()] = activator

    def get(self, name: str) -> Activator:
        key = name.lower()
        if key not in self._registry:
            available = ", ".join(self.names())
            raise KeyError(f"Unknown activation {name!r}. Available activations: {available}")
        return self._registry[key]

    def names(self) -> Iterable[str]:
        return sorted(self._registry)

    def name_of(self, activator: Activator) -> str:
        for name, registered in self._registry.items():
            if registered == activator:
                return name
        return type(activator).__name__.lower()


REGISTRY = ActivatorRegistry()
REGISTRY.register("sigmoid", Sigmoid())
# Alias used by the statistics literature
REGISTRY.register("logistic", Sigmoid())
REGISTRY.register("tanh", Tanh())
REGISTRY.register("relu", ReLU())
REGISTRY.register("identity", Identity())

__all__ = [
    "Activator",
    "ActivatorRegistry",
    "Identity",
    "REGISTRY",
    "ReLU",
    "Sigmoid",
    "Tanh",
]
