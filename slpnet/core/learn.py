"""The single-layer perceptron learning step.

``learn`` performs one gradient-descent update in place::

    pred  = activate(X @ W)
    delta = (outcomes - pred) * activate_d(pred)
    W    += X.T @ delta

The learning rate is an implicit ``1.0``.  ``train`` repeats the step a fixed
number of times, threading ``W`` and ``pred`` through each iteration.
"""

from __future__ import annotations

import numbers

import numpy as np

from .activations import Activator
from .types import Array


class DimensionMismatch(ValueError):
    """Raised when the shapes of the learning inputs are inconsistent."""

    def __init__(self, name: str, expected: object, actual: object) -> None:
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(f"{name}: expected {expected}, got {actual}")


class ScalarTypeMismatch(TypeError):
    """Raised when the learning inputs do not share one floating dtype."""


def _require_ndarray(name: str, value: object, *, writeable: bool = False) -> Array:
    if not isinstance(value, np.ndarray):
        raise TypeError(f"{name} must be a numpy.ndarray, got {type(value).__name__}")
    if writeable and not value.flags.writeable:
        raise TypeError(f"{name} must be writeable; it is updated in place")
    return value


def check_inputs(X: Array, W: Array, pred: Array, outcomes: Array) -> None:
    """Validate shapes and dtypes of a learning call without touching the data."""

    _require_ndarray("X", X)
    _require_ndarray("W", W, writeable=True)
    _require_ndarray("pred", pred, writeable=True)
    _require_ndarray("outcomes", outcomes)

    if X.ndim != 2:
        raise DimensionMismatch("X.ndim", 2, X.ndim)
    for name, vec in (("W", W), ("pred", pred), ("outcomes", outcomes)):
        if vec.ndim != 1:
            raise DimensionMismatch(f"{name}.ndim", 1, vec.ndim)

    n_samples, n_features = X.shape
    if W.shape[0] != n_features:
        raise DimensionMismatch("len(W)", n_features, W.shape[0])
    if pred.shape[0] != n_samples:
        raise DimensionMismatch("len(pred)", n_samples, pred.shape[0])
    if outcomes.shape[0] != n_samples:
        raise DimensionMismatch("len(outcomes)", n_samples, outcomes.shape[0])

    dtype = X.dtype
    if not np.issubdtype(dtype, np.floating):
        raise ScalarTypeMismatch(f"X must have a floating dtype, got {dtype}")
    for name, arr in (("W", W), ("pred", pred), ("outcomes", outcomes)):
        if arr.dtype != dtype:
            raise ScalarTypeMismatch(f"{name} has dtype {arr.dtype} but X has {dtype}")


def _step(X: Array, W: Array, pred: Array, outcomes: Array, activator: Activator) -> None:
    pred[...] = activator.activate(X @ W)
    error = outcomes - pred
    delta = error * activator.activate_d(pred)
    W += X.T @ delta


def learn(
    X: Array,
    W: Array,
    pred: Array,
    outcomes: Array,
    activator: Activator,
) -> None:
    """Perform a single learning iteration.

    Parameters
    ----------
    X:
        Samples matrix of shape ``(n_samples, n_features)``; read only.
    W:
        Weight vector of length ``n_features``; updated in place.
    pred:
        Prediction buffer of length ``n_samples``; overwritten with
        ``activator.activate(X @ W)`` for the weights *before* the update.
    outcomes:
        True outcomes of length ``n_samples``; read only.
    activator:
        Any object providing ``activate`` and ``activate_d``.

    Raises
    ------
    DimensionMismatch
        If the shapes are inconsistent.  Nothing is mutated.
    ScalarTypeMismatch
        If the arrays do not share a single floating dtype.
    """

    check_inputs(X, W, pred, outcomes)
    _step(X, W, pred, outcomes, activator)


def train(
    X: Array,
    W: Array,
    pred: Array,
    outcomes: Array,
    activator: Activator,
    n: int,
) -> None:
    """Perform ``n`` learning iterations; ``n == 0`` leaves ``W`` and ``pred`` alone."""

    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise TypeError(f"Iteration count must be an integer, got {type(n).__name__}")
    if n < 0:
        raise ValueError(f"Iteration count must be non-negative, got {n}")
    check_inputs(X, W, pred, outcomes)
    for _ in range(int(n)):
        _step(X, W, pred, outcomes, activator)


__all__ = [
    "DimensionMismatch",
    "ScalarTypeMismatch",
    "check_inputs",
    "learn",
    "train",
]
