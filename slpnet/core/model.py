"""Stateful single-layer perceptron built on :mod:`slpnet.core.learn`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

import numpy as np

from .activations import REGISTRY as ACTIVATIONS
from .activations import Activator, Sigmoid
from .learn import DimensionMismatch, learn, train
from .types import Array, ModelDescription


@dataclass
class Perceptron:
    """Weight vector plus the activation strategy used to train it."""

    n_features: int
    activator: Activator = field(default_factory=Sigmoid)
    dtype: str = "float32"
    init: str = "constant"
    init_value: float = 0.5
    seed: int = 0
    weights: Array = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.n_features <= 0:
            raise ValueError(f"n_features must be positive, got {self.n_features}")
        if not np.issubdtype(np.dtype(self.dtype), np.floating):
            raise TypeError(f"dtype must be floating point, got {self.dtype}")
        self.reset(self.seed)

    def describe(self) -> ModelDescription:
        return ModelDescription(
            n_features=int(self.n_features),
            dtype=np.dtype(self.dtype).name,
            activation=ACTIVATIONS.name_of(self.activator),
        )

    def reset(self, seed: int) -> None:
        dtype = np.dtype(self.dtype)
        if self.init == "constant":
            self.weights = np.full(self.n_features, self.init_value, dtype=dtype)
        elif self.init == "normal":
            rng = np.random.default_rng(seed)
            self.weights = (rng.standard_normal(self.n_features) * self.init_value).astype(dtype)
        else:
            raise ValueError(f"Unknown weight initialisation: {self.init}")

    def new_prediction_buffer(self, n_samples: int) -> Array:
        return np.zeros(n_samples, dtype=self.weights.dtype)

    def predict(self, samples: Array) -> Array:
        """Return ``activate(samples @ weights)`` without updating anything."""

        samples = np.asarray(samples, dtype=self.weights.dtype)
        if samples.ndim != 2 or samples.shape[1] != self.n_features:
            raise DimensionMismatch("samples.shape", f"(*, {self.n_features})", samples.shape)
        return self.activator.activate(samples @ self.weights)

    def step(self, samples: Array, outcomes: Array, pred: Array) -> None:
        learn(samples, self.weights, pred, outcomes, self.activator)

    def fit(self, samples: Array, outcomes: Array, n: int) -> Array:
        """Run ``n`` learning steps and return the last prediction buffer."""

        pred = self.new_prediction_buffer(np.shape(samples)[0])
        train(samples, self.weights, pred, outcomes, self.activator, n)
        return pred

    def state_dict(self) -> Mapping[str, Array]:
        return {"W": self.weights.copy()}

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        if "W" not in state:
            raise KeyError("Missing weight W in state dict")
        weights = np.asarray(state["W"], dtype=self.weights.dtype)
        if weights.shape != self.weights.shape:
            raise DimensionMismatch("W.shape", self.weights.shape, weights.shape)
        self.weights = weights.copy()

    def parameter_count(self) -> int:
        return int(self.weights.size)


__all__ = ["Perceptron"]
