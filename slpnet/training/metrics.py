"""Metric helpers for perceptron training runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping

import numpy as np

from ..core.types import Array

MetricFn = Callable[[Array, Array], float]


@dataclass(frozen=True)
class MetricResult:
    name: str
    value: float


def mse(pred: Array, outcomes: Array) -> float:
    diff = np.asarray(outcomes, dtype=np.float64) - np.asarray(pred, dtype=np.float64)
    return float(np.mean(np.square(diff)))


def mae(pred: Array, outcomes: Array) -> float:
    diff = np.asarray(outcomes, dtype=np.float64) - np.asarray(pred, dtype=np.float64)
    return float(np.mean(np.abs(diff)))


def accuracy(pred: Array, outcomes: Array, threshold: float = 0.5) -> float:
    """Fraction of samples whose thresholded prediction matches the outcome."""

    pred_label = np.asarray(pred) >= threshold
    true_label = np.asarray(outcomes) >= threshold
    return float(np.mean(pred_label == true_label))


def binary_cross_entropy(pred: Array, outcomes: Array) -> float:
    eps = 1e-9
    p = np.clip(np.asarray(pred, dtype=np.float64), eps, 1.0 - eps)
    y = np.asarray(outcomes, dtype=np.float64)
    return float(-np.mean(y * np.log(p) + (1.0 - y) * np.log(1.0 - p)))


_METRICS: Dict[str, MetricFn] = {
    "loss": mse,
    "mse": mse,
    "mae": mae,
    "accuracy": accuracy,
    "bce": binary_cross_entropy,
}


def default_metrics() -> List[str]:
    return ["loss", "accuracy"]


def available_metrics() -> List[str]:
    return sorted(_METRICS)


def compute_metric(name: str, pred: Array, outcomes: Array) -> MetricResult:
    key = name.lower()
    if key not in _METRICS:
        raise KeyError(f"Unknown metric: {name}")
    return MetricResult(name=key, value=_METRICS[key](pred, outcomes))


def compute_metrics(names: Iterable[str], pred: Array, outcomes: Array) -> Mapping[str, float]:
    results: Dict[str, float] = {}
    for name in names:
        metric = compute_metric(name, pred, outcomes)
        results[metric.name] = metric.value
    return results


__all__ = [
    "MetricResult",
    "accuracy",
    "available_metrics",
    "binary_cross_entropy",
    "compute_metrics",
    "default_metrics",
    "mae",
    "mse",
]
