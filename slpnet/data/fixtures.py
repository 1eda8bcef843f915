"""In-memory datasets that need no files or network access."""

from __future__ import annotations

import numpy as np

from .registry import Dataset, register_dataset
from .utils import add_bias_column, seed_everything

# Two setosa and two virginica rows from Fisher's iris data.
IRIS4_SAMPLES = (
    (5.1, 3.5, 1.4, 0.2),
    (4.9, 3.0, 1.4, 0.2),
    (6.2, 3.4, 5.4, 2.3),
    (5.9, 3.0, 5.1, 1.8),
)
IRIS4_OUTCOMES = (0.0, 0.0, 1.0, 1.0)


@register_dataset("iris4")
def make_iris4(*, dtype: str = "float32", **_: object) -> Dataset:
    """The four-sample, four-feature iris fixture."""

    return Dataset(
        name="iris4",
        samples=np.array(IRIS4_SAMPLES, dtype=dtype),
        outcomes=np.array(IRIS4_OUTCOMES, dtype=dtype),
        provenance={"type": "fixture", "rows": len(IRIS4_SAMPLES)},
    )


@register_dataset("separable")
def make_separable(
    *,
    n_samples: int = 64,
    n_features: int = 2,
    separation: float = 2.0,
    seed: int = 0,
    bias: bool = True,
    negative_label: float = 0.0,
    dtype: str = "float32",
    **_: object,
) -> Dataset:
    """Two Gaussian blobs centred at ``-separation`` and ``+separation``."""

    if n_samples < 2:
        raise ValueError(f"n_samples must be at least 2, got {n_samples}")
    rng = seed_everything(seed)
    half = n_samples // 2
    negatives = rng.standard_normal((half, n_features)) - separation
    positives = rng.standard_normal((n_samples - half, n_features)) + separation
    samples = np.vstack([negatives, positives])
    outcomes = np.concatenate(
        [np.full(half, negative_label), np.ones(n_samples - half)]
    )
    order = rng.permutation(n_samples)
    samples = samples[order].astype(dtype)
    outcomes = outcomes[order].astype(dtype)
    if bias:
        samples = add_bias_column(samples)

    return Dataset(
        name="separable",
        samples=samples,
        outcomes=outcomes,
        provenance={
            "type": "synthetic",
            "n_samples": n_samples,
            "n_features": n_features,
            "separation": separation,
            "seed": seed,
            "bias": bias,
            "negative_label": negative_label,
        },
    )


__all__ = ["IRIS4_OUTCOMES", "IRIS4_SAMPLES", "make_iris4", "make_separable"]
