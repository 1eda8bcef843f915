"""Dataset registry for SLPNet training runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, MutableMapping

import numpy as np

from ..core.learn import DimensionMismatch
from ..core.types import Array


@dataclass(frozen=True)
class Dataset:
    """A full-batch training set.

    Attributes
    ----------
    name:
        Registry identifier the dataset was built from.
    samples:
        Matrix of shape ``(n_samples, n_features)``.
    outcomes:
        Target vector of length ``n_samples``.
    provenance:
        Free-form metadata recorded in the run manifest so a run can be
        reproduced.
    """

    name: str
    samples: Array
    outcomes: Array
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_samples(self) -> int:
        return int(self.samples.shape[0])

    @property
    def n_features(self) -> int:
        return int(self.samples.shape[1])

    def astype(self, dtype: str | np.dtype) -> "Dataset":
        """Return a copy with samples and outcomes cast to ``dtype``."""

        return Dataset(
            name=self.name,
            samples=np.ascontiguousarray(self.samples, dtype=dtype),
            outcomes=np.ascontiguousarray(self.outcomes, dtype=dtype),
            provenance=dict(self.provenance),
        )


DatasetFactory = Callable[..., Dataset]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory, either directly or as a decorator::

        @register_dataset("iris4")
        def make_iris4(**kwargs):
            ...
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(name: str, /, **options: Any) -> Dataset:
    """Build the dataset registered as ``name`` with ``options``."""

    if name not in _REGISTRY:
        available = ", ".join(available_datasets())
        raise KeyError(f"Unknown dataset: {name}. Available datasets: {available}")
    dataset = _REGISTRY[name](**options)
    _validate(dataset)
    return dataset


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate(dataset: Dataset) -> None:
    if dataset.samples.ndim != 2:
        raise DimensionMismatch("samples.ndim", 2, dataset.samples.ndim)
    if dataset.outcomes.ndim != 1:
        raise DimensionMismatch("outcomes.ndim", 1, dataset.outcomes.ndim)
    if dataset.outcomes.shape[0] != dataset.samples.shape[0]:
        raise DimensionMismatch(
            "len(outcomes)", dataset.samples.shape[0], dataset.outcomes.shape[0]
        )
    if dataset.samples.shape[0] == 0:
        raise ValueError(f"Dataset {dataset.name!r} has no samples")


def resolve_path(path: str | Path) -> Path:
    resolved = Path(path).expanduser()
    if not resolved.exists():
        raise FileNotFoundError(f"Dataset file not found: {resolved}")
    return resolved


__all__ = [
    "Dataset",
    "available_datasets",
    "get_dataset",
    "register_dataset",
    "resolve_path",
]
