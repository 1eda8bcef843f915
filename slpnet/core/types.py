"""Core typing contracts for SLPNet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :meth:`slpnet.training.trainer.Trainer.run`."""

    steps: int
    metrics_path: str
    manifest_path: str = ""
    summary_path: str = ""
    final_pred: List[float] = field(default_factory=list)


@dataclass(frozen=True)
class ModelDescription:
    """Shape and numeric type of a single-layer perceptron."""

    n_features: int
    dtype: str
    activation: str

