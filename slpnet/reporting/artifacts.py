"""Run manifest: what was trained, on which data, with which weights."""

from __future__ import annotations

import json
import platform
import subprocess
import time
from pathlib import Path
from typing import Mapping

import numpy as np

from ..core.types import Array


def git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except (OSError, subprocess.CalledProcessError):  # pragma: no cover - git may be unavailable
        return "unknown"


def describe_training_set(samples: Array, outcomes: Array) -> Mapping[str, object]:
    """Shape and outcome balance of a training set, as recorded in the manifest."""

    values, counts = np.unique(np.asarray(outcomes), return_counts=True)
    return {
        "n_samples": int(samples.shape[0]),
        "n_features": int(samples.shape[1]),
        "dtype": str(samples.dtype),
        "outcome_counts": {repr(float(v)): int(c) for v, c in zip(values, counts)},
    }


def write_manifest(
    path: str | Path,
    *,
    config: Mapping[str, object],
    dataset_provenance: Mapping[str, object],
    training_set: Mapping[str, object] | None = None,
    model: Mapping[str, object] | None = None,
    weights: Mapping[str, Array] | None = None,
) -> str:
    """Write ``manifest.json`` for a finished run.

    ``weights`` maps names (``initial``, ``final``) to weight vectors; they are
    stored as plain lists so a run can be compared without loading checkpoints.
    """

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    manifest = {
        "git_sha": git_sha(),
        "generated_at": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
        "config": config,
        "dataset": {**dict(dataset_provenance), **dict(training_set or {})},
        "model": dict(model or {}),
        "weights": {name: np.asarray(w).tolist() for name, w in (weights or {}).items()},
        "environment": {
            "python": platform.python_version(),
            "numpy": np.__version__,
        },
    }
    path.write_text(json.dumps(manifest, indent=2))
    return str(path)
