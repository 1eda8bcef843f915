"""Deterministic summary of a run's ``metrics.jsonl``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, Mapping, Sequence

import numpy as np

# Integer run context written next to the metrics; not a learning curve.
_CONTEXT_KEYS = {"step", "seed", "n_samples", "n_features"}


def compute_auc(points: Sequence[float]) -> float:
    """Area under ``points`` along an implicit unit step axis (trapezoid rule)."""

    if len(points) < 2:
        return 0.0
    y = np.asarray(points, dtype=np.float64)
    return float(np.sum((y[1:] + y[:-1]) * 0.5))


def _metric_series(records: Iterable[Mapping[str, object]]) -> Mapping[str, list[float]]:
    series: dict[str, list[float]] = {}
    for record in records:
        for key, value in record.items():
            if key in _CONTEXT_KEYS or isinstance(value, bool):
                continue
            if isinstance(value, (int, float)):
                series.setdefault(key, []).append(float(value))
    return series


def summarise(records: Sequence[Mapping[str, object]], *, tail: int = 32) -> Mapping[str, object]:
    """Reduce step records to per-metric statistics and the best logged step.

    ``best`` is the logged step with the lowest ``loss``; ties keep the earliest
    step, matching the trainer's ``best.ckpt`` choice.
    """

    tail_window = min(tail, len(records)) if records else 0
    steps = [int(record.get("step", 0)) for record in records]
    summary: dict[str, Mapping[str, float]] = {}
    for name, values in _metric_series(records).items():
        arr = np.asarray(values, dtype=np.float64)
        summary[name] = {
            "first": float(arr[0]),
            "last": float(arr[-1]),
            "delta": float(arr[-1] - arr[0]),
            "min": float(np.min(arr)),
            "max": float(np.max(arr)),
            "mean": float(np.mean(arr)),
            "tail_auc": compute_auc(arr[-tail_window:].tolist()) if tail_window else 0.0,
        }

    best: dict[str, float] = {}
    losses = _metric_series(records).get("loss", [])
    if losses and len(losses) == len(steps):
        index = int(np.argmin(losses))
        best = {"step": steps[index], "loss": losses[index]}

    return {
        "version": 2,
        "records": len(records),
        "last_step": steps[-1] if steps else 0,
        "tail_window": tail_window,
        "best": best,
        "metrics": summary,
    }


def read_records(metrics_jsonl: str | Path) -> list[Mapping[str, object]]:
    path = Path(metrics_jsonl)
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


def write_summary(
    metrics_jsonl: str | Path, out_summary_json: str | Path, *, tail: int = 32
) -> str:
    """Write ``summary.json`` for ``metrics_jsonl``; identical runs give identical bytes."""

    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    records = read_records(metrics_jsonl)
    out_path.write_text(json.dumps(summarise(records, tail=tail), sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["compute_auc", "read_records", "summarise", "write_summary"]
