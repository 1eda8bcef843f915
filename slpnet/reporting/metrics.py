"""Step-level metric sinks for perceptron runs."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Dict, List, Mapping, Sequence


def _numeric(metrics: Mapping[str, object]) -> Dict[str, float]:
    return {
        k: float(v)
        for k, v in metrics.items()
        if isinstance(v, (int, float)) and not isinstance(v, bool)
    }


class JsonlSink:
    """One JSON record per logged learning step.

    Every record carries the run ``context`` (training-set shape, activation,
    scalar type) next to the step metrics so that a single line can be read
    without the manifest.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        split: str = "train",
        seed: int | None = None,
        context: Mapping[str, object] | None = None,
    ) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.split = split
        self.seed = seed
        self.context = dict(context or {})

    def on_step(self, step: int, metrics: Mapping[str, float]) -> None:
        record: Dict[str, object] = {"step": int(step), "split": self.split, "seed": self.seed}
        record.update(self.context)
        record.update(_numeric(metrics))
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")

    __call__ = on_step


class CsvSink:
    """Step metrics as CSV.

    The columns are ``step`` followed by ``columns`` when given, otherwise by
    the metric names of the first logged step. Later keys outside that header
    are dropped.
    """

    def __init__(self, path: str | Path, *, columns: Sequence[str] = ()) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.columns: List[str] = ["step", *columns] if columns else []
        if self.columns:
            self._write_header()

    def _write_header(self) -> None:
        with self.path.open("w", encoding="utf-8", newline="") as handle:
            csv.writer(handle).writerow(self.columns)

    def on_step(self, step: int, metrics: Mapping[str, float]) -> None:
        row = {"step": int(step), **_numeric(metrics)}
        if not self.columns:
            self.columns = list(row)
            self._write_header()
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=self.columns, extrasaction="ignore")
            writer.writerow(row)

    __call__ = on_step
