"""Deterministic training loop around the perceptron learning step."""

from __future__ import annotations

import random
from pathlib import Path
from typing import Mapping, Sequence

import numpy as np

from ..core.learn import check_inputs
from ..core.model import Perceptron
from ..core.types import Array, RunResult
from .metrics import compute_metrics, default_metrics


class Trainer:
    """Repeat :func:`slpnet.core.learn.learn` on a model and report progress.

    Metrics logged at step ``k`` describe the prediction buffer written by that
    step, i.e. the model output for the weights *before* the ``k``-th update.
    """

    def __init__(
        self,
        model: Perceptron,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.model = model
        self.callbacks = list(callbacks or [])
        self.pred: Array | None = None

    def run(
        self,
        samples: Array,
        outcomes: Array,
        iterations: int,
        *,
        seed: int | None = None,
        determinism: bool = True,
        log_every: int = 1,
        metric_names: Sequence[str] | str = (),
        early_stopping_patience: int | None = None,
        checkpoint_dir: str | Path | None = None,
    ) -> RunResult:
        if iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {iterations}")
        if log_every < 1:
            raise ValueError(f"log_every must be at least 1, got {log_every}")

        if isinstance(metric_names, str):
            metric_names = [m.strip() for m in metric_names.split(",") if m.strip()]
        metric_names = list(metric_names) or default_metrics()
        if "loss" not in metric_names:
            metric_names.insert(0, "loss")

        if seed is not None:
            self._set_seed(seed, determinism)
            self.model.reset(seed)

        samples = np.asarray(samples, dtype=self.model.weights.dtype)
        outcomes = np.asarray(outcomes, dtype=self.model.weights.dtype)
        # The buffer starts as the prediction for the initial weights so that a
        # zero-iteration run still reports a defined output.
        pred = self.model.new_prediction_buffer(samples.shape[0])
        check_inputs(samples, self.model.weights, pred, outcomes)
        pred[...] = self.model.predict(samples)

        checkpoint_path = Path(checkpoint_dir) if checkpoint_dir is not None else None
        if checkpoint_path is not None:
            checkpoint_path.mkdir(parents=True, exist_ok=True)

        best_loss = float("inf")
        evals_no_improve = 0
        steps = 0
        for step in range(1, iterations + 1):
            # pred written by this step belongs to the weights before the update.
            evaluated = self.model.state_dict()
            self.model.step(samples, outcomes, pred)
            steps = step
            if step % log_every != 0 and step != iterations:
                continue

            metrics = dict(compute_metrics(metric_names, pred, outcomes))
            metrics["weight_norm"] = float(np.linalg.norm(evaluated["W"]))
            self._emit(step, metrics)
            current_loss = float(metrics["loss"])
            if current_loss < best_loss - 1e-12:
                best_loss = current_loss
                evals_no_improve = 0
                if checkpoint_path is not None:
                    self.save_checkpoint(checkpoint_path / "best.ckpt", evaluated)
            else:
                evals_no_improve += 1
                if early_stopping_patience and evals_no_improve >= early_stopping_patience:
                    break

        if checkpoint_path is not None:
            self.save_checkpoint(checkpoint_path / "last.ckpt", self.model.state_dict())
        self.pred = pred
        return RunResult(
            steps=steps,
            metrics_path="",
            final_pred=[float(v) for v in pred],
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _emit(self, step: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, "on_step"):
                callback.on_step(step, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(step, metrics)

    @staticmethod
    def _set_seed(seed: int, determinism: bool) -> None:
        if determinism:
            random.seed(seed)
            np.random.seed(seed % (2**32 - 1))

    @staticmethod
    def save_checkpoint(path: Path, state: Mapping[str, Array]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            np.savez_compressed(handle, **dict(state))

    @staticmethod
    def load_checkpoint(path: str | Path) -> Mapping[str, Array]:
        with np.load(Path(path)) as payload:
            return {name: payload[name].copy() for name in payload.files}


__all__ = ["Trainer"]
