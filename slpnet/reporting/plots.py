"""Training curves for perceptron runs (matplotlib, headless)."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Tuple

PLOT_FILENAME = "training_curves.png"


class PlotAdapter:
    """Record every logged metric and draw one panel per metric on ``close``."""

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._series: Dict[str, List[Tuple[int, float]]] = {}
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_step(self, step: int, metrics):
        if not self.enable_plots:
            return
        for name, value in metrics.items():
            self._series.setdefault(name, []).append((step, float(value)))

    def close(self) -> Path | None:
        if not self.enable_plots or not self._series:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        names = sorted(self._series)
        fig, axes = plt.subplots(len(names), 1, sharex=True, squeeze=False,
                                 figsize=(6, 2.2 * len(names)))
        for ax, name in zip(axes[:, 0], names):
            steps, values = zip(*self._series[name])
            ax.plot(steps, values, marker="." if len(steps) < 30 else None)
            ax.set_ylabel(name)
        axes[-1, 0].set_xlabel("Learning step")
        fig.suptitle("Perceptron training")
        fig.tight_layout()
        out = self.run_dir / PLOT_FILENAME
        fig.savefig(out)
        plt.close(fig)
        return out

    __call__ = on_step
