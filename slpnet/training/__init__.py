"""Training loops and run pipelines for SLPNet."""

from .metrics import compute_metrics
from .pipelines import load_preset, presets, run_pipeline
from .trainer import Trainer

__all__ = ["Trainer", "compute_metrics", "load_preset", "presets", "run_pipeline"]
