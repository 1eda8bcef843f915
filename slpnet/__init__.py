"""SLPNet public API."""

from .core import activations  # noqa: F401
from .core import types  # noqa: F401
from .core.activations import Activator, Identity, ReLU, Sigmoid, Tanh
from .core.learn import DimensionMismatch, ScalarTypeMismatch, learn, train
from .core.model import Perceptron
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer

__all__ = [
    "Activator",
    "DimensionMismatch",
    "Identity",
    "Perceptron",
    "ReLU",
    "ScalarTypeMismatch",
    "Sigmoid",
    "Tanh",
    "Trainer",
    "activations",
    "learn",
    "load_preset",
    "presets",
    "run_pipeline",
    "train",
    "types",
]
