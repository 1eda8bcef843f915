"""Pipeline assembly for SLPNet runs: presets, config files and artifacts."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, Mapping, Sequence

from ..core.activations import REGISTRY as ACTIVATIONS
from ..core.model import Perceptron
from ..core.types import RunResult
from ..data import registry
from ..reporting.artifacts import describe_training_set, write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .metrics import default_metrics
from .trainer import Trainer

REQUIRED_SECTIONS = frozenset({"data", "model", "train"})

_PRESETS: Dict[str, Mapping[str, object]] = {
    "iris4-sigmoid": {
        "data": {"name": "iris4", "options": {}},
        "model": {
            "activation": "sigmoid",
            "dtype": "float32",
            "init": "constant",
            "init_value": 0.5,
        },
        "train": {
            "iterations": 50,
            "seed": 0,
            "log_every": 1,
            "metrics": ["loss", "accuracy"],
            "run_dir": "runs/iris4-sigmoid",
            "enable_plots": False,
        },
    },
    "separable-sigmoid": {
        "data": {
            "name": "separable",
            "options": {"n_samples": 64, "n_features": 2, "separation": 2.0, "seed": 0},
        },
        "model": {
            "activation": "sigmoid",
            "dtype": "float64",
            "init": "normal",
            "init_value": 0.01,
        },
        "train": {
            "iterations": 200,
            "seed": 3,
            "log_every": 10,
            "metrics": ["loss", "accuracy", "bce"],
            "run_dir": "runs/separable-sigmoid",
            "enable_plots": False,
        },
    },
    "separable-tanh": {
        "data": {
            "name": "separable",
            "options": {
                "n_samples": 64,
                "n_features": 2,
                "separation": 2.0,
                "seed": 1,
                "negative_label": -1.0,
            },
        },
        "model": {
            "activation": "tanh",
            "dtype": "float64",
            "init": "normal",
            "init_value": 0.01,
        },
        "train": {
            "iterations": 100,
            "seed": 5,
            "log_every": 10,
            "metrics": ["loss", "mae"],
            "run_dir": "runs/separable-tanh",
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def read_config_file(path: str | Path) -> Mapping[str, object]:
    """Decode a JSON or YAML config file into a mapping."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in {".yaml", ".yml", ".json"}:
        raise ValueError(f"Unsupported config file type: {path.suffix}")
    text = path.read_text()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _require_sections(name: str, config: Mapping[str, object]) -> None:
    missing = REQUIRED_SECTIONS - set(config)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise KeyError(f"Config {name} is missing required sections: {missing_str}")


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        found: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = read_config_file(file)
                _require_sections(file.name, data)
                found[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = found
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def merge_config(base: dict, override: Mapping[str, object]) -> dict:
    """Recursively merge ``override`` into ``base``; nested dicts are merged key by key."""

    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key] = merge_config(dict(base[key]), value)
        else:
            base[key] = value
    return base


def build_model(model_cfg: Mapping[str, object], n_features: int, seed: int) -> Perceptron:
    activator = ACTIVATIONS.get(str(model_cfg.get("activation", "sigmoid")))
    return Perceptron(
        n_features=n_features,
        activator=activator,
        dtype=str(model_cfg.get("dtype", "float32")),
        init=str(model_cfg.get("init", "constant")),
        init_value=float(model_cfg.get("init_value", 0.5)),
        seed=seed,
    )


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Train a perceptron as described by ``config`` and write the run artifacts."""

    _require_sections("run", config)
    data_cfg = dict(config["data"])
    model_cfg = dict(config["model"])
    train_cfg = dict(config["train"])

    dtype = str(model_cfg.get("dtype", "float32"))
    dataset = registry.get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options", {})))
    dataset = dataset.astype(dtype)

    seed = int(train_cfg.get("seed", 0))
    iterations = int(train_cfg.get("iterations", 1))
    log_every = int(train_cfg.get("log_every", 1))
    early_stopping = train_cfg.get("early_stopping_patience")
    early_stopping = int(early_stopping) if early_stopping is not None else None
    metrics_cfg = train_cfg.get("metrics", "loss,accuracy")
    if isinstance(metrics_cfg, str):
        metric_names = [m.strip() for m in metrics_cfg.split(",") if m.strip()]
    else:
        metric_names = [str(item) for item in metrics_cfg]

    model = build_model(model_cfg, dataset.n_features, seed)
    run_dir = _resolve_run_dir(train_cfg, dataset.name, str(model_cfg.get("activation", "sigmoid")))
    run_dir.mkdir(parents=True, exist_ok=True)

    description = model.describe()
    _print_startup_summary(
        dataset_name=dataset.name,
        shape=(dataset.n_samples, dataset.n_features),
        activation=description.activation,
        dtype=description.dtype,
        iterations=iterations,
        metrics=metric_names,
    )

    initial_weights = model.weights.copy()
    jsonl = JsonlSink(
        run_dir / "metrics.jsonl",
        split="train",
        seed=seed,
        context={
            "n_samples": dataset.n_samples,
            "n_features": dataset.n_features,
            "activation": description.activation,
            "dtype": description.dtype,
        },
    )
    csv_columns = [m.lower() for m in metric_names] or default_metrics()
    if "loss" not in csv_columns:
        csv_columns.insert(0, "loss")
    csv_sink = CsvSink(run_dir / "metrics.csv", columns=[*csv_columns, "weight_norm"])
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))
    trainer = Trainer(model, callbacks=[jsonl, csv_sink, plots])

    result = trainer.run(
        dataset.samples,
        dataset.outcomes,
        iterations,
        seed=seed,
        log_every=log_every,
        metric_names=metric_names,
        early_stopping_patience=early_stopping,
        checkpoint_dir=run_dir,
    )
    plots.close()

    safe_config = json.loads(json.dumps(config))
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))
    (run_dir / "predictions.json").write_text(
        json.dumps({"pred": result.final_pred, "weights": model.weights.tolist()}, indent=2)
    )
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        dataset_provenance=dataset.provenance,
        training_set=describe_training_set(dataset.samples, dataset.outcomes),
        model={
            "activation": description.activation,
            "dtype": description.dtype,
            "n_features": model.n_features,
            "parameters": model.parameter_count(),
        },
        weights={"initial": initial_weights, "final": model.weights},
    )
    summary_tail = int(train_cfg.get("summary_tail", 32))
    summary_path = write_summary(jsonl.path, run_dir / "summary.json", tail=summary_tail)

    return RunResult(
        steps=result.steps,
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
        final_pred=result.final_pred,
    )


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str, activation: str) -> Path:
    if train_cfg.get("run_dir"):
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset / activation


def _print_startup_summary(
    *,
    dataset_name: str,
    shape: tuple[int, int],
    activation: str,
    dtype: str,
    iterations: int,
    metrics: Sequence[str],
) -> None:
    print("=== SLPNet run ===")
    print(f"Dataset       : {dataset_name}")
    print(f"Samples       : {shape[0]} x {shape[1]}")
    print(f"Activation    : {activation}")
    print(f"Scalar type   : {dtype}")
    print(f"Iterations    : {iterations}")
    print(f"Metrics       : {', '.join(metrics)}")
    print("==================")


__all__ = [
    "build_model",
    "load_preset",
    "merge_config",
    "presets",
    "read_config_file",
    "run_pipeline",
]
