"""Command line entry point for SLPNet training runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from slpnet.core.activations import REGISTRY as ACTIVATIONS
from slpnet.data import available_datasets
from slpnet.training import pipelines


def _format_result(result) -> str:
    payload = {
        "steps": result.steps,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
        "final_pred": result.final_pred,
    }
    if getattr(result, "summary_path", ""):
        payload["summary"] = result.summary_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="iris4-sigmoid",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument("--iterations", type=int, help="Number of learning steps")
    parser.add_argument(
        "--activation",
        choices=sorted(ACTIVATIONS.names()),
        help="Override the activation strategy",
    )
    parser.add_argument(
        "--dataset",
        choices=sorted(available_datasets()),
        help="Override the dataset used by the run",
    )
    parser.add_argument("--csv-path", help="Path to a CSV file for the csv dataset")
    parser.add_argument("--target-col", help="Target column name for the csv dataset")
    parser.add_argument("--seed", type=int, help="Seed used for data and weight initialisation")
    parser.add_argument("--run-dir", type=Path, help="Directory receiving run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Write a loss curve to the run directory"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--list-activations", action="store_true", help="List available activations and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> dict:
    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = dict(pipelines.read_config_file(args.config))
        if pipelines.REQUIRED_SECTIONS <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = pipelines.merge_config(config, override)

    train_cfg = config.setdefault("train", {})
    if args.iterations is not None:
        train_cfg["iterations"] = int(args.iterations)
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.run_dir is not None:
        train_cfg["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    if args.activation:
        config.setdefault("model", {})["activation"] = args.activation

    if args.dataset:
        data_cfg = {"name": args.dataset, "options": {}}
        opts = data_cfg["options"]
        if args.seed is not None and args.dataset == "separable":
            opts["seed"] = int(args.seed)
        if args.dataset == "csv":
            if not args.csv_path:
                raise SystemExit("--csv-path is required with --dataset csv")
            opts["csv_path"] = args.csv_path
            if args.target_col:
                opts["target_col"] = args.target_col
        config["data"] = data_cfg
    return config


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    if args.list_activations:
        for name in ACTIVATIONS.names():
            print(name)
        raise SystemExit(0)

    try:
        config = resolve_config(args)
        if args.dump_config:
            args.dump_config.parent.mkdir(parents=True, exist_ok=True)
            args.dump_config.write_text(json.dumps(config, indent=2))
        result = pipelines.run_pipeline(config)
    except (KeyError, ValueError, TypeError, OSError, RuntimeError) as exc:
        raise SystemExit(f"error: {exc}") from exc
    print(_format_result(result))


if __name__ == "__main__":
    main()
