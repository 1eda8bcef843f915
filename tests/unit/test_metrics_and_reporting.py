import csv
import json

import numpy as np
import pytest

from slpnet.reporting.artifacts import describe_training_set, write_manifest
from slpnet.reporting.metrics import CsvSink, JsonlSink
from slpnet.reporting.plots import PLOT_FILENAME, PlotAdapter
from slpnet.reporting.summary import compute_auc, summarise, write_summary
from slpnet.training.metrics import available_metrics, compute_metrics


def test_compute_metrics_values():
    pred = np.array([0.1, 0.4, 0.6, 0.9])
    outcomes = np.array([0.0, 1.0, 1.0, 1.0])
    metrics = compute_metrics(["loss", "mae", "accuracy", "bce"], pred, outcomes)
    assert metrics["loss"] == pytest.approx((0.01 + 0.36 + 0.16 + 0.01) / 4)
    assert metrics["mae"] == pytest.approx((0.1 + 0.6 + 0.4 + 0.1) / 4)
    assert metrics["accuracy"] == 0.75
    assert metrics["bce"] > 0.0
    assert "mse" in available_metrics()


def test_unknown_metric():
    with pytest.raises(KeyError, match="Unknown metric"):
        compute_metrics(["auc"], np.zeros(2), np.zeros(2))


def test_jsonl_records_carry_the_run_context(tmp_path):
    context = {"n_samples": 4, "n_features": 4, "activation": "sigmoid", "dtype": "float32"}
    jsonl = JsonlSink(tmp_path / "m.jsonl", split="train", seed=4, context=context)
    for step, loss in [(1, 0.5), (2, 0.25)]:
        jsonl.on_step(step, {"loss": loss, "weight_norm": 1.0})

    records = [json.loads(line) for line in (tmp_path / "m.jsonl").read_text().splitlines()]
    assert records[1] == {
        "step": 2,
        "split": "train",
        "seed": 4,
        "n_samples": 4,
        "n_features": 4,
        "activation": "sigmoid",
        "dtype": "float32",
        "loss": 0.25,
        "weight_norm": 1.0,
    }


def test_csv_columns_are_fixed_up_front(tmp_path):
    csv_sink = CsvSink(tmp_path / "m.csv", columns=["loss", "accuracy"])
    assert (tmp_path / "m.csv").read_text().splitlines() == ["step,loss,accuracy"]
    csv_sink(1, {"accuracy": 0.5, "loss": 0.5, "weight_norm": 1.0})
    csv_sink(2, {"loss": 0.25})

    with (tmp_path / "m.csv").open() as handle:
        rows = list(csv.DictReader(handle))
    assert list(rows[0]) == ["step", "loss", "accuracy"]
    assert rows[0] == {"step": "1", "loss": "0.5", "accuracy": "0.5"}
    assert rows[1] == {"step": "2", "loss": "0.25", "accuracy": ""}


def test_csv_header_comes_from_the_first_step_without_columns(tmp_path):
    csv_sink = CsvSink(tmp_path / "m.csv")
    csv_sink(1, {"loss": 0.5, "mae": 0.4})
    csv_sink(2, {"mae": 0.3, "loss": 0.2, "bce": 0.9})

    lines = (tmp_path / "m.csv").read_text().splitlines()
    assert lines == ["step,loss,mae", "1,0.5,0.4", "2,0.2,0.3"]


def test_summary_ignores_bookkeeping_fields(tmp_path):
    metrics_path = tmp_path / "m.jsonl"
    lines = [
        {"step": 1, "split": "train", "seed": 3, "loss": 1.0},
        {"step": 2, "split": "train", "seed": 3, "loss": 0.5},
        {"step": 3, "split": "train", "seed": 3, "loss": 0.25},
    ]
    metrics_path.write_text("\n".join(json.dumps(line) for line in lines) + "\n")
    out = write_summary(metrics_path, tmp_path / "summary.json", tail=2)
    summary = json.loads(open(out).read())
    assert summary["records"] == 3
    assert summary["last_step"] == 3
    assert set(summary["metrics"]) == {"loss"}
    loss = summary["metrics"]["loss"]
    assert loss["min"] == 0.25 and loss["last"] == 0.25
    assert loss["tail_auc"] == pytest.approx(0.375)


def test_compute_auc_edge_cases():
    assert compute_auc([]) == 0.0
    assert compute_auc([1.0, 1.0, 1.0]) == pytest.approx(2.0)


def test_summary_reports_the_best_step():
    records = [
        {"step": 1, "n_samples": 4, "loss": 0.4, "accuracy": 0.5},
        {"step": 2, "n_samples": 4, "loss": 0.1, "accuracy": 1.0},
        {"step": 3, "n_samples": 4, "loss": 0.1, "accuracy": 1.0},
        {"step": 4, "n_samples": 4, "loss": 0.2, "accuracy": 1.0},
    ]
    summary = summarise(records, tail=8)
    assert summary["best"] == {"step": 2, "loss": 0.1}
    assert set(summary["metrics"]) == {"loss", "accuracy"}
    loss = summary["metrics"]["loss"]
    assert loss["first"] == 0.4
    assert loss["delta"] == pytest.approx(-0.2)
    assert summarise([], tail=8)["best"] == {}


def test_manifest_records_training_set_and_weights(tmp_path):
    samples = np.zeros((3, 2), dtype=np.float32)
    outcomes = np.array([0.0, 1.0, 1.0], dtype=np.float32)
    path = write_manifest(
        tmp_path / "manifest.json",
        config={"train": {"iterations": 3}},
        dataset_provenance={"type": "fixture"},
        training_set=describe_training_set(samples, outcomes),
        model={"activation": "sigmoid"},
        weights={"initial": np.full(2, 0.5), "final": np.array([0.25, 0.75])},
    )
    manifest = json.loads(open(path).read())
    assert manifest["config"]["train"]["iterations"] == 3
    assert manifest["dataset"] == {
        "type": "fixture",
        "n_samples": 3,
        "n_features": 2,
        "dtype": "float32",
        "outcome_counts": {"0.0": 1, "1.0": 2},
    }
    assert manifest["model"]["activation"] == "sigmoid"
    assert manifest["weights"] == {"initial": [0.5, 0.5], "final": [0.25, 0.75]}
    assert "numpy" in manifest["environment"]


def test_plot_adapter_headless(tmp_path):
    adapter = PlotAdapter(tmp_path, enable_plots=True)
    adapter.on_step(1, {"loss": 1.0, "weight_norm": 1.0})
    adapter.on_step(2, {"loss": 0.5, "weight_norm": 1.5})
    out = adapter.close()
    assert out == tmp_path / PLOT_FILENAME
    assert out.exists()


def test_plot_adapter_disabled_writes_nothing(tmp_path):
    adapter = PlotAdapter(tmp_path / "plots", enable_plots=False)
    adapter(1, {"loss": 1.0})
    adapter.close()
    assert not (tmp_path / "plots").exists()
