import json
from pathlib import Path

import pytest

from slpnet.training import pipelines


def test_pipeline_produces_artifacts(tmp_path):
    config = pipelines.load_preset("iris4-sigmoid")
    config["train"]["run_dir"] = str(tmp_path / "run")

    result = pipelines.run_pipeline(config)
    run_dir = tmp_path / "run"

    assert result.steps == 50
    assert result.final_pred == pytest.approx([0.0511965, 0.0696981, 0.931842, 0.899579], abs=1e-4)

    manifest = json.loads(Path(result.manifest_path).read_text())
    assert manifest["config"]["train"]["iterations"] == 50
    assert manifest["dataset"]["type"] == "fixture"
    assert manifest["model"]["activation"] == "sigmoid"
    assert manifest["model"]["dtype"] == "float32"
    assert manifest["dataset"]["outcome_counts"] == {"0.0": 2, "1.0": 2}
    assert manifest["weights"]["initial"] == [0.5] * 4

    metrics = [
        json.loads(line) for line in Path(result.metrics_path).read_text().splitlines() if line
    ]
    assert len(metrics) == 50
    assert metrics[0]["split"] == "train"
    assert metrics[0]["seed"] == 0
    assert metrics[0]["n_samples"] == 4 and metrics[0]["n_features"] == 4
    assert metrics[0]["activation"] == "sigmoid" and metrics[0]["dtype"] == "float32"
    assert metrics[0]["weight_norm"] == pytest.approx(1.0)
    assert all("loss" in entry and "accuracy" in entry for entry in metrics)

    for name in ("metrics.csv", "summary.json", "config.json", "predictions.json", "last.ckpt"):
        assert (run_dir / name).exists(), name
    with (run_dir / "metrics.csv").open() as handle:
        header = handle.readline().strip()
    assert header == "step,loss,accuracy,weight_norm"
    summary = json.loads((run_dir / "summary.json").read_text())
    assert summary["best"]["loss"] == min(entry["loss"] for entry in metrics)
    predictions = json.loads((run_dir / "predictions.json").read_text())
    assert predictions["pred"] == result.final_pred
    assert len(predictions["weights"]) == 4


def test_builtin_and_file_presets_are_listed():
    names = set(pipelines.presets())
    assert {"iris4-sigmoid", "separable-sigmoid", "separable-tanh", "iris4-tanh"} <= names
    yaml_preset = pipelines.load_preset("iris4-tanh")
    assert yaml_preset["model"]["activation"] == "tanh"
    with pytest.raises(KeyError, match="Unknown preset"):
        pipelines.load_preset("does-not-exist")


def test_presets_are_copies():
    first = pipelines.load_preset("iris4-sigmoid")
    first["train"]["iterations"] = 1
    assert pipelines.load_preset("iris4-sigmoid")["train"]["iterations"] == 50


@pytest.mark.parametrize("name", ["separable-sigmoid", "separable-tanh", "iris4-tanh"])
def test_every_preset_runs(tmp_path, name):
    config = pipelines.load_preset(name)
    config["train"]["run_dir"] = str(tmp_path / name)
    config["train"]["iterations"] = 10
    result = pipelines.run_pipeline(config)
    assert result.steps == 10
    assert Path(result.summary_path).exists()


def test_missing_sections_are_reported():
    with pytest.raises(KeyError, match="train"):
        pipelines.run_pipeline({"data": {"name": "iris4"}, "model": {}})


def test_unknown_activation_is_reported(tmp_path):
    config = pipelines.load_preset("iris4-sigmoid")
    config["model"]["activation"] = "softsign"
    config["train"]["run_dir"] = str(tmp_path)
    with pytest.raises(KeyError, match="softsign"):
        pipelines.run_pipeline(config)


def test_config_files(tmp_path):
    json_path = tmp_path / "cfg.json"
    json_path.write_text(json.dumps({"train": {"iterations": 3}}))
    assert pipelines.read_config_file(json_path) == {"train": {"iterations": 3}}

    yaml_path = tmp_path / "cfg.yaml"
    yaml_path.write_text("model:\n  activation: relu\n")
    assert pipelines.read_config_file(yaml_path) == {"model": {"activation": "relu"}}

    with pytest.raises(ValueError, match="Unsupported"):
        pipelines.read_config_file(tmp_path / "cfg.toml")

    list_path = tmp_path / "list.json"
    list_path.write_text("[1, 2]")
    with pytest.raises(TypeError, match="mapping"):
        pipelines.read_config_file(list_path)


def test_merge_config_is_recursive():
    base = {"train": {"iterations": 5, "seed": 1}, "model": {"activation": "sigmoid"}}
    merged = pipelines.merge_config(base, {"train": {"iterations": 9}})
    assert merged["train"] == {"iterations": 9, "seed": 1}
    assert merged["model"] == {"activation": "sigmoid"}
