import json
import logging
from pathlib import Path

import pytest

from kai.core.activations import SIGMOID
from kai.core.network import Network
from kai.training import pipelines


def _config(run_dir: Path, **train_overrides):
    config = {
        "data": {"name": "and"},
        "model": {"layers": [2, 1], "activation": "sigmoid", "learning_rate": 0.5},
        "train": {"epochs": 300, "seed": 3, "run_dir": str(run_dir), "enable_plots": False},
    }
    config["train"].update(train_overrides)
    return config


def test_pipeline_produces_artifacts(tmp_path):
    config = _config(tmp_path / "run")
    result = pipelines.run_pipeline(config)

    assert result.epochs == 300
    metrics = [
        json.loads(line)
        for line in Path(result.metrics_path).read_text().splitlines()
        if line
    ]
    assert len(metrics) == 100
    assert all("loss" in entry and "sha" in entry for entry in metrics)
    assert metrics[0]["seed"] == 3

    manifest = json.loads(Path(result.manifest_path).read_text())
    assert manifest["config"]["train"]["seed"] == 3
    assert manifest["dataset"]["gate"] == "and"
    assert manifest["layers"] == [2, 1]

    assert (tmp_path / "run" / "metrics.csv").exists()
    assert not (tmp_path / "run" / "loss.png").exists()
    restored = Network.load(result.model_path, SIGMOID)
    assert restored.layers == [2, 1]
    assert len(result.predictions) == 4


def test_pipeline_is_deterministic_for_a_seed(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path / "a"))
    second = pipelines.run_pipeline(_config(tmp_path / "b"))
    assert first.predictions == second.predictions
    assert Path(first.model_path).read_text() == Path(second.model_path).read_text()


def test_pipeline_resumes_from_saved_model(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path / "a", epochs=10))
    config = _config(tmp_path / "b", epochs=0)
    config["model"]["load_path"] = first.model_path
    resumed = pipelines.run_pipeline(config)
    assert resumed.predictions == first.predictions


def test_pipeline_rejects_mismatched_layers(tmp_path):
    config = _config(tmp_path / "run")
    config["model"]["layers"] = [3, 1]
    with pytest.raises(ValueError):
        pipelines.run_pipeline(config)


def test_pipeline_logs_progress(tmp_path, caplog):
    with caplog.at_level(logging.INFO, logger="kai.training"):
        pipelines.run_pipeline(_config(tmp_path / "run", epochs=5, log_progress=True))
    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("Epoch 5 of 5") for message in messages)


def test_pipeline_plots_when_enabled(tmp_path):
    pipelines.run_pipeline(_config(tmp_path / "run", epochs=20, enable_plots=True))
    assert (tmp_path / "run" / "loss.png").exists()


def test_presets_and_config_files(tmp_path):
    assert {"xor-sigmoid", "xor-tanh", "and-sigmoid"} <= set(pipelines.presets())
    preset = pipelines.load_preset("xor-sigmoid")
    assert preset["model"]["layers"] == [2, 4, 1]
    with pytest.raises(KeyError):
        pipelines.load_preset("missing")

    json_path = tmp_path / "run.json"
    json_path.write_text(json.dumps(_config(tmp_path / "run")))
    assert pipelines.load_config(json_path)["data"]["name"] == "and"

    yaml_path = tmp_path / "run.yaml"
    yaml_path.write_text(
        "data:\n  name: xor\nmodel:\n  layers: [2, 4, 1]\ntrain:\n  epochs: 1\n"
    )
    assert pipelines.load_config(yaml_path)["model"]["layers"] == [2, 4, 1]

    bad_path = tmp_path / "run.json"
    bad_path.write_text(json.dumps({"data": {"name": "xor"}}))
    with pytest.raises(KeyError):
        pipelines.load_config(bad_path)
