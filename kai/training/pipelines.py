"""Config-driven training runs for K-AI."""

from __future__ import annotations

import json
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping

from ..core.activations import get_activation
from ..core.network import Network
from ..core.types import RunResult
from ..data import get_dataset
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink, LoggingProgress
from ..reporting.plots import PlotAdapter

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor-sigmoid": {
        "data": {"name": "xor"},
        "model": {"layers": [2, 4, 1], "activation": "sigmoid", "learning_rate": 0.1},
        "train": {
            "epochs": 10000,
            "seed": 0,
            "run_dir": "runs/xor-sigmoid",
            "enable_plots": False,
            "log_progress": True,
        },
    },
    "xor-tanh": {
        "data": {"name": "xor"},
        "model": {"layers": [2, 4, 1], "activation": "tanh", "learning_rate": 0.05},
        "train": {
            "epochs": 5000,
            "seed": 0,
            "run_dir": "runs/xor-tanh",
            "enable_plots": False,
            "log_progress": True,
        },
    },
    "and-sigmoid": {
        "data": {"name": "and"},
        "model": {"layers": [2, 1], "activation": "sigmoid", "learning_rate": 0.5},
        "train": {
            "epochs": 2000,
            "seed": 0,
            "run_dir": "runs/and-sigmoid",
            "enable_plots": False,
            "log_progress": True,
        },
    },
}

_REQUIRED_SECTIONS = {"data", "model", "train"}


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Mapping[str, object]:
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def load_config(path: str | Path) -> Mapping[str, object]:
    """Read a run config from a JSON or YAML file."""

    path = Path(path)
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        import yaml

        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    missing = _REQUIRED_SECTIONS - set(data)
    if missing:
        raise KeyError(f"Config {path.name} is missing required sections: {', '.join(sorted(missing))}")
    return data


def _build_network(model_cfg: Mapping[str, object], seed: int) -> Network:
    activation = get_activation(str(model_cfg.get("activation", "sigmoid")))
    load_path = model_cfg.get("load_path")
    if load_path:
        return Network.load(str(load_path), activation)
    return Network(
        [int(width) for width in model_cfg["layers"]],  # type: ignore[union-attr]
        float(model_cfg.get("learning_rate", 0.1)),
        activation,
        seed=seed,
    )


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Train a network as described by ``config`` and write its artifacts."""

    missing = _REQUIRED_SECTIONS - set(config)
    if missing:
        raise KeyError(f"Config is missing required sections: {', '.join(sorted(missing))}")
    data_cfg = dict(config["data"])  # type: ignore[arg-type]
    model_cfg = dict(config["model"])  # type: ignore[arg-type]
    train_cfg = dict(config["train"])  # type: ignore[arg-type]

    dataset = get_dataset(str(data_cfg["name"]), **dict(data_cfg.get("options", {})))
    seed = int(train_cfg.get("seed", 0))
    epochs = int(train_cfg.get("epochs", 1))
    run_dir = Path(str(train_cfg.get("run_dir", "runs/default")))
    run_dir.mkdir(parents=True, exist_ok=True)

    network = _build_network(model_cfg, seed)
    if network.layers[0] != dataset.d_in or network.layers[-1] != dataset.d_out:
        raise ValueError(
            f"Network layers {network.layers} do not fit dataset {dataset.name!r} "
            f"({dataset.d_in} inputs, {dataset.d_out} outputs)"
        )

    metrics_path = run_dir / "metrics.jsonl"
    callbacks: List[object] = [
        JsonlSink(metrics_path, seed=seed),
        CsvSink(run_dir / "metrics.csv"),
    ]
    plotter = PlotAdapter(run_dir) if train_cfg.get("enable_plots", False) else None
    if plotter is not None:
        callbacks.append(plotter)
    if train_cfg.get("log_progress", False):
        callbacks.append(LoggingProgress())

    network.train(dataset.samples, epochs, callbacks=callbacks)
    if plotter is not None:
        plotter.close()

    model_path = run_dir / "model.json"
    network.save(model_path)
    manifest_path = write_manifest(
        run_dir / "manifest.json",
        config=json.loads(json.dumps(config)),
        dataset_provenance=dataset.provenance,
        layers=network.layers,
    )
    predictions = [network.feed_forward(sample.inputs) for sample in dataset.samples]
    return RunResult(
        epochs=epochs,
        metrics_path=str(metrics_path),
        manifest_path=manifest_path,
        model_path=str(model_path),
        predictions=predictions,
    )


__all__ = ["load_config", "load_preset", "presets", "run_pipeline"]
