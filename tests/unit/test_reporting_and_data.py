import csv
import json
from pathlib import Path

import pytest

from kai.data import available_datasets, get_dataset, registry
from kai.data.registry import DatasetSpec
from kai.core.types import DatasetValue
from kai.reporting import CsvSink, JsonlSink, PlotAdapter, write_manifest


def test_builtin_truth_tables():
    assert {"xor", "and", "or", "nand"} <= set(available_datasets())
    xor = get_dataset("xor")
    assert [(s.inputs, s.targets) for s in xor.samples] == [
        ([0.0, 0.0], [0.0]),
        ([0.0, 1.0], [1.0]),
        ([1.0, 0.0], [1.0]),
        ([1.0, 1.0], [0.0]),
    ]
    assert len(xor) == 4
    assert get_dataset("nand").samples[-1].targets == [0.0]
    with pytest.raises(KeyError):
        get_dataset("parity")


def test_registry_validates_sample_widths(monkeypatch):
    def _broken(**_):
        return DatasetSpec(
            name="broken-fixture",
            samples=[DatasetValue([0.0], [1.0])],
            d_in=2,
            d_out=1,
        )

    monkeypatch.setitem(registry._REGISTRY, "broken-fixture", _broken)
    with pytest.raises(ValueError):
        get_dataset("broken-fixture")


def test_jsonl_and_csv_sinks(tmp_path):
    jsonl = JsonlSink(tmp_path / "metrics.jsonl", seed=1, sha="abc")
    sink = CsvSink(tmp_path / "metrics.csv")
    for epoch, loss in [(1, 0.5), (2, 0.25)]:
        jsonl(epoch, {"loss": loss})
        sink.on_epoch(epoch, {"loss": loss})

    records = [json.loads(line) for line in (tmp_path / "metrics.jsonl").read_text().splitlines()]
    assert records[1] == {"epoch": 2, "seed": 1, "sha": "abc", "loss": 0.25}

    with (tmp_path / "metrics.csv").open() as handle:
        rows = list(csv.DictReader(handle))
    assert [float(row["loss"]) for row in rows] == [0.5, 0.25]


def test_plot_adapter_headless(tmp_path):
    adapter = PlotAdapter(tmp_path)
    adapter.on_epoch(1, {"loss": 1.0})
    adapter.on_epoch(2, {"loss": 0.5})
    assert adapter.close() == tmp_path / "loss.png"
    assert (tmp_path / "loss.png").exists()


def test_plot_adapter_without_history_draws_nothing(tmp_path):
    adapter = PlotAdapter(tmp_path / "plots")
    assert adapter.close() is None
    assert not (tmp_path / "plots").exists()


def test_write_manifest(tmp_path):
    path = write_manifest(
        tmp_path / "manifest.json",
        config={"train": {"seed": 0}},
        dataset_provenance={"type": "truth_table"},
        layers=[2, 4, 1],
    )
    manifest = json.loads(Path(path).read_text())
    assert manifest["layers"] == [2, 4, 1]
    assert manifest["dataset"]["type"] == "truth_table"
    assert "git_sha" in manifest and "generated_at" in manifest
