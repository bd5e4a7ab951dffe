"""Progress sinks for training runs."""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Mapping

from .artifacts import git_sha

logger = logging.getLogger("kai.training")


class JsonlSink:
    """Append-only JSONL writer for metrics."""

    def __init__(
        self,
        path: str | Path,
        *,
        seed: int | None = None,
        sha: str | None = None,
    ) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.seed = seed
        self.sha = sha or git_sha()

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        record = {"epoch": int(epoch), "seed": self.seed, "sha": self.sha}
        record.update({k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))})
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")

    __call__ = on_epoch


class CsvSink:
    """Write metrics to CSV with a stable schema."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        row = {"epoch": int(epoch)}
        row.update({k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))})
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=sorted(row.keys()))
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(row)


class LoggingProgress:
    """Report training progress through :mod:`logging`."""

    def __init__(self, level: int = logging.INFO, log: logging.Logger | None = None) -> None:
        self.level = level
        self.log = log or logger

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        epochs = int(metrics.get("epochs", epoch))
        loss = metrics.get("loss")
        if loss is None:
            self.log.log(self.level, "Epoch %d of %d", epoch, epochs)
        else:
            self.log.log(self.level, "Epoch %d of %d (loss=%.6f)", epoch, epochs, loss)


__all__ = ["CsvSink", "JsonlSink", "LoggingProgress"]
