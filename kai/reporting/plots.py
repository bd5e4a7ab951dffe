"""Loss curve rendering for training runs."""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping


class PlotAdapter:
    """Record reported losses and draw them to ``loss.png`` on close."""

    def __init__(self, run_dir: str | Path) -> None:
        self.path = Path(run_dir) / "loss.png"
        self.epochs: List[int] = []
        self.losses: List[float] = []

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.epochs.append(int(epoch))
        self.losses.append(float(metrics["loss"]))

    def close(self) -> Path | None:
        if not self.epochs:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        fig, ax = plt.subplots()
        ax.plot(self.epochs, self.losses)
        ax.set(xlabel="Epoch", ylabel="Mean squared error")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(self.path)
        plt.close(fig)
        return self.path
