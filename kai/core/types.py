"""Core typing contracts for K-AI."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Sequence

import numpy as np

if TYPE_CHECKING:
    from .matrix import Matrix

Array = np.ndarray


@dataclass(frozen=True)
class DatasetValue:
    """A single training sample."""

    inputs: Sequence[float]
    targets: Sequence[float]


@dataclass
class ForwardState:
    """Column activations captured during one forward pass.

    ``activations[0]`` is the input column and ``activations[-1]`` the output
    column, so a network with ``L`` layers yields ``L`` entries.
    """

    activations: List[Matrix]

    @property
    def outputs(self) -> List[float]:
        return [row[0] for row in self.activations[-1].data]


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`kai.training.pipelines.run_pipeline`."""

    epochs: int
    metrics_path: str
    manifest_path: str
    model_path: str
    predictions: List[List[float]] = field(default_factory=list)


Metrics = Dict[str, float]
