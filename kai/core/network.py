"""Fully connected feed-forward network trained by single-sample SGD."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Sequence

import numpy as np

from .activations import Activation
from .errors import (
    InvalidInputSizeError,
    InvalidMatrixError,
    InvalidTargetSizeError,
    MalformedModelError,
    ModelNotFoundError,
    PersistenceError,
)
from .matrix import Matrix
from .types import DatasetValue, ForwardState, Metrics


def should_report(epoch: int, epochs: int) -> bool:
    """Return whether progress is reported after ``epoch`` of ``epochs``."""

    return epochs < 100 or epoch % (epochs // 100) == 0


class Network:
    """Dense feed-forward network.

    ``weights[i]`` maps layer ``i`` to layer ``i + 1`` and has shape
    ``[layers[i + 1] x layers[i]]``; ``biases[i]`` is a
    ``[layers[i + 1] x 1]`` column.

    ``data`` caches the column activations of the most recent
    :meth:`feed_forward` call and is consumed by the next
    :meth:`back_propagate`. The cache is single-writer: interleaving samples
    between the two calls corrupts training. Use :meth:`forward` to get a
    private :class:`ForwardState` instead.
    """

    def __init__(
        self,
        layers: Sequence[int],
        learning_rate: float,
        activation: Activation,
        *,
        seed: int | None = None,
    ) -> None:
        layers = [int(width) for width in layers]
        if len(layers) < 2:
            raise ValueError(
                f"A network needs at least an input and an output layer, got {len(layers)} layer(s)"
            )
        if any(width < 1 for width in layers):
            raise ValueError(f"Layer widths must be positive, got {layers}")

        rng = np.random.default_rng(seed)
        weights: List[Matrix] = []
        biases: List[Matrix] = []
        for in_dim, out_dim in zip(layers[:-1], layers[1:]):
            weights.append(Matrix.random(out_dim, in_dim, rng))
            biases.append(Matrix.random(out_dim, 1, rng))

        self.layers = layers
        self.weights = weights
        self.biases = biases
        self.data: List[Matrix] = []
        self.learning_rate = float(learning_rate)
        self.activation = activation

    @classmethod
    def _from_parameters(
        cls,
        layers: List[int],
        weights: List[Matrix],
        biases: List[Matrix],
        learning_rate: float,
        activation: Activation,
    ) -> "Network":
        network = cls.__new__(cls)
        network.layers = layers
        network.weights = weights
        network.biases = biases
        network.data = []
        network.learning_rate = float(learning_rate)
        network.activation = activation
        return network

    # ------------------------------------------------------------------
    # Inference

    def forward(self, inputs: Sequence[float]) -> ForwardState:
        """Run a forward pass without touching the network's cache."""

        inputs = list(inputs)
        if len(inputs) != self.layers[0]:
            raise InvalidInputSizeError(self.layers[0], len(inputs))

        current = Matrix.from_rows([inputs]).transpose()
        activations = [current]
        for weights, biases in zip(self.weights, self.biases):
            current = weights.multiply(current).add(biases).map(self.activation.func)
            activations.append(current)
        return ForwardState(activations=activations)

    def feed_forward(self, inputs: Sequence[float]) -> List[float]:
        """Return the output layer for ``inputs`` and cache every activation."""

        state = self.forward(inputs)
        self.data = state.activations
        return state.outputs

    # ------------------------------------------------------------------
    # Training

    def back_propagate(
        self,
        outputs: Sequence[float],
        targets: Sequence[float],
        state: ForwardState | None = None,
    ) -> None:
        """Correct weights and biases from ``outputs`` towards ``targets``.

        ``outputs`` must come from the forward pass whose activations are in
        ``state`` (or in ``data`` when ``state`` is omitted).
        """

        targets = list(targets)
        if len(targets) != self.layers[-1]:
            raise InvalidTargetSizeError(self.layers[-1], len(targets))
        cache = state.activations if state is not None else self.data
        if not cache:
            raise RuntimeError("feed_forward must be called before back_propagate")

        parsed = Matrix.from_rows([list(outputs)]).transpose()
        errors = Matrix.from_rows([targets]).transpose().subtract(parsed)
        gradients = parsed.map(self.activation.dfunc)
        learning_rate = self.learning_rate

        for idx in reversed(range(len(self.weights))):
            gradients = gradients.dot_multiply(errors).map(lambda x: x * learning_rate)

            self.weights[idx] = self.weights[idx].add(
                gradients.multiply(cache[idx].transpose())
            )
            self.biases[idx] = self.biases[idx].add(gradients)

            # Propagates through the freshly updated weights.
            errors = self.weights[idx].transpose().multiply(errors)
            gradients = cache[idx].map(self.activation.dfunc)

    def train(
        self,
        dataset: Iterable[DatasetValue],
        epochs: int,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        """Train on every sample of ``dataset`` in order, ``epochs`` times.

        Progress goes to ``callbacks`` every ``epochs // 100`` epochs (every
        epoch when ``epochs < 100``). A callback is either an object with an
        ``on_epoch(epoch, metrics)`` method or a plain callable with the same
        signature. ``metrics`` carries the mean squared error of the epoch's
        outputs, measured before each sample's update.
        """

        epochs = int(epochs)
        if epochs < 0:
            raise ValueError(f"epochs must be non-negative, got {epochs}")
        samples = list(dataset)
        callbacks = list(callbacks or [])

        for epoch in range(1, epochs + 1):
            squared_error = 0.0
            count = 0
            for sample in samples:
                outputs = self.feed_forward(sample.inputs)
                self.back_propagate(outputs, sample.targets)
                for output, target in zip(outputs, sample.targets):
                    squared_error += (float(target) - output) ** 2
                    count += 1

            if callbacks and should_report(epoch, epochs):
                metrics = {
                    "loss": squared_error / count if count else 0.0,
                    "epochs": float(epochs),
                }
                self._emit_epoch(callbacks, epoch, metrics)

    @staticmethod
    def _emit_epoch(callbacks: Sequence[object], epoch: int, metrics: Metrics) -> None:
        for callback in callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(epoch, metrics)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(epoch, metrics)

    # ------------------------------------------------------------------
    # Persistence

    def to_dict(self) -> dict:
        return {
            "inputs": self.layers[0],
            "weights": [matrix.data for matrix in self.weights],
            "biases": [matrix.data for matrix in self.biases],
            "learning_rate": self.learning_rate,
        }

    @classmethod
    def from_dict(cls, record: Mapping[str, Any], activation: Activation) -> "Network":
        """Rebuild a network from :meth:`to_dict` output.

        Layer widths past the input are recovered from the row count of each
        weight matrix. The activation is never persisted.
        """

        if not isinstance(record, Mapping):
            raise MalformedModelError("Save data must be an object")
        missing = {"inputs", "weights", "biases", "learning_rate"} - set(record)
        if missing:
            raise MalformedModelError(
                f"Save data is missing fields: {', '.join(sorted(missing))}"
            )

        try:
            inputs = int(record["inputs"])
            learning_rate = float(record["learning_rate"])
        except (TypeError, ValueError) as exc:
            raise MalformedModelError(f"Invalid scalar field in save data: {exc}") from exc
        raw_weights = record["weights"]
        raw_biases = record["biases"]
        if not isinstance(raw_weights, list) or not isinstance(raw_biases, list):
            raise MalformedModelError("weights and biases must be lists of matrices")
        if not raw_weights:
            raise MalformedModelError("Save data holds no weight matrices")
        if len(raw_weights) != len(raw_biases):
            raise MalformedModelError(
                f"Save data has {len(raw_weights)} weight matrices but "
                f"{len(raw_biases)} bias matrices"
            )
        if inputs < 1:
            raise MalformedModelError(f"Input width must be positive, got {inputs}")

        layers = [inputs]
        weights: List[Matrix] = []
        biases: List[Matrix] = []
        for idx, (raw_w, raw_b) in enumerate(zip(raw_weights, raw_biases)):
            try:
                weight = Matrix.from_rows(raw_w)
                bias = Matrix.from_rows(raw_b)
            except (InvalidMatrixError, TypeError, ValueError) as exc:
                raise MalformedModelError(f"Invalid matrix at transition {idx}: {exc}") from exc
            if weight.cols != layers[-1]:
                raise MalformedModelError(
                    f"weights[{idx}] has {weight.cols} columns, expected {layers[-1]}"
                )
            if bias.shape != (weight.rows, 1):
                raise MalformedModelError(
                    f"biases[{idx}] has shape {bias.rows}x{bias.cols}, "
                    f"expected {weight.rows}x1"
                )
            layers.append(weight.rows)
            weights.append(weight)
            biases.append(bias)

        return cls._from_parameters(layers, weights, biases, learning_rate, activation)

    def save(self, path: str | Path) -> None:
        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(self.to_dict()), encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Unable to write save file {path}: {exc}") from exc

    @classmethod
    def load(cls, path: str | Path, activation: Activation) -> "Network":
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ModelNotFoundError(f"Save file not found: {path}") from exc
        except OSError as exc:
            raise PersistenceError(f"Unable to read save file {path}: {exc}") from exc
        try:
            record = json.loads(text)
        except json.JSONDecodeError as exc:
            raise MalformedModelError(f"Unable to decode save file {path}: {exc}") from exc
        return cls.from_dict(record, activation)

    def __repr__(self) -> str:
        return (
            f"Network(layers={self.layers}, learning_rate={self.learning_rate}, "
            f"activation={self.activation.name!r})"
        )


__all__ = ["Network", "should_report"]
