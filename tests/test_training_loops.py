from __future__ import annotations

from typing import List

import pytest

from kai.core.activations import SIGMOID
from kai.core.network import Network
from kai.core.types import DatasetValue

XOR = [
    DatasetValue(inputs=[0.0, 0.0], targets=[0.0]),
    DatasetValue(inputs=[0.0, 1.0], targets=[1.0]),
    DatasetValue(inputs=[1.0, 0.0], targets=[1.0]),
    DatasetValue(inputs=[1.0, 1.0], targets=[0.0]),
]


def _solves_xor(network: Network) -> bool:
    for sample in XOR:
        output = network.feed_forward(sample.inputs)[0]
        if (output > 0.5) != (sample.targets[0] > 0.5):
            return False
    return True


@pytest.mark.slow
def test_xor_converges_for_most_seeds() -> None:
    solved: List[int] = []
    for seed in range(6):
        network = Network([2, 4, 1], 0.1, SIGMOID, seed=seed)
        network.train(XOR, 10_000)
        if _solves_xor(network):
            solved.append(seed)
    # Random initialisation occasionally lands in a plateau.
    assert len(solved) >= 3, f"only seeds {solved} solved XOR"


def test_training_loss_decreases_on_xor() -> None:
    network = Network([2, 4, 1], 0.5, SIGMOID, seed=0)
    history: list[tuple[int, float]] = []
    network.train(XOR, 400, callbacks=[lambda epoch, metrics: history.append((epoch, metrics["loss"]))])

    assert history, "expected progress to be reported"
    assert history[0][0] == 4
    assert history[-1][0] == 400
    assert history[-1][1] < history[0][1]
