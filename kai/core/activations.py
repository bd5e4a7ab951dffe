"""Activation function pairs for K-AI.

Every derivative is expressed in terms of the *activated* value: ``dfunc``
receives ``y = func(x)`` rather than the pre-activation ``x``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable

import numpy as np

ScalarFn = Callable[[float], float]


@dataclass(frozen=True)
class Activation:
    """Immutable activation function and its output-space derivative."""

    name: str
    func: ScalarFn
    dfunc: ScalarFn

    def apply(self, x: float) -> float:
        return self.func(x)

    def derivative(self, y: float) -> float:
        return self.dfunc(y)


def sigmoid(x: float) -> float:
    return float(1.0 / (1.0 + np.exp(-x)))


def sigmoid_deriv(y: float) -> float:
    return y * (1.0 - y)


def tanh(x: float) -> float:
    return float(np.tanh(x))


def tanh_deriv(y: float) -> float:
    return 1.0 - y**2


def relu(x: float) -> float:
    """Return the ReLU activation."""

    return max(x, 0.0)


def relu_deriv(y: float) -> float:
    return 1.0 if y > 0.0 else 0.0


SIGMOID = Activation("sigmoid", sigmoid, sigmoid_deriv)
TANH = Activation("tanh", tanh, tanh_deriv)
RELU = Activation("relu", relu, relu_deriv)


_REGISTRY: Dict[str, Activation] = {}


def register_activation(activation: Activation) -> Activation:
    _REGISTRY[activation.name] = activation
    return activation


def get_activation(name: str) -> Activation:
    key = name.lower()
    if key not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"Unknown activation {name!r}. Available activations: {available}")
    return _REGISTRY[key]


def available_activations() -> Iterable[str]:
    return sorted(_REGISTRY)


for _activation in (SIGMOID, TANH, RELU):
    register_activation(_activation)


__all__ = [
    "Activation",
    "RELU",
    "SIGMOID",
    "TANH",
    "available_activations",
    "get_activation",
    "register_activation",
]
