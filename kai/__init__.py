"""K-AI public API."""

from .core import activations  # noqa: F401
from .core import errors  # noqa: F401
from .core.activations import RELU, SIGMOID, TANH, Activation
from .core.matrix import Matrix
from .core.network import Network
from .core.types import DatasetValue, ForwardState
from .training.pipelines import load_config, load_preset, presets, run_pipeline

__all__ = [
    "Activation",
    "DatasetValue",
    "ForwardState",
    "Matrix",
    "Network",
    "RELU",
    "SIGMOID",
    "TANH",
    "activations",
    "errors",
    "load_config",
    "load_preset",
    "presets",
    "run_pipeline",
]
