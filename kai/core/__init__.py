"""Core numerical primitives for K-AI."""

from . import activations, errors, matrix, network, types

__all__ = ["activations", "errors", "matrix", "network", "types"]
