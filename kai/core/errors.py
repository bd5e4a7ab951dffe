"""Error taxonomy for K-AI."""

from __future__ import annotations

from typing import Tuple

Shape = Tuple[int, int]


class MatrixError(ValueError):
    """Base class for matrix construction and arithmetic failures."""


class DimensionMismatchError(MatrixError):
    """Raised when an operation receives matrices of incompatible shapes."""

    def __init__(self, operation: str, left: Shape, right: Shape) -> None:
        self.operation = operation
        self.left = tuple(left)
        self.right = tuple(right)
        super().__init__(
            f"Attempted to {operation} matrices of incorrect dimensions: "
            f"{self.left[0]}x{self.left[1]} and {self.right[0]}x{self.right[1]}"
        )


class InvalidMatrixError(MatrixError):
    """Raised for empty, ragged or inconsistent matrix data."""


class NetworkError(ValueError):
    """Base class for size mismatches against the network's layer widths."""

    def __init__(self, message: str, *, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"{message}: expected {expected}, got {actual}")


class InvalidInputSizeError(NetworkError):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__("Invalid number of inputs", expected=expected, actual=actual)


class InvalidTargetSizeError(NetworkError):
    def __init__(self, expected: int, actual: int) -> None:
        super().__init__("Invalid number of targets", expected=expected, actual=actual)


class PersistenceError(Exception):
    """Base class for save/load failures."""


class ModelNotFoundError(PersistenceError, FileNotFoundError):
    """The requested save file does not exist."""


class MalformedModelError(PersistenceError, ValueError):
    """The save file exists but cannot be decoded into a network."""


__all__ = [
    "DimensionMismatchError",
    "InvalidInputSizeError",
    "InvalidMatrixError",
    "InvalidTargetSizeError",
    "MalformedModelError",
    "MatrixError",
    "ModelNotFoundError",
    "NetworkError",
    "PersistenceError",
]
