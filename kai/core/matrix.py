"""Dense real-valued matrices with dimension-checked arithmetic."""

from __future__ import annotations

import json
from typing import Any, Callable, List, Mapping, Sequence, Tuple

import numpy as np

from .errors import DimensionMismatchError, InvalidMatrixError
from .types import Array


def _is_real(value: object) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


class Matrix:
    """Row-major ``rows x cols`` matrix of float64 values.

    Matrices behave as values: every operation allocates a new result and
    never shares storage with its operands.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Array) -> None:
        values = np.array(values, dtype=np.float64, copy=True)
        if values.ndim != 2:
            raise InvalidMatrixError(f"Matrix data must be 2-dimensional, got {values.ndim}")
        self._values = values

    # ------------------------------------------------------------------
    # Constructors

    @classmethod
    def zeros(cls, rows: int, cols: int) -> "Matrix":
        if rows < 0 or cols < 0:
            raise ValueError(f"Matrix dimensions must be non-negative, got {rows}x{cols}")
        return cls(np.zeros((rows, cols), dtype=np.float64))

    @classmethod
    def random(
        cls, rows: int, cols: int, rng: np.random.Generator | None = None
    ) -> "Matrix":
        """Return a matrix with entries drawn uniformly from ``[-1, 1)``."""

        if rows < 0 or cols < 0:
            raise ValueError(f"Matrix dimensions must be non-negative, got {rows}x{cols}")
        rng = rng or np.random.default_rng()
        return cls(rng.random((rows, cols)) * 2.0 - 1.0)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[float]]) -> "Matrix":
        """Build a matrix from a non-empty rectangular sequence of rows."""

        rows = [list(row) for row in rows]
        if not rows:
            raise InvalidMatrixError("Cannot build a matrix from an empty row sequence")
        width = len(rows[0])
        for idx, row in enumerate(rows):
            if len(row) != width:
                raise InvalidMatrixError(
                    f"Row {idx} has {len(row)} columns, expected {width}"
                )
            for value in row:
                if not _is_real(value):
                    raise InvalidMatrixError(
                        f"Row {idx} holds a non-numeric value: {value!r}"
                    )
        return cls(np.asarray(rows, dtype=np.float64).reshape(len(rows), width))

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> "Matrix":
        try:
            rows = int(record["rows"])
            cols = int(record["cols"])
            data = record["data"]
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidMatrixError(f"Malformed matrix record: {exc}") from exc
        if rows == 0:
            if data:
                raise InvalidMatrixError("Matrix record declares 0 rows but carries data")
            return cls.zeros(0, cols)
        matrix = cls.from_rows(data)
        if matrix.shape != (rows, cols):
            raise InvalidMatrixError(
                f"Matrix record declares {rows}x{cols} but data is "
                f"{matrix.rows}x{matrix.cols}"
            )
        return matrix

    @classmethod
    def from_json(cls, text: str) -> "Matrix":
        try:
            record = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidMatrixError(f"Matrix JSON could not be decoded: {exc}") from exc
        if not isinstance(record, Mapping):
            raise InvalidMatrixError("Matrix JSON must decode to an object")
        return cls.from_dict(record)

    # ------------------------------------------------------------------
    # Accessors

    @property
    def rows(self) -> int:
        return int(self._values.shape[0])

    @property
    def cols(self) -> int:
        return int(self._values.shape[1])

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    @property
    def data(self) -> List[List[float]]:
        return self._values.tolist()

    def to_numpy(self) -> Array:
        return self._values.copy()

    def to_dict(self) -> dict:
        return {"rows": self.rows, "cols": self.cols, "data": self.data}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    # ------------------------------------------------------------------
    # Arithmetic

    def multiply(self, other: "Matrix") -> "Matrix":
        if self.cols != other.rows:
            raise DimensionMismatchError("multiply", self.shape, other.shape)
        return Matrix(self._values @ other._values)

    def add(self, other: "Matrix") -> "Matrix":
        self._require_same_shape("add", other)
        return Matrix(self._values + other._values)

    def subtract(self, other: "Matrix") -> "Matrix":
        self._require_same_shape("subtract", other)
        return Matrix(self._values - other._values)

    def dot_multiply(self, other: "Matrix") -> "Matrix":
        """Elementwise (Hadamard) product."""

        self._require_same_shape("dot multiply", other)
        return Matrix(self._values * other._values)

    def map(self, func: Callable[[float], float]) -> "Matrix":
        out = np.empty_like(self._values)
        for idx, value in np.ndenumerate(self._values):
            out[idx] = func(float(value))
        return Matrix(out)

    def transpose(self) -> "Matrix":
        return Matrix(self._values.T)

    def _require_same_shape(self, operation: str, other: "Matrix") -> None:
        if self.shape != other.shape:
            raise DimensionMismatchError(operation, self.shape, other.shape)

    # ------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._values, other._values))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix(rows={self.rows}, cols={self.cols}, data={self.data!r})"


__all__ = ["Matrix"]
