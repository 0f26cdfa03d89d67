"""
learnlite.matrix
================

A small dense matrix type.  ``Matrix`` wraps a read-only 2-D ``float64``
array and provides the handful of linear-algebra operations the toolkit needs
(transpose, product, inverse).  Estimators accept it anywhere an array-like is
accepted because it implements ``__array__``.
"""

from __future__ import annotations

import numpy as np

from .exceptions import ShapeMismatchError, SingularMatrixError


class Matrix:
    """Immutable-shape dense matrix of floats.

    Parameters
    ----------
    data : array-like of shape (rows, cols)
        Matrix entries.  A copy is taken and marked read-only.

    Attributes
    ----------
    rows : int
        Number of rows.
    cols : int
        Number of columns.
    """

    __slots__ = ("_data",)

    def __init__(self, data):
        arr = np.array(data, dtype=float)
        if arr.ndim != 2:
            raise ShapeMismatchError(f"Matrix data must be 2-D, got {arr.ndim} dimension(s).")
        arr.setflags(write=False)
        self._data = arr

    @classmethod
    def identity(cls, n: int) -> "Matrix":
        return cls(np.eye(n))

    @property
    def data(self) -> np.ndarray:
        return self._data

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self._data.shape

    @property
    def T(self) -> "Matrix":
        return self.transpose()

    def row(self, i: int) -> np.ndarray:
        return self._data[i]

    def column(self, j: int) -> np.ndarray:
        return self._data[:, j]

    def transpose(self) -> "Matrix":
        return Matrix(self._data.T)

    def dot(self, other) -> "Matrix":
        """Matrix product ``self @ other``."""
        other = other if isinstance(other, Matrix) else Matrix(other)
        if self.cols != other.rows:
            raise ShapeMismatchError(
                f"Matrix dimensions do not match for dot product: {self.shape} x {other.shape}."
            )
        return Matrix(self._data @ other._data)

    def inverse(self) -> "Matrix":
        """
        Invert a square matrix by Gauss-Jordan elimination.

        The augmented matrix ``[A | I]`` is reduced row by row; after each
        pivot column is cleared the right half holds ``A^-1``.  Rows are
        swapped so the largest remaining entry in the pivot column is used
        (partial pivoting).

        Raises
        ------
        ShapeMismatchError
            If the matrix is not square.
        SingularMatrixError
            If a pivot is zero, i.e. the matrix is singular.
        """
        if self.rows != self.cols:
            raise ShapeMismatchError("Only square matrices can be inverted.")
        n = self.rows
        aug = np.hstack([self._data.astype(float), np.eye(n)])

        for i in range(n):
            p = i + int(np.argmax(np.abs(aug[i:, i])))
            if aug[p, i] == 0.0:
                raise SingularMatrixError("Matrix is singular and cannot be inverted.")
            if p != i:
                aug[[i, p]] = aug[[p, i]]
            aug[i] /= aug[i, i]
            for k in range(n):
                if k != i:
                    aug[k] -= aug[k, i] * aug[i]

        return Matrix(aug[:, n:])

    def __array__(self, dtype=None, copy=None):
        if dtype is not None:
            return self._data.astype(dtype)
        return self._data.copy() if copy else self._data

    def __len__(self) -> int:
        return self.rows

    def __getitem__(self, i):
        return self._data[i]

    def __matmul__(self, other) -> "Matrix":
        return self.dot(other)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Matrix(rows={self.rows}, cols={self.cols})"
