"""
learnlite.dataset
=================

Loading, splitting and preprocessing helpers for numeric datasets.

Every function accepts array-likes (including :class:`~learnlite.matrix.Matrix`)
and returns new ``numpy`` arrays; inputs are never modified.
"""

from __future__ import annotations

import numpy as np

from .base import as_labels, as_table
from .exceptions import ShapeMismatchError


def _paired(X, y) -> tuple[np.ndarray, np.ndarray]:
    X = as_table(X)
    y = as_labels(y)
    if X.shape[0] != y.shape[0]:
        raise ShapeMismatchError(rows=X.shape[0], labels=y.shape[0])
    return X, y


def train_test_split(X, y, test_size: float = 0.2, random_state=None):
    """
    Randomly partition rows into a training and a test set.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_features)
    y : array-like of shape (n_samples,)
    test_size : float, default=0.2
        Fraction of rows in the test set, strictly between 0 and 1.  The test
        set holds ``floor(n_samples * test_size)`` rows.
    random_state : int, numpy.random.Generator or None
        Seed for the permutation.

    Returns
    -------
    X_train, X_test, y_train, y_test : ndarray
    """
    X, y = _paired(X, y)
    if not 0.0 < test_size < 1.0:
        raise ValueError(f"test_size must be between 0 and 1, got {test_size!r}")
    n_test = int(X.shape[0] * test_size)
    perm = np.random.default_rng(random_state).permutation(X.shape[0])
    test_idx, train_idx = perm[:n_test], perm[n_test:]
    return X[train_idx], X[test_idx], y[train_idx], y[test_idx]


def shuffle(X, y, random_state=None) -> tuple[np.ndarray, np.ndarray]:
    """Apply the same random permutation to the rows of ``X`` and ``y``."""
    X, y = _paired(X, y)
    perm = np.random.default_rng(random_state).permutation(X.shape[0])
    return X[perm], y[perm]


def normalize(X) -> np.ndarray:
    """Min-max scale each column to ``[0, 1]``; constant columns become 0.

    A table without rows comes back as an empty copy.
    """
    X = as_table(X)
    if X.shape[0] == 0:
        return X.copy()
    lo = X.min(axis=0)
    span = X.max(axis=0) - lo
    safe = np.where(span == 0, 1.0, span)
    return np.where(span == 0, 0.0, (X - lo) / safe)


def standardize(X) -> np.ndarray:
    """Z-score each column (population std); constant columns become 0."""
    X = as_table(X)
    if X.shape[0] == 0:
        return X.copy()
    mean = X.mean(axis=0)
    std = X.std(axis=0)
    safe = np.where(std == 0, 1.0, std)
    return np.where(std == 0, 0.0, (X - mean) / safe)


def one_hot_encode(y) -> np.ndarray:
    """
    One-hot encode non-negative integer labels.

    The output has ``max(y) + 1`` columns, so labels that never occur still
    get a (zero) column.
    """
    y = np.asarray(y)
    if y.ndim != 1:
        raise ShapeMismatchError(f"Expected a 1-D label vector, got an array with {y.ndim} dimension(s).")
    if y.size == 0:
        return np.zeros((0, 0))
    labels = y.astype(int)
    if np.any(labels < 0) or np.any(labels != y):
        raise ValueError("one_hot_encode expects non-negative integer labels")
    out = np.zeros((labels.shape[0], labels.max() + 1))
    out[np.arange(labels.shape[0]), labels] = 1.0
    return out


def drop_nan(X, y) -> tuple[np.ndarray, np.ndarray]:
    """Remove every row of ``X`` (and its label) that contains a NaN."""
    X, y = _paired(X, y)
    keep = ~np.isnan(X).any(axis=1)
    return X[keep], y[keep]


def impute_nan(X, strategy: str = "mean") -> np.ndarray:
    """
    Replace NaNs column by column.

    Parameters
    ----------
    strategy : str, default="mean"
        ``"mean"`` or ``"median"`` of the column's known values; any other
        value fills with 0.  A column with no known values is filled with 0.
    """
    X = as_table(X)
    out = X.copy()
    for j in range(X.shape[1]):
        col = X[:, j]
        missing = np.isnan(col)
        if not missing.any():
            continue
        known = col[~missing]
        if known.size == 0:
            fill = 0.0
        elif strategy == "mean":
            fill = float(known.mean())
        elif strategy == "median":
            fill = float(np.median(known))
        else:
            fill = 0.0
        out[missing, j] = fill
    return out


def load_csv(path, has_header: bool = False) -> tuple[np.ndarray, np.ndarray]:
    """
    Load a numeric CSV file.

    All columns but the last are features; the last column is the target.

    Returns
    -------
    X : ndarray of shape (n_rows, n_columns - 1)
    y : ndarray of shape (n_rows,)

    Raises
    ------
    ValueError
        If a value is not numeric or the file has fewer than two columns.
    OSError
        If the file cannot be read.
    """
    data = np.loadtxt(path, delimiter=",", skiprows=1 if has_header else 0, ndmin=2, dtype=float)
    if data.shape[0] and data.shape[1] < 2:
        raise ValueError("CSV rows must have at least 2 columns")
    return data[:, :-1], data[:, -1]
