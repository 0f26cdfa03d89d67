"""
learnlite.metrics
=================

Scoring functions with the signature ``metric(y_true, y_pred) -> float``.
Any of them can be handed to an estimator's ``score`` method.

Conventions shared by every metric:

- ``y_true`` and ``y_pred`` are coerced to 1-D float arrays.
- Inputs of different lengths raise :class:`~learnlite.exceptions.ShapeMismatchError`.
- Empty inputs score ``0.0``.
"""

from __future__ import annotations

import numpy as np

from .exceptions import ShapeMismatchError

__all__ = [
    "accuracy",
    "precision",
    "recall",
    "cross_entropy",
    "mean_absolute_error",
    "mean_squared_error",
    "root_mean_squared_error",
    "r2_score",
]

_EPS = 1e-15


def _pair(y_true, y_pred) -> tuple[np.ndarray, np.ndarray]:
    t = np.asarray(y_true, dtype=float).ravel()
    p = np.asarray(y_pred, dtype=float).ravel()
    if t.shape[0] != p.shape[0]:
        raise ShapeMismatchError(f"y_true has {t.shape[0]} entries but y_pred has {p.shape[0]}.")
    return t, p


# -----------------------------------------------------------------------------
# Classification
# -----------------------------------------------------------------------------
def accuracy(y_true, y_pred) -> float:
    """Fraction of predictions equal to the truth (labels truncated to int)."""
    t, p = _pair(y_true, y_pred)
    if t.size == 0:
        return 0.0
    return float(np.mean(t.astype(int) == p.astype(int)))


def precision(y_true, y_pred) -> float:
    """Binary precision ``tp / (tp + fp)`` with ``1`` as the positive class."""
    t, p = _pair(y_true, y_pred)
    predicted_pos = p.astype(int) == 1
    tp = np.sum(predicted_pos & (t.astype(int) == 1))
    denom = np.sum(predicted_pos)
    return float(tp / denom) if denom else 0.0


def recall(y_true, y_pred) -> float:
    """Binary recall ``tp / (tp + fn)`` with ``1`` as the positive class."""
    t, p = _pair(y_true, y_pred)
    actual_pos = t.astype(int) == 1
    tp = np.sum(actual_pos & (p.astype(int) == 1))
    denom = np.sum(actual_pos)
    return float(tp / denom) if denom else 0.0


def cross_entropy(y_true, y_pred) -> float:
    """
    Mean binary log loss.

    ``y_pred`` holds probabilities of the positive class; they are clipped to
    ``[1e-15, 1 - 1e-15]`` so a confident wrong answer costs a large but
    finite amount.
    """
    t, p = _pair(y_true, y_pred)
    if t.size == 0:
        return 0.0
    p = np.clip(p, _EPS, 1.0 - _EPS)
    pos = t.astype(int) == 1
    losses = np.where(pos, -np.log(p), -np.log(1.0 - p))
    return float(losses.mean())


# -----------------------------------------------------------------------------
# Regression
# -----------------------------------------------------------------------------
def mean_absolute_error(y_true, y_pred) -> float:
    t, p = _pair(y_true, y_pred)
    if t.size == 0:
        return 0.0
    return float(np.mean(np.abs(t - p)))


def mean_squared_error(y_true, y_pred) -> float:
    t, p = _pair(y_true, y_pred)
    if t.size == 0:
        return 0.0
    return float(np.mean((t - p) ** 2))


def root_mean_squared_error(y_true, y_pred) -> float:
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


def r2_score(y_true, y_pred) -> float:
    """Coefficient of determination; ``0.0`` when ``y_true`` is constant."""
    t, p = _pair(y_true, y_pred)
    if t.size == 0:
        return 0.0
    ss_res = float(np.sum((t - p) ** 2))
    ss_tot = float(np.sum((t - t.mean()) ** 2))
    if ss_tot == 0.0:
        return 0.0
    return 1.0 - ss_res / ss_tot
