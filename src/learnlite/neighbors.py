"""
learnlite.neighbors
===================

k-nearest-neighbors prediction by Euclidean distance.
"""

from __future__ import annotations

import numpy as np
from loguru import logger

from .base import BaseModel
from .tree import majority_label

_TASKS = ("classification", "regression")


class KNearestNeighbors(BaseModel):
    """
    k-nearest-neighbors classifier / regressor.

    ``fit`` only memorises the training table.  ``predict`` ranks training
    rows by Euclidean distance to each query row (stable, so equal distances
    keep training order) and answers with the majority label of the ``k``
    closest rows (smallest label on ties) or, for regression, their mean
    target.

    Parameters
    ----------
    k : int, default=3
        Number of neighbors consulted.  Must not exceed the number of
        training rows.
    task : {"classification", "regression"}, default="classification"

    Attributes
    ----------
    X_train_ : ndarray of shape (n_samples, n_features)
    y_train_ : ndarray of shape (n_samples,)
    n_features_ : int
    task_ : str
        The task recorded at ``fit``; ``predict`` follows it.
    """

    _fitted_attrs = ("X_train_", "y_train_", "n_features_", "task_")

    def __init__(self, *, k: int = 3, task: str = "classification"):
        self.k = k
        self.task = task

    def fit(self, X, y):
        if self.task not in _TASKS:
            raise ValueError(f"task must be one of {list(_TASKS)}, got {self.task!r}")
        X, y = self._validate_training_data(X, y)
        if not 1 <= int(self.k) <= X.shape[0]:
            raise ValueError(f"k must be between 1 and the number of training rows ({X.shape[0]}), got {self.k!r}")
        logger.debug("Fitting KNearestNeighbors(k={}, task={}) on {} rows x {} features",
                     self.k, self.task, X.shape[0], X.shape[1])
        self.X_train_ = X.copy()
        self.y_train_ = y.copy()
        self.n_features_ = X.shape[1]
        self.task_ = self.task
        return self

    def kneighbors(self, X) -> tuple[np.ndarray, np.ndarray]:
        """
        Distances to and indices of the ``k`` nearest training rows.

        Returns
        -------
        distances : ndarray of shape (n_queries, k)
        indices : ndarray of shape (n_queries, k)
        """
        X = self._validate_prediction_data(X)
        k = int(self.k)
        diff = X[:, None, :] - self.X_train_[None, :, :]
        dist = np.sqrt(np.sum(diff * diff, axis=2))
        idx = np.argsort(dist, axis=1, kind="stable")[:, :k]
        return np.take_along_axis(dist, idx, axis=1), idx

    def predict(self, X):
        _, idx = self.kneighbors(X)
        labels = self.y_train_[idx]
        if self.task_ == "regression":
            return labels.mean(axis=1)
        out = np.empty(labels.shape[0], dtype=float)
        for i, row in enumerate(labels):
            vals, counts = np.unique(row, return_counts=True)
            out[i] = majority_label(dict(zip(vals.tolist(), counts.tolist())))
        return out
