"""
learnlite.base
==============

Shared estimator plumbing.  Every estimator in the toolkit derives from
:class:`BaseModel`, which layers the toolkit contract on top of
scikit-learn's ``BaseEstimator``:

- ``fit(X, y)`` / ``predict(X)`` are implemented by each estimator;
- ``score(X, y, metric)`` applies any ``metric(y_true, y_pred)`` function;
- ``get_params()`` / ``set_params(**params)`` expose the constructor
  hyperparameters, and unknown keys passed to ``set_params`` are ignored;
- ``save(path)`` / ``load(path)`` persist the complete estimator state with
  joblib.
"""

from __future__ import annotations

import pickle
from typing import Callable, Sequence

import joblib
import numpy as np
from loguru import logger
from sklearn.base import BaseEstimator

from .exceptions import (
    EmptyDatasetError,
    FeatureDimensionError,
    NotFittedError,
    PersistenceError,
    ShapeMismatchError,
)

Metric = Callable[[np.ndarray, np.ndarray], float]

# Errors a corrupt or foreign payload can surface while unpickling.
_DECODE_ERRORS = (
    pickle.UnpicklingError,
    EOFError,
    ValueError,
    KeyError,
    IndexError,
    TypeError,
    AttributeError,
    ImportError,
)


def as_table(X) -> np.ndarray:
    """Coerce ``X`` to a 2-D float array."""
    X = np.asarray(X, dtype=float)
    if X.ndim != 2:
        raise ShapeMismatchError(f"Expected a 2-D table of features, got an array with {X.ndim} dimension(s).")
    return X


def as_labels(y) -> np.ndarray:
    """Coerce ``y`` to a 1-D float array."""
    y = np.asarray(y, dtype=float)
    if y.ndim != 1:
        raise ShapeMismatchError(f"Expected a 1-D label vector, got an array with {y.ndim} dimension(s).")
    return y


class BaseModel(BaseEstimator):
    """Base class for all learnlite estimators.

    Subclasses list the attributes that only exist after ``fit`` in
    ``_fitted_attrs``; they are checked by :meth:`_check_is_fitted`.
    """

    _fitted_attrs: Sequence[str] = ("n_features_",)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------
    def _check_is_fitted(self) -> None:
        if any(getattr(self, attr, None) is None for attr in self._fitted_attrs):
            raise NotFittedError(type(self).__name__)

    def _validate_training_data(self, X, y) -> tuple[np.ndarray, np.ndarray]:
        X = as_table(X)
        y = as_labels(y)
        if X.shape[0] != y.shape[0]:
            raise ShapeMismatchError(rows=X.shape[0], labels=y.shape[0])
        if y.shape[0] == 0:
            raise EmptyDatasetError(type(self).__name__)
        if X.shape[1] == 0:
            raise ShapeMismatchError("X must have at least one feature column.")
        return X, y

    def _validate_prediction_data(self, X) -> np.ndarray:
        self._check_is_fitted()
        X = as_table(X)
        if X.shape[1] != self.n_features_:
            raise FeatureDimensionError(expected=self.n_features_, got=X.shape[1])
        return X

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------
    def _predicts_classes(self) -> bool:
        # the fitted task wins over a ``task`` changed since the last fit
        task = getattr(self, "task_", None) or getattr(self, "task", "classification")
        return task == "classification"

    def score(self, X, y, metric: Metric | None = None) -> float:
        """
        Score predictions on ``X`` against ``y``.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Input samples.
        y : array-like of shape (n_samples,)
            True labels or targets.
        metric : callable, optional
            ``metric(y_true, y_pred) -> float``.  Defaults to
            :func:`learnlite.metrics.accuracy` for classifiers and
            :func:`learnlite.metrics.r2_score` for regressors.

        Returns
        -------
        float
        """
        from . import metrics

        self._check_is_fitted()
        if metric is None:
            metric = metrics.accuracy if self._predicts_classes() else metrics.r2_score
        y_true = as_labels(y)
        return float(metric(y_true, self.predict(X)))

    # ------------------------------------------------------------------
    # Params
    # ------------------------------------------------------------------
    def set_params(self, **params):
        """
        Set hyperparameters.  Unrecognized keys are ignored with a warning.

        Returns
        -------
        self
        """
        valid = self.get_params(deep=False)
        unknown = sorted(k for k in params if k not in valid)
        if unknown:
            logger.warning("Ignoring unrecognized parameters for {}: {}", type(self).__name__, unknown)
        known = {k: v for k, v in params.items() if k in valid}
        return super().set_params(**known)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _snapshot_state(self) -> dict:
        """Instance fields as written into a snapshot."""
        return dict(self.__dict__)

    def _restore_snapshot_state(self, state) -> dict:
        """Inverse of :meth:`_snapshot_state`; must not touch ``self``."""
        return dict(state)

    def save(self, path) -> None:
        """
        Write a snapshot of the whole estimator (hyperparameters and learned
        state) to ``path``.

        OS errors (missing directory, permission denied) propagate unchanged.
        """
        from . import __version__

        snapshot = {
            "estimator": type(self).__name__,
            "version": __version__,
            "state": self._snapshot_state(),
        }
        joblib.dump(snapshot, path)
        logger.info("Saved {} to {}", type(self).__name__, path)

    def load(self, path):
        """
        Replace every field of this estimator with the snapshot at ``path``.

        Returns
        -------
        self

        Raises
        ------
        PersistenceError
            If the file is not a learnlite snapshot or was written by a
            different estimator class.
        """
        from . import __version__

        try:
            snapshot = joblib.load(path)
        except _DECODE_ERRORS as exc:
            raise PersistenceError(f"Could not decode snapshot at {path}: {exc}") from exc

        if not isinstance(snapshot, dict) or not {"estimator", "state"} <= snapshot.keys():
            raise PersistenceError(f"{path} does not contain a learnlite snapshot.")
        if snapshot["estimator"] != type(self).__name__:
            raise PersistenceError(
                f"Snapshot at {path} holds a {snapshot['estimator']}, cannot load it into {type(self).__name__}."
            )
        if snapshot.get("version") != __version__:
            logger.warning(
                "Snapshot at {} was written by learnlite {}, running {}",
                path,
                snapshot.get("version"),
                __version__,
            )

        try:
            state = self._restore_snapshot_state(snapshot["state"])
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise PersistenceError(f"Snapshot at {path} has a malformed state: {exc}") from exc

        self.__dict__.clear()
        self.__dict__.update(state)
        logger.info("Loaded {} from {}", type(self).__name__, path)
        return self
