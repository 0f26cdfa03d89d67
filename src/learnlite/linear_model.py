"""
learnlite.linear_model
======================

Linear and logistic regression.

- ``LinearRegression`` solves ordinary least squares through the normal
  equations ``theta = (Xb^T Xb)^-1 Xb^T y`` with :class:`~learnlite.matrix.Matrix`,
  where ``Xb`` is ``X`` with a leading column of ones.
- ``LogisticRegression`` is a binary classifier trained by batch gradient
  descent on the log loss.
- ``MultiClassLogisticRegression`` combines one binary model per class
  (one-vs-rest).
"""

from __future__ import annotations

import numpy as np
from loguru import logger

from .base import BaseModel
from .matrix import Matrix


def add_bias(X: np.ndarray) -> np.ndarray:
    """Prepend a column of ones to ``X``."""
    return np.hstack([np.ones((X.shape[0], 1)), X])


def sigmoid(z):
    return 1.0 / (1.0 + np.exp(-z))


class LinearRegression(BaseModel):
    """
    Ordinary least squares.

    Attributes
    ----------
    coefficients_ : ndarray of shape (n_features + 1,)
        Bias first, then one weight per feature.
    intercept_ : float
    coef_ : ndarray of shape (n_features,)

    Raises
    ------
    SingularMatrixError
        From ``fit`` when ``Xb^T Xb`` cannot be inverted (e.g. collinear
        columns or fewer rows than coefficients).
    """

    _fitted_attrs = ("coefficients_", "n_features_")

    def __init__(self):
        pass

    def _predicts_classes(self) -> bool:
        return False

    def fit(self, X, y):
        X, y = self._validate_training_data(X, y)
        logger.debug("Fitting LinearRegression on {} rows x {} features", X.shape[0], X.shape[1])
        Xb = Matrix(add_bias(X))
        XT = Xb.transpose()
        theta = XT.dot(Xb).inverse().dot(XT.dot(y.reshape(-1, 1)))

        self.coefficients_ = np.asarray(theta).ravel().copy()
        self.n_features_ = X.shape[1]
        return self

    @property
    def intercept_(self) -> float:
        self._check_is_fitted()
        return float(self.coefficients_[0])

    @property
    def coef_(self) -> np.ndarray:
        self._check_is_fitted()
        return self.coefficients_[1:]

    def predict(self, X):
        X = self._validate_prediction_data(X)
        return add_bias(X) @ self.coefficients_


class LogisticRegression(BaseModel):
    """
    Binary logistic regression trained by batch gradient descent.

    Coefficients start at zero and are updated ``iterations`` times with the
    mean log-loss gradient scaled by ``learning_rate``.  Labels must be 0 or 1.

    Parameters
    ----------
    learning_rate : float, default=0.1
    iterations : int, default=1000

    Attributes
    ----------
    coefficients_ : ndarray of shape (n_features + 1,)
        Bias first.
    """

    _fitted_attrs = ("coefficients_", "n_features_")

    def __init__(self, *, learning_rate: float = 0.1, iterations: int = 1000):
        self.learning_rate = learning_rate
        self.iterations = iterations

    def _check_params(self) -> None:
        if float(self.learning_rate) <= 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate!r}")
        if int(self.iterations) < 0:
            raise ValueError(f"iterations must be non-negative, got {self.iterations!r}")

    def fit(self, X, y):
        self._check_params()
        X, y = self._validate_training_data(X, y)
        if not np.all((y == 0.0) | (y == 1.0)):
            raise ValueError("LogisticRegression expects binary labels 0 and 1")
        logger.debug(
            "Fitting LogisticRegression(learning_rate={}, iterations={}) on {} rows x {} features",
            self.learning_rate, self.iterations, X.shape[0], X.shape[1],
        )
        Xb = add_bias(X)
        n = Xb.shape[0]
        lr = float(self.learning_rate)
        theta = np.zeros(Xb.shape[1])
        for _ in range(int(self.iterations)):
            grad = Xb.T @ (sigmoid(Xb @ theta) - y)
            theta -= lr * grad / n

        self.coefficients_ = theta
        self.n_features_ = X.shape[1]
        return self

    def predict_proba(self, X):
        """Probability of the positive class for each row."""
        X = self._validate_prediction_data(X)
        return sigmoid(add_bias(X) @ self.coefficients_)

    def predict(self, X):
        return (self.predict_proba(X) >= 0.5).astype(float)


class MultiClassLogisticRegression(BaseModel):
    """
    One-vs-rest logistic regression.

    One :class:`LogisticRegression` is trained per class on the labels
    ``y == class``; a row is assigned the class whose model is most confident
    (the first class in sorted order on ties).

    Parameters
    ----------
    learning_rate : float, default=0.1
    iterations : int, default=1000

    Attributes
    ----------
    classes_ : ndarray of shape (n_classes,)
    estimators_ : list[LogisticRegression]
        One binary model per entry of ``classes_``.
    """

    _fitted_attrs = ("classes_", "estimators_", "n_features_")

    def __init__(self, *, learning_rate: float = 0.1, iterations: int = 1000):
        self.learning_rate = learning_rate
        self.iterations = iterations

    def fit(self, X, y):
        X, y = self._validate_training_data(X, y)
        classes = np.unique(y)
        logger.debug("Fitting MultiClassLogisticRegression on {} rows, {} classes", X.shape[0], len(classes))
        estimators = [
            LogisticRegression(learning_rate=self.learning_rate, iterations=self.iterations).fit(
                X, (y == c).astype(float)
            )
            for c in classes
        ]

        self.classes_ = classes
        self.estimators_ = estimators
        self.n_features_ = X.shape[1]
        return self

    def predict_proba(self, X):
        """Per-class positive probabilities, shape (n_samples, n_classes).  Rows need not sum to 1."""
        X = self._validate_prediction_data(X)
        return np.column_stack([est.predict_proba(X) for est in self.estimators_])

    def predict(self, X):
        return self.classes_[np.argmax(self.predict_proba(X), axis=1)]
