"""
learnlite.naive_bayes
=====================

Gaussian and multinomial naive Bayes classifiers.

Both estimators score every class with a joint log likelihood
``log P(c) + log P(x | c)`` and predict the best-scoring class.  Classes are
kept sorted in ``classes_``; when two classes score the same the smaller
label wins.
"""

from __future__ import annotations

import numpy as np
from loguru import logger

from .base import BaseModel


class _BaseNB(BaseModel):
    _fitted_attrs = ("classes_", "class_log_prior_", "n_features_")

    def _joint_log_likelihood(self, X: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def predict_joint_log_proba(self, X):
        """Unnormalised ``log P(c) + log P(x | c)``, shape (n_samples, n_classes)."""
        X = self._validate_prediction_data(X)
        return self._joint_log_likelihood(X)

    def predict(self, X):
        jll = self.predict_joint_log_proba(X)
        return self.classes_[np.argmax(jll, axis=1)]

    def _fit_priors(self, y: np.ndarray) -> np.ndarray:
        self.classes_, counts = np.unique(y, return_counts=True)
        self.class_log_prior_ = np.log(counts / y.shape[0])
        return counts


class GaussianNB(_BaseNB):
    """
    Gaussian naive Bayes.

    Each feature is modelled per class as a normal distribution with the
    class mean and population variance of that feature.

    Parameters
    ----------
    epsilon : float, default=1e-9
        Added to every variance so constant features do not divide by zero.

    Attributes
    ----------
    classes_ : ndarray of shape (n_classes,)
    class_log_prior_ : ndarray of shape (n_classes,)
    theta_ : ndarray of shape (n_classes, n_features)
        Per-class feature means.
    var_ : ndarray of shape (n_classes, n_features)
        Per-class feature variances (without ``epsilon``).
    """

    def __init__(self, *, epsilon: float = 1e-9):
        self.epsilon = epsilon

    def fit(self, X, y):
        if float(self.epsilon) < 0:
            raise ValueError(f"epsilon must be non-negative, got {self.epsilon!r}")
        X, y = self._validate_training_data(X, y)
        logger.debug("Fitting GaussianNB on {} rows x {} features", X.shape[0], X.shape[1])
        classes = np.unique(y)
        theta = np.array([X[y == c].mean(axis=0) for c in classes])
        var = np.array([X[y == c].var(axis=0) for c in classes])

        self._fit_priors(y)
        self.theta_ = theta
        self.var_ = var
        self.n_features_ = X.shape[1]
        return self

    def _joint_log_likelihood(self, X: np.ndarray) -> np.ndarray:
        var = self.var_ + float(self.epsilon)
        jll = np.empty((X.shape[0], len(self.classes_)), dtype=float)
        for i in range(len(self.classes_)):
            log_norm = -0.5 * np.sum(np.log(2.0 * np.pi * var[i]))
            sq = np.sum((X - self.theta_[i]) ** 2 / (2.0 * var[i]), axis=1)
            jll[:, i] = self.class_log_prior_[i] + log_norm - sq
        return jll


class MultinomialNB(_BaseNB):
    """
    Multinomial naive Bayes for count features.

    Feature probabilities are smoothed:
    ``theta_cj = (count_cj + alpha) / (sum_j count_cj + alpha * n_features)``.

    Parameters
    ----------
    alpha : float, default=1.0
        Additive (Laplace/Lidstone) smoothing.  Must be positive.

    Attributes
    ----------
    classes_ : ndarray of shape (n_classes,)
    class_log_prior_ : ndarray of shape (n_classes,)
    feature_log_prob_ : ndarray of shape (n_classes, n_features)
    """

    def __init__(self, *, alpha: float = 1.0):
        self.alpha = alpha

    def fit(self, X, y):
        if float(self.alpha) <= 0:
            raise ValueError(f"alpha must be positive, got {self.alpha!r}")
        X, y = self._validate_training_data(X, y)
        if np.any(X < 0):
            raise ValueError("MultinomialNB requires non-negative feature counts")
        logger.debug("Fitting MultinomialNB(alpha={}) on {} rows x {} features", self.alpha, X.shape[0], X.shape[1])
        alpha = float(self.alpha)
        classes = np.unique(y)
        sums = np.array([X[y == c].sum(axis=0) for c in classes])
        totals = sums.sum(axis=1, keepdims=True) + alpha * X.shape[1]

        self._fit_priors(y)
        self.feature_log_prob_ = np.log((sums + alpha) / totals)
        self.n_features_ = X.shape[1]
        return self

    def _joint_log_likelihood(self, X: np.ndarray) -> np.ndarray:
        return X @ self.feature_log_prob_.T + self.class_log_prior_
