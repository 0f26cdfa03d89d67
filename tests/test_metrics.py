import numpy as np
import pytest
from sklearn import metrics as skm
from learnlite import metrics
from learnlite.exceptions import ShapeMismatchError


def _binary():
    y_true = np.array([1, 0, 1, 1, 0, 0, 1, 0], dtype=float)
    y_pred = np.array([1, 0, 0, 1, 1, 0, 1, 0], dtype=float)
    return y_true, y_pred


def _continuous():
    rng = np.random.default_rng(0)
    y_true = rng.normal(size=20)
    y_pred = y_true + rng.normal(scale=0.3, size=20)
    return y_true, y_pred


def test_classification_metrics_match_sklearn():
    y_true, y_pred = _binary()
    assert metrics.accuracy(y_true, y_pred) == pytest.approx(skm.accuracy_score(y_true, y_pred))
    assert metrics.precision(y_true, y_pred) == pytest.approx(skm.precision_score(y_true, y_pred))
    assert metrics.recall(y_true, y_pred) == pytest.approx(skm.recall_score(y_true, y_pred))


def test_cross_entropy_matches_sklearn():
    y_true = np.array([1.0, 0.0, 1.0, 0.0])
    proba = np.array([0.9, 0.2, 0.6, 0.4])
    assert metrics.cross_entropy(y_true, proba) == pytest.approx(skm.log_loss(y_true, proba))
    # confident mistakes are clipped rather than infinite
    assert np.isfinite(metrics.cross_entropy([1.0], [0.0]))


def test_regression_metrics_match_sklearn():
    y_true, y_pred = _continuous()
    assert metrics.mean_absolute_error(y_true, y_pred) == pytest.approx(skm.mean_absolute_error(y_true, y_pred))
    assert metrics.mean_squared_error(y_true, y_pred) == pytest.approx(skm.mean_squared_error(y_true, y_pred))
    assert metrics.root_mean_squared_error(y_true, y_pred) == pytest.approx(
        np.sqrt(skm.mean_squared_error(y_true, y_pred))
    )
    assert metrics.r2_score(y_true, y_pred) == pytest.approx(skm.r2_score(y_true, y_pred))


def test_edge_cases():
    assert metrics.accuracy([], []) == 0.0
    assert metrics.mean_squared_error([], []) == 0.0
    assert metrics.precision([1.0, 1.0], [0.0, 0.0]) == 0.0
    assert metrics.recall([0.0, 0.0], [1.0, 1.0]) == 0.0
    assert metrics.r2_score([2.0, 2.0], [1.0, 3.0]) == 0.0
    # labels are compared as integers
    assert metrics.accuracy([1.0, 2.0], [1.2, 2.9]) == 1.0


def test_length_mismatch_raises():
    with pytest.raises(ShapeMismatchError):
        metrics.accuracy([1.0, 0.0], [1.0])
    with pytest.raises(ShapeMismatchError):
        metrics.r2_score([1.0], [1.0, 2.0])
