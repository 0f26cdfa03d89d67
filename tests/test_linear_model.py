import numpy as np
import pytest
from learnlite import LinearRegression, LogisticRegression, MultiClassLogisticRegression
from learnlite.exceptions import NotFittedError, SingularMatrixError
from learnlite.metrics import accuracy, cross_entropy


def test_linear_regression_recovers_coefficients():
    rng = np.random.default_rng(0)
    X = rng.normal(size=(30, 2))
    y = 1.0 + 2.0 * X[:, 0] - 3.0 * X[:, 1]
    lr = LinearRegression().fit(X, y)
    assert np.allclose(lr.coefficients_, [1.0, 2.0, -3.0])
    assert lr.intercept_ == pytest.approx(1.0)
    assert np.allclose(lr.coef_, [2.0, -3.0])
    assert np.allclose(lr.predict(X), y)
    # regressors default to r2
    assert lr.score(X, y) == pytest.approx(1.0)


def test_linear_regression_singular_design():
    # a constant column is collinear with the bias term
    X = np.ones((3, 1))
    with pytest.raises(SingularMatrixError):
        LinearRegression().fit(X, [1.0, 2.0, 3.0])
    with pytest.raises(NotFittedError):
        LinearRegression().coef_


def test_logistic_regression_separable():
    X = np.array([[-2.0], [-1.0], [1.0], [2.0]])
    y = np.array([0.0, 0.0, 1.0, 1.0])
    clf = LogisticRegression().fit(X, y)
    proba = clf.predict_proba(X)
    assert np.all((proba > 0) & (proba < 1))
    assert np.all(np.diff(proba) > 0)
    assert clf.predict(X).tolist() == y.tolist()
    assert clf.score(X, y, accuracy) == 1.0
    assert cross_entropy(y, proba) < 0.5


def test_logistic_regression_requires_binary_labels():
    X = np.array([[0.0], [1.0], [2.0]])
    with pytest.raises(ValueError):
        LogisticRegression().fit(X, [0.0, 1.0, 2.0])
    with pytest.raises(ValueError):
        LogisticRegression(learning_rate=0.0).fit(X, [0.0, 1.0, 1.0])


def test_logistic_regression_zero_iterations_is_uninformed():
    X = np.array([[0.0], [1.0]])
    clf = LogisticRegression(iterations=0).fit(X, [0.0, 1.0])
    assert clf.predict_proba(X).tolist() == [0.5, 0.5]


def test_multiclass_logistic_regression():
    offsets = np.array([[0.0, 0.0], [0.5, 0.0], [0.0, 0.5], [-0.5, -0.5]])
    centers = np.array([[0.0, 6.0], [6.0, 0.0], [-6.0, -6.0]])
    X = np.vstack([c + offsets for c in centers])
    y = np.repeat([0.0, 1.0, 2.0], len(offsets))
    clf = MultiClassLogisticRegression().fit(X, y)
    assert clf.classes_.tolist() == [0.0, 1.0, 2.0]
    assert len(clf.estimators_) == 3
    assert clf.predict_proba(X).shape == (12, 3)
    assert clf.predict(X).tolist() == y.tolist()
