import numpy as np
import pytest
from learnlite import (
    DecisionTree,
    GaussianNB,
    KNearestNeighbors,
    LinearRegression,
    LogisticRegression,
    MultiClassLogisticRegression,
    MultinomialNB,
)


def _tiny_dataset():
    X = np.array([[1.0, 0.0], [2.0, 1.0], [3.0, 0.0], [4.0, 1.0], [5.0, 2.0], [6.0, 3.0]])
    y = np.array([0.0, 0.0, 0.0, 1.0, 1.0, 1.0])
    return X, y


@pytest.mark.parametrize("estimator", [
    DecisionTree(),
    DecisionTree(task="regression"),
    KNearestNeighbors(k=3),
    KNearestNeighbors(k=2, task="regression"),
    GaussianNB(),
    MultinomialNB(),
    LinearRegression(),
    LogisticRegression(),
    MultiClassLogisticRegression(iterations=200),
])
def test_uniform_contract(estimator, tmp_path):
    X, y = _tiny_dataset()
    assert estimator.fit(X, y) is estimator
    pred = estimator.predict(X)
    assert pred.shape == y.shape
    assert pred.dtype == float
    # any metric(y_true, y_pred) works with score
    assert estimator.score(X, y, lambda t, p: float(len(t))) == len(y)
    assert isinstance(estimator.get_params(), dict)
    path = tmp_path / "model.joblib"
    estimator.save(path)
    restored = type(estimator)().load(path)
    assert np.array_equal(restored.predict(X), pred)
