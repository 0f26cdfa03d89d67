import numpy as np
import pytest
from learnlite import KNearestNeighbors
from learnlite.exceptions import FeatureDimensionError, NotFittedError


def _line_dataset():
    X = np.array([[0.0], [1.0], [2.0], [10.0], [11.0], [12.0]])
    y = np.array([0.0, 0.0, 0.0, 1.0, 1.0, 1.0])
    return X, y


def test_knn_classification():
    X, y = _line_dataset()
    knn = KNearestNeighbors(k=3).fit(X, y)
    assert knn.predict([[1.5], [9.0], [30.0]]).tolist() == [0.0, 1.0, 1.0]
    assert knn.score(X, y) == 1.0


def test_knn_regression_averages_neighbors():
    X = np.array([[0.0], [1.0], [5.0]])
    y = np.array([2.0, 4.0, 100.0])
    knn = KNearestNeighbors(k=2, task="regression").fit(X, y)
    assert knn.predict([[0.4]])[0] == 3.0


def test_knn_equal_distances_keep_training_order():
    X = np.array([[0.0], [2.0]])
    y = np.array([5.0, 3.0])
    knn = KNearestNeighbors(k=1).fit(X, y)
    dist, idx = knn.kneighbors([[1.0]])
    assert idx.tolist() == [[0]]
    assert dist.tolist() == [[1.0]]
    assert knn.predict([[1.0]])[0] == 5.0


def test_knn_vote_tie_goes_to_smallest_label():
    X = np.array([[0.0], [1.0]])
    y = np.array([4.0, 2.0])
    knn = KNearestNeighbors(k=2).fit(X, y)
    assert knn.predict([[0.0]])[0] == 2.0


def test_knn_invalid_k():
    X, y = _line_dataset()
    with pytest.raises(ValueError):
        KNearestNeighbors(k=7).fit(X, y)
    with pytest.raises(ValueError):
        KNearestNeighbors(k=0).fit(X, y)
    with pytest.raises(ValueError):
        KNearestNeighbors(task="clustering").fit(X, y)


def test_knn_errors():
    X, y = _line_dataset()
    with pytest.raises(NotFittedError):
        KNearestNeighbors().predict(X)
    knn = KNearestNeighbors().fit(X, y)
    with pytest.raises(FeatureDimensionError):
        knn.predict([[1.0, 2.0]])
