import joblib
import numpy as np
import pytest
from learnlite import DecisionTree, KNearestNeighbors
from learnlite.exceptions import PersistenceError


def _dataset(seed=0):
    rng = np.random.default_rng(seed)
    X = rng.normal(size=(60, 3))
    y_cls = (X[:, 0] * X[:, 1] > 0).astype(float)
    y_reg = X[:, 0] ** 2 + X[:, 2]
    return X, y_cls, y_reg


@pytest.mark.parametrize("task", ["classification", "regression"])
def test_save_load_predictions_are_identical(task, tmp_path):
    X, y_cls, y_reg = _dataset()
    tree = DecisionTree(task=task, max_depth=6).fit(X, y_cls if task == "classification" else y_reg)
    path = tmp_path / "tree.joblib"
    tree.save(path)

    restored = DecisionTree().load(path)
    X_new = np.random.default_rng(5).normal(size=(25, 3))
    assert np.array_equal(restored.predict(X), tree.predict(X))
    assert np.array_equal(restored.predict(X_new), tree.predict(X_new))
    assert restored.export_rules() == tree.export_rules()


def test_load_overwrites_every_field(tmp_path):
    X, y_cls, _ = _dataset()
    tree = DecisionTree(max_depth=3, min_size=4).fit(X, y_cls)
    path = tmp_path / "tree.joblib"
    tree.save(path)

    target = DecisionTree(task="regression", max_depth=9, min_size=1)
    assert target.load(path) is target
    assert target.get_params() == {"task": "classification", "max_depth": 3, "min_size": 4}
    assert target.task_ == "classification"
    assert target.get_depth() == tree.get_depth()


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        DecisionTree().load(tmp_path / "missing.joblib")


def test_save_into_missing_directory_raises(tmp_path):
    X, y_cls, _ = _dataset()
    tree = DecisionTree().fit(X, y_cls)
    with pytest.raises(OSError):
        tree.save(tmp_path / "no" / "such" / "dir" / "tree.joblib")


def test_load_corrupt_file_raises(tmp_path):
    path = tmp_path / "corrupt.joblib"
    path.write_bytes(b"\x00\x01 not a snapshot")
    with pytest.raises(PersistenceError):
        DecisionTree().load(path)


def test_load_foreign_payload_raises(tmp_path):
    path = tmp_path / "list.joblib"
    joblib.dump([1, 2, 3], path)
    with pytest.raises(PersistenceError):
        DecisionTree().load(path)


def test_load_other_estimator_snapshot_raises(tmp_path):
    X, y_cls, _ = _dataset()
    knn = KNearestNeighbors(k=1).fit(X, y_cls)
    path = tmp_path / "knn.joblib"
    knn.save(path)
    tree = DecisionTree()
    with pytest.raises(PersistenceError):
        tree.load(path)
    # the failed load leaves the estimator untouched
    assert tree.get_params() == {"task": "classification", "max_depth": 10, "min_size": 2}


def test_save_load_deep_tree(tmp_path):
    X = np.arange(300, dtype=float).reshape(-1, 1)
    y = np.arange(300, dtype=float) % 2
    tree = DecisionTree(max_depth=1000, min_size=1).fit(X, y)
    path = tmp_path / "deep.joblib"
    tree.save(path)

    restored = DecisionTree().load(path)
    assert restored.get_depth() == tree.get_depth() == 299
    assert np.array_equal(restored.predict(X), tree.predict(X))
    assert restored.export_rules() == tree.export_rules()


def test_load_malformed_tree_state_raises(tmp_path):
    path = tmp_path / "malformed.joblib"
    joblib.dump({"estimator": "DecisionTree", "version": "0.1.0", "state": {"root_": [(False, 2, 0, 1.0, None, None)]}}, path)
    tree = DecisionTree(max_depth=4)
    with pytest.raises(PersistenceError):
        tree.load(path)
    assert tree.max_depth == 4
