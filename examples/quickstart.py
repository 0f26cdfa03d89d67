import numpy as np
from time import perf_counter
from learnlite import DecisionTree, KNearestNeighbors, GaussianNB, enable_logging
from learnlite.dataset import standardize, train_test_split
from learnlite.metrics import accuracy, r2_score

rng = np.random.default_rng(42)
n = 400
X = rng.normal(size=(n, 4))
y_cls = ((X[:, 0] > 0.2) & (X[:, 1] < 0.5)).astype(float)
y_reg = np.sin(2 * X[:, 0]) + 0.5 * X[:, 2] + rng.normal(scale=0.1, size=n)

X_train, X_test, y_train, y_test = train_test_split(X, y_cls, test_size=0.25, random_state=0)

with enable_logging(level="INFO"):
    clf = DecisionTree(max_depth=4, min_size=5)
    t0 = perf_counter(); clf.fit(X_train, y_train); print(f"fit: {perf_counter()-t0:.3f} s")

print(f"tree accuracy: {clf.score(X_test, y_test, accuracy):.3f}")
clf.print_tree(feature_names=["f0", "f1", "f2", "f3"])

for model in (KNearestNeighbors(k=5), GaussianNB()):
    model.fit(standardize(X_train), y_train)
    print(f"{type(model).__name__} accuracy: {model.score(standardize(X_test), y_test, accuracy):.3f}")

X_train, X_test, y_train, y_test = train_test_split(X, y_reg, test_size=0.25, random_state=0)
reg = DecisionTree(task="regression", max_depth=5).fit(X_train, y_train)
print(f"regression tree r2: {reg.score(X_test, y_test, r2_score):.3f}")

reg.save("regression_tree.joblib")
restored = DecisionTree().load("regression_tree.joblib")
assert np.array_equal(restored.predict(X_test), reg.predict(X_test))
