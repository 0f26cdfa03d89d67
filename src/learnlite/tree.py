# -*- coding: utf-8 -*-
"""
learnlite.tree
==============

This module implements a CART-style decision tree for classification and
regression.  The tree is grown greedily: at every node each distinct value of
each feature is tried as a threshold, rows with ``x[feature] < threshold`` go
left and the rest go right, and the candidate with the lowest impurity wins.
Classification trees score candidates with weighted Gini impurity; regression
trees with the summed squared deviation of each side from its own mean.

Growth at a node stops when the node is at ``max_depth``, holds ``min_size``
rows or fewer, holds a single distinct label, or has no feature/threshold that
puts rows on both sides.  Classification leaves keep the label counts of the
rows that reached them; regression leaves keep their mean.

The module also contains the ``TreeNode`` class which holds the data
structure for each node in the tree (internal or leaf), the impurity helpers
and the split search, all usable on their own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, NamedTuple

import numpy as np
from loguru import logger

from .base import BaseModel


# -----------------------------------------------------------------------------
# Impurity
# -----------------------------------------------------------------------------
def gini_impurity(y: np.ndarray) -> float:
    """``1 - sum(p_c ** 2)`` over the label frequencies of ``y``."""
    n = y.shape[0]
    if n == 0:
        return 0.0
    _, counts = np.unique(y, return_counts=True)
    p = counts / n
    return float(1.0 - np.sum(p * p))


def weighted_gini(y_left: np.ndarray, y_right: np.ndarray) -> float:
    """Gini impurity of a split, each side weighted by its share of rows."""
    n_left, n_right = y_left.shape[0], y_right.shape[0]
    n = n_left + n_right
    return (n_left / n) * gini_impurity(y_left) + (n_right / n) * gini_impurity(y_right)


def sum_squared_error(y: np.ndarray) -> float:
    """Sum of squared deviations of ``y`` from its mean."""
    if y.shape[0] == 0:
        return 0.0
    return float(np.sum((y - y.mean()) ** 2))


def split_sse(y_left: np.ndarray, y_right: np.ndarray) -> float:
    """
    Regression split criterion.

    Unnormalized: ``sum((y - mean(left))**2) + sum((y - mean(right))**2)``.
    Candidates at one node all partition the same rows, so totals compare
    directly.
    """
    return sum_squared_error(y_left) + sum_squared_error(y_right)


Criterion = Callable[[np.ndarray, np.ndarray], float]

CRITERIA: dict[str, Criterion] = {
    "classification": weighted_gini,
    "regression": split_sse,
}


# -----------------------------------------------------------------------------
# Split search
# -----------------------------------------------------------------------------
class Split(NamedTuple):
    feature_index: int
    threshold: float
    score: float
    X_left: np.ndarray
    X_right: np.ndarray
    y_left: np.ndarray
    y_right: np.ndarray


def find_best_split(X: np.ndarray, y: np.ndarray, criterion: Criterion) -> Split | None:
    """
    Exhaustively search for the lowest-impurity binary split.

    Features are visited in column order and thresholds in ascending order of
    the distinct values of the column.  A candidate replaces the incumbent
    only when it scores strictly lower, so the first candidate seen wins ties.
    Candidates that leave either side empty are skipped.

    Parameters
    ----------
    X : ndarray of shape (n_samples, n_features)
        Rows reaching the node.
    y : ndarray of shape (n_samples,)
        Labels of those rows.
    criterion : callable
        ``criterion(y_left, y_right) -> float``; lower is better.

    Returns
    -------
    Split or None
        The winning split with both partitions materialised, or ``None`` when
        no candidate produces two non-empty sides.
    """
    n = y.shape[0]
    best_score = np.inf
    best = None

    for j in range(X.shape[1]):
        col = X[:, j]
        for t in np.unique(col):
            mask = col < t
            n_left = int(mask.sum())
            if n_left == 0 or n_left == n:
                continue
            score = criterion(y[mask], y[~mask])
            if score < best_score:
                best_score = score
                best = (j, t, mask)

    if best is None:
        return None
    j, t, mask = best
    return Split(j, float(t), float(best_score), X[mask], X[~mask], y[mask], y[~mask])


def majority_label(class_counts: dict) -> float:
    """Most frequent label; the smallest label wins a tie."""
    return min(class_counts.items(), key=lambda kv: (-kv[1], kv[0]))[0]


# -----------------------------------------------------------------------------
# Node
# -----------------------------------------------------------------------------
@dataclass(frozen=True, eq=False, repr=False)
class TreeNode:
    """A single node of a fitted tree.

    Internal nodes carry ``feature_index``, ``threshold`` and both children;
    rows with ``x[feature_index] < threshold`` belong to ``left``.  Leaves
    carry ``class_counts`` (classification) or ``value`` (regression).
    Nodes compare and hash by identity.
    """

    is_leaf: bool
    n_samples: int = 0
    feature_index: int | None = None
    threshold: float | None = None
    left: TreeNode | None = None
    right: TreeNode | None = None
    value: float | None = None
    class_counts: dict | None = None

    def __repr__(self) -> str:
        if self.is_leaf:
            payload = self.class_counts if self.class_counts is not None else self.value
            return f"TreeNode(leaf, n_samples={self.n_samples}, {payload})"
        return f"TreeNode(X[{self.feature_index}] < {self.threshold:g}, n_samples={self.n_samples})"

    def walk(self):
        """Yield ``(node, depth)`` for this subtree in pre-order, left first."""
        stack = [(self, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            if not node.is_leaf:
                stack.append((node.right, depth + 1))
                stack.append((node.left, depth + 1))

    @property
    def depth(self) -> int:
        return max(d for node, d in self.walk() if node.is_leaf)

    @property
    def n_leaves(self) -> int:
        return sum(1 for node, _ in self.walk() if node.is_leaf)


_NODE_FIELDS = ("is_leaf", "n_samples", "feature_index", "threshold", "value", "class_counts")


def flatten_tree(root: TreeNode) -> list[tuple]:
    """Post-order list of node records (every field except the children)."""
    records = []
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if node.is_leaf or expanded:
            records.append(tuple(getattr(node, field) for field in _NODE_FIELDS))
        else:
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
    return records


def unflatten_tree(records: list[tuple]) -> TreeNode:
    """Rebuild the node graph written by :func:`flatten_tree`."""
    built = []
    for record in records:
        fields = dict(zip(_NODE_FIELDS, record))
        if not fields["is_leaf"]:
            fields["right"] = built.pop()
            fields["left"] = built.pop()
        built.append(TreeNode(**fields))
    if len(built) != 1:
        raise ValueError(f"node records describe {len(built)} roots, expected 1")
    return built[0]


# -----------------------------------------------------------------------------
# Estimator
# -----------------------------------------------------------------------------
class DecisionTree(BaseModel):
    """
    CART decision tree for classification or regression.

    Parameters
    ----------
    task : {"classification", "regression"}, default="classification"
        Selects the split criterion (weighted Gini vs. summed squared error)
        and the leaf semantics (label counts vs. mean target).
    max_depth : int, default=10
        Nodes at this depth become leaves.  The root is at depth 0, so no
        root-to-leaf path is longer than ``max_depth``.
    min_size : int, default=2
        Nodes reached by ``min_size`` rows or fewer become leaves.

    Attributes
    ----------
    root_ : TreeNode
        Root of the fitted tree.
    n_features_ : int
        Number of columns seen during ``fit``.
    classes_ : ndarray or None
        Sorted distinct labels for classification trees, ``None`` otherwise.
    task_ : str
        The task the fitted tree was grown for.  Changing ``task`` through
        ``set_params`` only affects the next ``fit``.

    Notes
    -----
    Construction, traversal, export and persistence all use explicit stacks,
    so ``max_depth`` is not limited by Python's recursion limit.
    """

    _fitted_attrs = ("root_", "n_features_")

    def __init__(self, *, task: str = "classification", max_depth: int = 10, min_size: int = 2):
        self.task = task
        self.max_depth = max_depth
        self.min_size = min_size

    def _check_params(self) -> None:
        if self.task not in CRITERIA:
            raise ValueError(f"task must be one of {sorted(CRITERIA)}, got {self.task!r}")
        if int(self.max_depth) < 1:
            raise ValueError(f"max_depth must be a positive integer, got {self.max_depth!r}")
        if int(self.min_size) < 1:
            raise ValueError(f"min_size must be a positive integer, got {self.min_size!r}")

    def fit(self, X, y):
        """
        Grow a tree on ``X`` and ``y``, replacing any previously fitted tree.

        The new tree is assigned only once construction has finished, so a
        failed call leaves the estimator as it was.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Training data.
        y : array-like of shape (n_samples,)
            Class labels (classification) or targets (regression).

        Returns
        -------
        self

        Raises
        ------
        ShapeMismatchError
            If ``X`` and ``y`` disagree in length.
        EmptyDatasetError
            If there are no rows.
        ValueError
            If a hyperparameter is invalid.
        """
        self._check_params()
        X, y = self._validate_training_data(X, y)
        logger.debug(
            "Fitting DecisionTree(task={}, max_depth={}, min_size={}) on {} rows x {} features",
            self.task, self.max_depth, self.min_size, X.shape[0], X.shape[1],
        )

        root = self._build_tree(X, y, depth=0)

        self.task_ = self.task
        self.classes_ = np.unique(y) if self.task == "classification" else None
        self.n_features_ = X.shape[1]
        self.root_ = root
        logger.info("Fitted {} tree: depth={}, leaves={}", self.task_, root.depth, root.n_leaves)
        return self

    def predict(self, X):
        """
        Predict a label (classification) or a value (regression) per row.

        Each row descends from the root, going left while
        ``x[feature_index] < threshold``, until it reaches a leaf.  A
        classification leaf answers with its most frequent label (smallest
        label on ties); a regression leaf with its stored mean.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Input samples.

        Returns
        -------
        ndarray of shape (n_samples,)

        Raises
        ------
        NotFittedError
            If the estimator has not been fitted.
        FeatureDimensionError
            If ``X`` has a different number of columns than the training data.
        """
        X = self._validate_prediction_data(X)
        return np.array([self._leaf_value(self._find_leaf(x)) for x in X], dtype=float)

    def predict_proba(self, X):
        """
        Class frequencies of the leaf reached by each row, ordered like
        ``classes_``.  Only available for classification trees.
        """
        X = self._validate_prediction_data(X)
        if self.task_ != "classification":
            raise ValueError("predict_proba is only available for classification trees")
        out = np.zeros((X.shape[0], len(self.classes_)), dtype=float)
        for i, x in enumerate(X):
            counts = self._find_leaf(x).class_counts
            total = sum(counts.values())
            out[i] = [counts.get(float(c), 0) / total for c in self.classes_]
        return out

    def get_depth(self) -> int:
        """Length of the longest root-to-leaf path."""
        self._check_is_fitted()
        return self.root_.depth

    def get_n_leaves(self) -> int:
        self._check_is_fitted()
        return self.root_.n_leaves

    # The node graph is stored as flat records so pickling a snapshot does
    # not recurse once per tree level.
    def _snapshot_state(self) -> dict:
        state = super()._snapshot_state()
        if state.get("root_") is not None:
            state["root_"] = flatten_tree(state["root_"])
        return state

    def _restore_snapshot_state(self, state) -> dict:
        state = super()._restore_snapshot_state(state)
        if state.get("root_") is not None:
            state["root_"] = unflatten_tree(state["root_"])
        return state

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------
    def _find_leaf(self, x) -> TreeNode:
        node = self.root_
        while not node.is_leaf:
            node = node.left if x[node.feature_index] < node.threshold else node.right
        return node

    def _leaf_value(self, leaf: TreeNode) -> float:
        if self.task_ == "classification":
            return majority_label(leaf.class_counts)
        return leaf.value

    # ------------------------------------------------------------------
    # Tree construction
    # ------------------------------------------------------------------
    def _build_tree(self, X: np.ndarray, y: np.ndarray, depth: int = 0) -> TreeNode | None:
        """
        Build a decision tree from ``X`` and ``y`` with an explicit work stack.

        Parameters
        ----------
        X : ndarray of shape (n_samples, n_features)
            Training rows reaching the current node.
        y : ndarray of shape (n_samples,)
            Their labels.
        depth : int, default=0
            Depth of the current node.

        Returns
        -------
        TreeNode or None
            ``None`` when ``y`` is empty, a leaf when a stopping rule fires or
            no split exists, otherwise an internal node with both subtrees.
        """
        criterion = CRITERIA[self.task]
        # "grow" frames expand a row subset; a "join" frame pops its two
        # finished subtrees off ``built`` and wraps them in an internal node.
        built: list[TreeNode | None] = []
        stack = [("grow", X, y, depth)]
        while stack:
            frame = stack.pop()
            if frame[0] == "join":
                _, n, feature_index, threshold = frame
                right = built.pop()
                left = built.pop()
                built.append(TreeNode(
                    is_leaf=False,
                    n_samples=n,
                    feature_index=feature_index,
                    threshold=threshold,
                    left=left,
                    right=right,
                ))
                continue

            _, X, y, depth = frame
            n = y.shape[0]
            if n == 0:
                built.append(None)
                continue
            if depth >= self.max_depth or n <= self.min_size or np.all(y == y[0]):
                built.append(self._make_leaf(y))
                continue

            split = find_best_split(X, y, criterion)
            if split is None:
                built.append(self._make_leaf(y))
                continue
            logger.trace(
                "depth={} n={}: split on X[{}] < {} (score={:.6g})",
                depth, n, split.feature_index, split.threshold, split.score,
            )
            stack.append(("join", n, split.feature_index, split.threshold))
            stack.append(("grow", split.X_right, split.y_right, depth + 1))
            stack.append(("grow", split.X_left, split.y_left, depth + 1))
        return built.pop()

    def _make_leaf(self, y: np.ndarray) -> TreeNode:
        if self.task == "classification":
            labels, counts = np.unique(y, return_counts=True)
            class_counts = {float(lab): int(cnt) for lab, cnt in zip(labels, counts)}
            return TreeNode(is_leaf=True, n_samples=y.shape[0], class_counts=class_counts)
        return TreeNode(is_leaf=True, n_samples=y.shape[0], value=float(np.mean(y)))

    # ------------------------------------------------------------------
    # Rules / Graphviz / printing
    # ------------------------------------------------------------------
    def export_rules(self, feature_names=None) -> list[str]:
        """
        Export every root-to-leaf path as ``"<antecedent> => <prediction>"``.

        Parameters
        ----------
        feature_names : list[str], optional
            Names for the input features; ``X[i]`` is used otherwise.

        Returns
        -------
        list[str]
            One rule per leaf, left subtrees first.
        """
        self._check_is_fitted()
        rules: list[str] = []
        self._collect_rules(self.root_, [], rules, feature_names)
        return rules

    def print_tree(self, feature_names=None) -> None:
        """Pretty-print the fitted tree to ``stdout`` as nested if/else blocks."""
        self._check_is_fitted()
        self._print_node(self.root_, "", feature_names)

    def export_graphviz(self, filename: str | None = None, *, feature_names=None, format: str = "png") -> str:
        """
        Export the tree structure in Graphviz format.

        Requires the optional ``graphviz`` package.  With ``filename=None``
        the DOT source is returned; with ``format="dot"`` the source is saved
        without invoking the external ``dot`` binary; other formats are
        rendered, falling back to a ``.dot`` file if rendering fails.

        Returns
        -------
        str
            DOT source, or the path of the written file.
        """
        self._check_is_fitted()
        try:
            import graphviz
        except ImportError:
            raise RuntimeError("Graphviz is required for export_graphviz but not installed.")
        dot = graphviz.Digraph(format=format)
        self._add_graph_nodes(dot, self.root_, "0", feature_names)

        if filename is None:
            return dot.source
        if format.lower() == "dot":
            path = f"{filename}.dot"
            dot.save(path)
            return path
        try:
            dot.render(filename, cleanup=True)
            return f"{filename}.{format}"
        except graphviz.ExecutableNotFound:
            fallback_path = f"{filename}.dot"
            dot.save(fallback_path)
            return fallback_path

    def _feature_name(self, node: TreeNode, fn) -> str:
        if fn is not None and 0 <= node.feature_index < len(fn):
            return fn[node.feature_index]
        return f"X[{node.feature_index}]"

    def _leaf_label(self, leaf: TreeNode) -> str:
        if self.task_ == "classification":
            return f"class={majority_label(leaf.class_counts):g} {leaf.class_counts}"
        return f"value={leaf.value:.6g} (N={leaf.n_samples})"
    def _collect_rules(self, node: TreeNode, parts, rules, fn):
        stack = [(node, list(parts))]
        while stack:
            node, parts = stack.pop()
            if node.is_leaf:
                body = " AND ".join(parts) if parts else "<root>"
                rules.append(f"{body} => {self._leaf_label(node)}")
                continue
            name = self._feature_name(node, fn)
            stack.append((node.right, parts + [f"{name} >= {node.threshold:.6g}"]))
            stack.append((node.left, parts + [f"{name} < {node.threshold:.6g}"]))

    def _print_node(self, node: TreeNode, indent="", fn=None):
        # plain strings on the stack are lines printed verbatim
        stack = [(node, indent)]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                print(item)
                continue
            node, indent = item
            if node.is_leaf:
                print(f"{indent}Predict {self._leaf_label(node)}")
                continue
            print(f"{indent}if {self._feature_name(node, fn)} < {node.threshold:.6g}:")
            stack.append((node.right, indent + "  "))
            stack.append(f"{indent}else:")
            stack.append((node.left, indent + "  "))

    def _add_graph_nodes(self, dot, node: TreeNode, name: str, fn):
        stack = [(node, name)]
        while stack:
            node, name = stack.pop()
            if node.is_leaf:
                dot.node(name, self._leaf_label(node), shape="box", style="filled", color="lightgrey")
                continue
            label = f"{self._feature_name(node, fn)} < {node.threshold:.6g}"
            dot.node(name, label, shape="ellipse", style="filled", color="lightblue")
            l_id, r_id = name + "L", name + "R"
            dot.edge(name, l_id, label="True")
            dot.edge(name, r_id, label="False")
            stack.append((node.right, r_id))
            stack.append((node.left, l_id))
