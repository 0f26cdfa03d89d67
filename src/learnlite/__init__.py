# learnlite/__init__.py
"""
learnlite: a small supervised-learning toolkit (scikit-learn style).

Every estimator shares one contract: ``fit``, ``predict``, ``score``,
``get_params``/``set_params`` and ``save``/``load``.

Exports:
    - DecisionTree
    - KNearestNeighbors
    - GaussianNB, MultinomialNB
    - LinearRegression, LogisticRegression, MultiClassLogisticRegression
    - Matrix
    - enable_logging
"""
from loguru import logger

from .linear_model import LinearRegression, LogisticRegression, MultiClassLogisticRegression
from .logging import enable_logging
from .matrix import Matrix
from .naive_bayes import GaussianNB, MultinomialNB
from .neighbors import KNearestNeighbors
from .tree import DecisionTree, TreeNode

logger.disable(__name__)

__all__ = [
    "DecisionTree",
    "TreeNode",
    "KNearestNeighbors",
    "GaussianNB",
    "MultinomialNB",
    "LinearRegression",
    "LogisticRegression",
    "MultiClassLogisticRegression",
    "Matrix",
    "enable_logging",
]
__version__ = "0.1.0"
