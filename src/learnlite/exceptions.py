"""Custom exceptions for learnlite.

Every error raised on purpose by the toolkit derives from :class:`LearnLiteError`
and from the builtin exception a caller would naturally expect, so both
``except LearnLiteError`` and ``except ValueError`` work:

- ShapeMismatchError: features and labels disagree in length, or a table is not 2-D.
- EmptyDatasetError: an estimator was asked to fit zero rows.
- NotFittedError: an estimator was used before a successful ``fit``.
- FeatureDimensionError: prediction input has a different column count than training.
- SingularMatrixError: a matrix could not be inverted.
- PersistenceError: a saved snapshot is unreadable or belongs to another estimator.
"""

from __future__ import annotations

from sklearn.exceptions import NotFittedError as _SklearnNotFittedError


class LearnLiteError(Exception):
    """Base class for all learnlite errors."""


class ShapeMismatchError(LearnLiteError, ValueError):
    """Raised when array shapes are incompatible.

    With no explicit message the error describes a row/label count mismatch.
    """

    def __init__(self, message: str | None = None, *, rows: int | None = None, labels: int | None = None) -> None:
        if message is None:
            message = f"Number of rows in X ({rows}) must equal length of y ({labels})."
        self.rows = rows
        self.labels = labels
        super().__init__(message)


class EmptyDatasetError(LearnLiteError, ValueError):
    """Raised when fitting on a dataset with no rows."""

    def __init__(self, estimator: str) -> None:
        self.estimator = estimator
        super().__init__(f"{estimator} cannot be fitted on an empty dataset.")


class NotFittedError(LearnLiteError, _SklearnNotFittedError):
    """Raised when an estimator is used before ``fit`` has succeeded."""

    def __init__(self, estimator: str) -> None:
        self.estimator = estimator
        super().__init__(f"{estimator} is not fitted. Call fit(...) first.")


class FeatureDimensionError(LearnLiteError, ValueError):
    """Raised when prediction rows do not match the training column count."""

    def __init__(self, expected: int, got: int) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"X has {got} features, but the estimator was fitted with {expected} features.")


class SingularMatrixError(LearnLiteError, ValueError):
    """Raised when a matrix is singular and cannot be inverted."""


class PersistenceError(LearnLiteError, ValueError):
    """Raised when a snapshot cannot be decoded or does not match the estimator."""
