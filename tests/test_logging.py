import numpy as np
from learnlite import DecisionTree, enable_logging


def _fit_small_tree():
    X = np.array([[0.0], [1.0], [2.0], [3.0]])
    y = np.array([0.0, 0.0, 1.0, 1.0])
    return DecisionTree().fit(X, y)


def test_silent_by_default(capsys):
    _fit_small_tree()
    captured = capsys.readouterr()
    assert captured.err == ""
    assert captured.out == ""


def test_enable_logging_captures_fit_messages():
    messages = []
    with enable_logging(level="DEBUG", sink=messages.append):
        _fit_small_tree()
    assert any("Fitting DecisionTree" in m for m in messages)
    assert any("Fitted classification tree: depth=1, leaves=2" in m for m in messages)

    # the handler is gone once the handle is closed
    count = len(messages)
    _fit_small_tree()
    assert len(messages) == count


def test_trace_level_reports_splits():
    messages = []
    with enable_logging(level="TRACE", sink=messages.append):
        _fit_small_tree()
    assert any("split on X[0] < 2" in m for m in messages)


def test_ignored_params_are_warned_about():
    messages = []
    with enable_logging(level="WARNING", sink=messages.append):
        DecisionTree().set_params(bogus=1)
    assert len(messages) == 1
    assert "bogus" in messages[0]


def test_handle_disable_is_idempotent():
    handle = enable_logging(sink=lambda m: None)
    handle.disable()
    handle.disable()
    assert handle.handler_id is None


def test_package_logging_stays_on_until_last_handle_closes():
    outer_messages, inner_messages = [], []
    outer = enable_logging(level="INFO", sink=outer_messages.append)
    with enable_logging(level="INFO", sink=inner_messages.append):
        _fit_small_tree()
    _fit_small_tree()
    outer.disable()
    _fit_small_tree()

    assert len(inner_messages) == 1
    assert len(outer_messages) == 2
