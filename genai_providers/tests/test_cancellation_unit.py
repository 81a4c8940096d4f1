"""Unit tests for cooperative cancellation primitives.

Covers idempotent cancel, cascade to children, late link of child after
parent cancel, cross-thread cancel, on_cancel callbacks, wait() and
raise_if_cancelled behavior.
"""
from __future__ import annotations

import threading

import pytest

from genai_providers.base.cancellation import (
    CancellationToken,
    CancelledError,
)


def test_cancel_cascades_to_children_and_is_idempotent():
    parent = CancellationToken()
    child1 = parent.child()
    child2 = parent.child()

    parent.cancel(reason="stop")
    parent.cancel(reason="ignored")

    assert parent.cancelled is True and parent.reason == "stop"  # nosec B101 - pytest assert in tests
    assert child1.cancelled is True and child1.reason == "stop"  # nosec B101 - pytest assert in tests
    assert child2.cancelled is True and child2.reason == "stop"  # nosec B101 - pytest assert in tests


def test_child_cancel_does_not_reach_parent():
    parent = CancellationToken()
    child = parent.child()
    child.cancel("local")
    assert child.cancelled and not parent.cancelled  # nosec B101


def test_link_child_after_parent_cancel_immediately_cancels_child():
    parent = CancellationToken()
    parent.cancel("done")
    late_child = CancellationToken(parent=parent)
    assert late_child.cancelled is True and late_child.reason == "done"  # nosec B101 - pytest assert in tests


def test_cancel_from_another_thread():
    token = CancellationToken()
    worker = threading.Thread(target=token.cancel, args=("from thread",))
    worker.start()
    worker.join(timeout=5)
    assert token.cancelled and token.reason == "from thread"  # nosec B101


def test_raise_if_cancelled_raises_custom_error():
    token = CancellationToken()
    token.raise_if_cancelled()
    token.cancel("terminate")
    with pytest.raises(CancelledError):
        token.raise_if_cancelled()


def test_on_cancel_callbacks_run_once_with_reason():
    token = CancellationToken()
    seen = []
    token.on_cancel(seen.append)
    token.cancel("first")
    token.cancel("second")
    token.on_cancel(seen.append)
    assert seen == ["first", "first"]  # nosec B101
    assert token.cancelled_at is not None  # nosec B101


def test_wait_returns_when_cancelled_elsewhere():
    token = CancellationToken()
    assert token.wait(timeout=0.01) is False  # nosec B101
    timer = threading.Timer(0.05, token.cancel, args=("timer",))
    timer.start()
    try:
        assert token.wait(timeout=5) is True  # nosec B101
    finally:
        timer.cancel()
    assert token.reason == "timer"  # nosec B101
