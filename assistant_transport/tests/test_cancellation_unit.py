from __future__ import annotations

from assistant_transport.base.cancellation import CancellationToken


def test_cancel_sets_flag_and_reason_once():
    token = CancellationToken()
    assert not token.cancelled
    assert token() is False

    token.cancel("client left")
    token.cancel("second")

    assert token.cancelled
    assert token() is True
    assert token.reason == "client left"


def test_parent_cancel_cascades_to_children():
    parent = CancellationToken()
    child = parent.child()
    grandchild = child.child()

    parent.cancel("shutdown")

    assert child.cancelled and grandchild.cancelled
    assert grandchild.reason == "shutdown"


def test_child_linked_after_cancel_is_cancelled_immediately():
    parent = CancellationToken()
    parent.cancel("done")
    assert parent.link_child(CancellationToken()).cancelled


def test_child_cancel_does_not_affect_parent():
    parent = CancellationToken()
    parent.child().cancel()
    assert not parent.cancelled


def test_wait_returns_once_cancelled():
    token = CancellationToken()
    assert token.wait(0.01) is False
    token.cancel()
    assert token.wait(0.01) is True
