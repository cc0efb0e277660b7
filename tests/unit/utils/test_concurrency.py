"""Regression tests for thread-level concurrency primitives."""

from __future__ import annotations

import threading
import time

import pytest

from prefsort.engine.oracle import ReplyAlreadySent, SortCancelled
from prefsort.utils.concurrency import CancellationToken, ReplySlot, RequestMailbox


def _start(target: object, *args: object) -> threading.Thread:
    thread = threading.Thread(target=target, args=args, daemon=True)  # type: ignore[arg-type]
    thread.start()
    return thread


def _wait_until(predicate: object, timeout: float = 2.0) -> None:
    deadline = time.monotonic() + timeout
    while not predicate():  # type: ignore[operator]
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached before timeout")
        time.sleep(0.005)


@pytest.mark.unit
class TestCancellationToken:
    def test_callbacks_run_once_on_cancel(self) -> None:
        token = CancellationToken()
        calls: list[str] = []
        token.add_callback(lambda: calls.append("x"))
        token.cancel()
        token.cancel()
        assert calls == ["x"]
        assert token.is_cancelled

    def test_callback_added_after_cancel_runs_immediately(self) -> None:
        token = CancellationToken()
        token.cancel()
        calls: list[str] = []
        token.add_callback(lambda: calls.append("late"))
        assert calls == ["late"]

    def test_removed_callback_does_not_run(self) -> None:
        token = CancellationToken()
        calls: list[str] = []

        def callback() -> None:
            calls.append("x")

        token.add_callback(callback)
        token.remove_callback(callback)
        token.remove_callback(callback)
        token.cancel()
        assert calls == []

    def test_raise_if_cancelled(self) -> None:
        token = CancellationToken()
        token.raise_if_cancelled()
        token.cancel()
        with pytest.raises(SortCancelled):
            token.raise_if_cancelled()

    def test_wait_returns_when_cancelled(self) -> None:
        token = CancellationToken()
        assert token.wait(0.01) is False
        _start(token.cancel)
        assert token.wait(2.0) is True


@pytest.mark.unit
class TestReplySlot:
    def test_send_then_wait(self) -> None:
        slot: ReplySlot[bool] = ReplySlot()
        slot.send(False)
        assert slot.is_settled
        assert slot.wait() is False

    def test_wait_blocks_until_sent_from_other_thread(self) -> None:
        slot: ReplySlot[bool] = ReplySlot()
        results: list[bool] = []
        waiter = _start(lambda: results.append(slot.wait()))
        time.sleep(0.02)
        assert results == []
        slot.send(True)
        waiter.join(2.0)
        assert results == [True]

    def test_second_send_is_rejected(self) -> None:
        slot: ReplySlot[bool] = ReplySlot()
        slot.send(True)
        with pytest.raises(ReplyAlreadySent):
            slot.send(True)

    def test_cancel_wakes_blocked_waiter(self) -> None:
        slot: ReplySlot[bool] = ReplySlot()
        token = CancellationToken()
        errors: list[BaseException] = []

        def wait() -> None:
            try:
                slot.wait(token)
            except SortCancelled as exc:
                errors.append(exc)

        waiter = _start(wait)
        time.sleep(0.02)
        token.cancel()
        waiter.join(2.0)
        assert not waiter.is_alive()
        assert len(errors) == 1
        assert slot.is_settled

    def test_send_after_abandon_raises_cancelled(self) -> None:
        slot: ReplySlot[bool] = ReplySlot()
        slot.abandon()
        with pytest.raises(SortCancelled):
            slot.send(True)

    def test_wait_settled_times_out_when_idle(self) -> None:
        slot: ReplySlot[bool] = ReplySlot()
        assert slot.wait_settled(0.01) is False
        slot.send(True)
        assert slot.wait_settled(0.01) is True


@pytest.mark.unit
class TestRequestMailbox:
    def test_rejects_non_positive_capacity(self) -> None:
        with pytest.raises(ValueError, match="capacity"):
            RequestMailbox(capacity=0)

    def test_put_get_fifo(self) -> None:
        mailbox: RequestMailbox[int] = RequestMailbox(capacity=2)
        mailbox.put(1)
        mailbox.put(2)
        assert len(mailbox) == 2
        assert mailbox.get() == 1
        assert mailbox.get() == 2

    def test_put_blocks_while_full(self) -> None:
        mailbox: RequestMailbox[int] = RequestMailbox()
        mailbox.put(1)
        producer = _start(mailbox.put, 2)
        time.sleep(0.02)
        assert producer.is_alive()
        assert mailbox.get() == 1
        producer.join(2.0)
        assert not producer.is_alive()
        assert mailbox.get() == 2

    def test_cancel_wakes_blocked_put(self) -> None:
        mailbox: RequestMailbox[int] = RequestMailbox()
        token = CancellationToken()
        mailbox.put(1)
        errors: list[BaseException] = []

        def produce() -> None:
            try:
                mailbox.put(2, token)
            except SortCancelled as exc:
                errors.append(exc)

        producer = _start(produce)
        _wait_until(producer.is_alive)
        time.sleep(0.02)
        token.cancel()
        producer.join(2.0)
        assert len(errors) == 1
        assert len(mailbox) == 1

    def test_close_drains_then_returns_none(self) -> None:
        mailbox: RequestMailbox[int] = RequestMailbox()
        mailbox.put(7)
        mailbox.close()
        assert mailbox.closed
        assert mailbox.get() == 7
        assert mailbox.get() is None

    def test_close_wakes_blocked_get(self) -> None:
        mailbox: RequestMailbox[int] = RequestMailbox()
        results: list[int | None] = []
        consumer = _start(lambda: results.append(mailbox.get()))
        time.sleep(0.02)
        mailbox.close()
        consumer.join(2.0)
        assert results == [None]

    def test_put_after_close_raises(self) -> None:
        mailbox: RequestMailbox[int] = RequestMailbox()
        mailbox.close()
        with pytest.raises(RuntimeError, match="closed"):
            mailbox.put(1)

    def test_get_timeout_returns_none(self) -> None:
        mailbox: RequestMailbox[int] = RequestMailbox()
        assert mailbox.get(timeout=0.01) is None
        assert not mailbox.closed
