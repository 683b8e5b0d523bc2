import threading
import time

from aicds.safe_queue import SafeQueue


def test_fifo_order_and_len():
    queue = SafeQueue()
    for value in (1, 2, 3):
        queue.push(value)
    assert len(queue) == 3
    assert [queue.pop(), queue.pop(), queue.pop()] == [1, 2, 3]
    assert len(queue) == 0


def test_pop_empty_returns_none():
    assert SafeQueue().pop() is None


def test_pop_wait_times_out():
    start = time.monotonic()
    assert SafeQueue().pop_wait(0.05) is None
    assert time.monotonic() - start >= 0.04


def test_pop_wait_receives_from_other_thread():
    queue = SafeQueue()
    timer = threading.Timer(0.02, queue.push, args=("item",))
    timer.start()
    try:
        assert queue.pop_wait(2.0) == "item"
    finally:
        timer.join()


def test_pop_wait_without_timeout_blocks_until_value():
    queue = SafeQueue()
    timer = threading.Timer(0.02, queue.push, args=(42,))
    timer.start()
    assert queue.pop_wait() == 42
    timer.join()