import threading
import time

import pytest

from ossim.core.sync import OperationQueue

from conftest import ops


def test_fifo_order_and_drain():
    queue = OperationQueue(ops("A{begin}0; P{run}1; A{finish}0;"))
    queue.close()
    assert [str(op) for op in queue.drain()] == ["A{begin}0", "P{run}1", "A{finish}0"]
    assert len(queue) == 0


def test_get_returns_none_once_closed_and_empty():
    queue = OperationQueue()
    queue.close()
    assert queue.get() is None


def test_get_times_out_while_open():
    assert OperationQueue().get(timeout=0.01) is None


def test_consumer_waits_for_producer():
    queue = OperationQueue(ops("P{run}1;"))
    received = []

    def consume():
        received.extend(str(op) for op in queue.drain())

    consumer = threading.Thread(target=consume)
    consumer.start()
    time.sleep(0.02)
    queue.extend(ops("M{block}2; O{monitor}3;"))
    queue.close()
    consumer.join(timeout=2)
    assert not consumer.is_alive()
    assert received == ["P{run}1", "M{block}2", "O{monitor}3"]


def test_closed_queue_rejects_new_operations():
    queue = OperationQueue()
    queue.close()
    with pytest.raises(RuntimeError):
        queue.append(ops("P{run}1;")[0])


def test_concurrent_producers_lose_nothing():
    queue = OperationQueue()
    batch = ops("P{run}1; M{block}1;")

    def produce():
        for _ in range(100):
            queue.extend(batch)

    producers = [threading.Thread(target=produce) for _ in range(4)]
    for p in producers:
        p.start()
    for p in producers:
        p.join()
    queue.close()
    assert len(list(queue.drain())) == 800
