import threading

import pytest

from plazza.exceptions import ThreadError
from plazza.worker import ThreadQueue, Worker


def test_start_runs_task():
    done = threading.Event()
    worker = Worker()
    worker.start(done.set)
    worker.join()
    assert done.is_set()


def test_joinable_until_joined():
    release = threading.Event()
    worker = Worker()
    assert worker.joinable() is False
    worker.start(release.wait)
    assert worker.joinable() is True
    release.set()
    worker.join()
    assert worker.joinable() is False


def test_second_start_raises():
    release = threading.Event()
    worker = Worker()
    worker.start(release.wait)
    try:
        with pytest.raises(ThreadError) as info:
            worker.start(lambda: None)
        assert "already running" in str(info.value)
    finally:
        release.set()
        worker.join()


def test_restart_after_join():
    results = []
    worker = Worker()
    worker.start(lambda: results.append("first"))
    worker.join()
    worker.start(lambda: results.append("second"))
    worker.join()
    assert results == ["first", "second"]


def test_stop_flag_ends_loop():
    worker = Worker()
    started = threading.Event()
    iterations = []

    def loop():
        started.set()
        while not worker.should_stop:
            iterations.append(1)
            threading.Event().wait(0.001)

    worker.start(loop)
    started.wait(1)
    worker.stop()
    worker.join()
    assert worker.should_stop is True
    assert worker.joinable() is False


def test_task_exception_is_swallowed():
    worker = Worker()

    def boom():
        raise RuntimeError("fail")

    worker.start(boom)
    worker.join()
    assert worker.joinable() is False


def test_detach_forgets_thread():
    release = threading.Event()
    worker = Worker()
    worker.start(release.wait)
    worker.detach()
    assert worker.joinable() is False
    release.set()


def test_queue_is_fifo():
    queue = ThreadQueue()
    for item in ("a", "b", "c"):
        queue.push(item)
    assert [queue.try_pop(), queue.try_pop(), queue.try_pop()] == ["a", "b", "c"]


def test_queue_empty_pop_returns_none():
    queue = ThreadQueue()
    assert queue.empty() is True
    assert queue.try_pop() is None


def test_queue_size_tracks_items():
    queue = ThreadQueue()
    queue.push(1)
    queue.push(2)
    assert len(queue) == 2
    assert queue.empty() is False
    queue.try_pop()
    assert len(queue) == 1


def test_queue_concurrent_pushes():
    queue = ThreadQueue()
    per_thread = 200
    threads = [
        threading.Thread(target=lambda: [queue.push(i) for i in range(per_thread)])
        for _ in range(4)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(queue) == 4 * per_thread