"""Thread helpers: a restartable-once worker thread and a locked FIFO queue."""

from __future__ import annotations

import threading
from collections import deque
from typing import Callable, Generic, TypeVar

from plazza.exceptions import ThreadError

T = TypeVar("T")


class Worker:
    """Runs one task in a background thread and carries a cooperative stop flag."""

    def __init__(self) -> None:
        self._thread: threading.Thread | None = None
        self._stop_requested = threading.Event()

    @property
    def should_stop(self) -> bool:
        """True once :meth:`stop` has been called since the last start."""
        return self._stop_requested.is_set()

    def start(self, task: Callable[[], object]) -> None:
        """Run ``task`` in a new thread; exceptions raised by the task are swallowed."""
        if self._thread is not None:
            raise ThreadError("Thread is already running, cannot start again.")
        self._stop_requested.clear()

        def _run() -> None:
            try:
                task()
            except Exception:
                pass

        self._thread = threading.Thread(target=_run, daemon=True)
        self._thread.start()

    def join(self) -> None:
        """Wait for the task to finish."""
        thread = self._thread
        if thread is None:
            return
        if thread is not threading.current_thread():
            thread.join()
        self._thread = None

    def detach(self) -> None:
        """Forget the thread and let it run on its own."""
        self._thread = None

    def joinable(self) -> bool:
        """True while a started thread has not been joined or detached."""
        return self._thread is not None

    def stop(self) -> None:
        """Ask the task to stop."""
        self._stop_requested.set()


class ThreadQueue(Generic[T]):
    """A first-in first-out queue safe to share between threads."""

    def __init__(self) -> None:
        self._items: deque[T] = deque()
        self._lock = threading.Lock()

    def push(self, item: T) -> None:
        """Append ``item`` at the back."""
        with self._lock:
            self._items.append(item)

    def try_pop(self) -> T | None:
        """Remove and return the front item, or ``None`` when the queue is empty."""
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def empty(self) -> bool:
        """True when the queue holds no item."""
        with self._lock:
            return not self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)