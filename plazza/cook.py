"""A cook: a thread that bakes one pizza at a time."""

from __future__ import annotations

import threading
from typing import Callable

from plazza.pizza import Pizza
from plazza.worker import ThreadQueue, Worker


class Cook:
    """Bakes assigned pizzas and reports each finished one through ``callback``."""

    def __init__(
        self,
        cook_id: int,
        callback: Callable[[Pizza], object] | None,
        time_multiplier: float,
        *,
        poll_interval: float = 0.01,
    ) -> None:
        self.id = cook_id
        self._callback = callback
        self.time_multiplier = time_multiplier
        self._poll_interval = poll_interval
        self._worker = Worker()
        self._queue: ThreadQueue[Pizza] = ThreadQueue()
        self._busy = False
        self._busy_lock = threading.Lock()
        self._stop = threading.Event()

    def start(self) -> None:
        """Start the cooking thread; does nothing if it already runs."""
        if self._worker.joinable():
            return
        self._stop.clear()
        self._worker.start(self._cooking_loop)

    def stop(self) -> None:
        """Stop cooking, abandoning a pizza in the oven, and wait for the thread."""
        self._stop.set()
        self._worker.stop()
        self._worker.join()

    def is_busy(self) -> bool:
        """True from assignment until the pizza is finished."""
        with self._busy_lock:
            return self._busy

    def assign_pizza(self, pizza: Pizza) -> bool:
        """Give ``pizza`` to the cook; False when the cook is already busy."""
        with self._busy_lock:
            if self._busy:
                return False
            self._busy = True
        self._queue.push(pizza)
        return True

    def _cooking_loop(self) -> None:
        while not self._stop.is_set():
            pizza = self._queue.try_pop()
            if pizza is None:
                self._stop.wait(self._poll_interval)
                continue
            self._cook(pizza)
            with self._busy_lock:
                self._busy = False

    def _cook(self, pizza: Pizza) -> None:
        milliseconds = int(pizza.cooking_time(self.time_multiplier) * 1000)
        if milliseconds > 0 and self._stop.wait(milliseconds / 1000):
            return
        if self._stop.is_set():
            return
        if self._callback is not None:
            self._callback(pizza)