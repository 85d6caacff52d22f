"""A kitchen's ingredient stock, restocked periodically in the background."""

from __future__ import annotations

import threading
from collections import Counter
from typing import Callable, Iterable

from plazza.pizza import Ingredient
from plazza.worker import Worker

INITIAL_AMOUNT = 5


class Stock:
    """Ingredient counts; every ``restock_interval`` seconds each count grows by one."""

    def __init__(self, restock_interval: float) -> None:
        self.restock_interval = restock_interval
        self._amounts: dict[Ingredient, int] = {
            ingredient: INITIAL_AMOUNT for ingredient in Ingredient
        }
        self._lock = threading.Lock()
        self._worker = Worker()
        self._stop = threading.Event()

    def consume_ingredients(
        self,
        ingredients: Iterable[Ingredient],
        reservation: Callable[[], bool] | None = None,
    ) -> bool:
        """Take the ingredients if all are available and ``reservation`` succeeds.

        The ingredients are removed, then ``reservation`` is called under the
        stock lock; when it returns False they are put back.
        """
        needed = Counter(ingredients)
        with self._lock:
            if any(self._amounts[item] < count for item, count in needed.items()):
                return False
            for item, count in needed.items():
                self._amounts[item] -= count
            reserved = True if reservation is None else bool(reservation())
            if not reserved:
                for item, count in needed.items():
                    self._amounts[item] += count
            return reserved

    def snapshot(self) -> dict[Ingredient, int]:
        """Current amount of every ingredient, in ingredient order."""
        with self._lock:
            return dict(self._amounts)

    def start_restock(self) -> None:
        """Start the background restocking."""
        self._stop.clear()
        self._worker.start(self._restock_loop)

    def stop_restock(self) -> None:
        """Stop the background restocking and wait for it."""
        self._stop.set()
        self._worker.stop()
        self._worker.join()

    def _restock_loop(self) -> None:
        while not self._stop.wait(self.restock_interval):
            with self._lock:
                for ingredient in self._amounts:
                    self._amounts[ingredient] += 1