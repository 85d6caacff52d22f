"""The reception: reads commands and hands orders to the kitchen manager."""

from __future__ import annotations

import sys
from typing import Iterable

from plazza.kitchen_manager import KitchenManager
from plazza.logger import get_logger
from plazza.order_parser import parse_order


class Reception:
    """Interactive front desk; ``restock_interval`` is in seconds."""

    def __init__(
        self,
        time_multiplier: float,
        cooks_per_kitchen: int,
        restock_interval: float,
        *,
        manager: KitchenManager | None = None,
    ) -> None:
        self._manager = manager or KitchenManager(
            cooks_per_kitchen, restock_interval, time_multiplier
        )
        self._running = True

    @property
    def running(self) -> bool:
        return self._running

    def run(self, stream: Iterable[str] | None = None) -> None:
        """Process one command per line until ``exit``/``quit`` or end of input."""
        lines = sys.stdin if stream is None else stream
        try:
            for raw in lines:
                line = raw.rstrip("\n")
                if line:
                    self.process_command(line)
                if not self._running:
                    break
        finally:
            self._manager.cleanup()

    def process_command(self, command: str) -> None:
        """Handle ``exit``, ``quit``, ``status`` or an order line."""
        command = command.strip(" \t")
        if command in ("exit", "quit"):
            self._running = False
            return
        if command == "status":
            self._manager.display_status()
            return
        log = get_logger()
        try:
            orders = parse_order(command)
            if orders:
                self._manager.distribute_orders(orders)
                log.info(f"Order placed: {len(orders)} pizzas")
        except Exception as exc:
            log.error(f"Error: {exc}")