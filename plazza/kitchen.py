"""A kitchen process: cooks, stock and the link to the reception."""

from __future__ import annotations

import os
import threading
import time
from collections import deque

from plazza.cook import Cook
from plazza.ipc import IPCManager
from plazza.logger import get_logger
from plazza.message import Message, MessageType
from plazza.opaque import OpaqueObject
from plazza.packet import PizzaPacket
from plazza.pizza import Pizza, create_pizza
from plazza.serialization import KitchenStatus, PizzaCompletion, PizzaOrder
from plazza.stock import Stock

TIMEOUT = 5.0
HEARTBEAT_INTERVAL = 1.0


def _now_seconds() -> int:
    return int(time.time())


class Kitchen:
    """Receives orders from the reception, bakes them and reports back.

    ``restock_interval`` is in seconds. The kitchen stops on a shutdown
    message or after ``idle_timeout`` seconds without activity.
    """

    def __init__(
        self,
        kitchen_id: int,
        cook_count: int,
        restock_interval: float,
        time_multiplier: float,
        *,
        directory: str | os.PathLike[str] | None = None,
        idle_timeout: float = TIMEOUT,
        heartbeat_interval: float = HEARTBEAT_INTERVAL,
        tick: float = 0.1,
    ) -> None:
        self.id = kitchen_id
        self.cook_count = cook_count
        self.time_multiplier = time_multiplier
        self.idle_timeout = idle_timeout
        self.heartbeat_interval = heartbeat_interval
        self._tick = tick
        self._stock = Stock(restock_interval)
        self._cooks = [
            Cook(index + 1, self._on_pizza_completed, time_multiplier)
            for index in range(cook_count)
        ]
        self._ipc = IPCManager(
            kitchen_id, False, cook_count, directory=directory, poll_interval=tick
        )
        self._counter_lock = threading.Lock()
        self._pending_pizzas = 0
        self._pending_lock = threading.Lock()
        self._pending_orders: deque[PizzaOrder] = deque()
        self._running = threading.Event()
        self._running.set()
        self._last_activity = time.monotonic()
        self._setup_message_handlers()

    @property
    def pending_pizzas(self) -> int:
        """Pizzas given to cooks and not yet finished."""
        with self._counter_lock:
            return self._pending_pizzas

    @property
    def busy_cooks(self) -> int:
        return sum(cook.is_busy() for cook in self._cooks)

    def _touch(self) -> None:
        self._last_activity = time.monotonic()

    def run(self) -> None:
        """Connect to the reception and serve orders until shut down or idle."""
        log = get_logger()
        try:
            self._ipc.connect_to_reception()
            self._stock.start_restock()
            for cook in self._cooks:
                cook.start()
            self._ipc.start_listening()
            log.info(f"Kitchen {self.id} started with {self.cook_count} cooks")

            last_heartbeat = time.monotonic()
            while self._running.is_set():
                now = time.monotonic()
                if now - last_heartbeat >= self.heartbeat_interval:
                    self._send_heartbeat()
                    last_heartbeat = now
                self._process_pending_orders()
                if now - self._last_activity >= self.idle_timeout:
                    log.info(f"Kitchen {self.id} timed out due to inactivity")
                    break
                time.sleep(self._tick)
        except Exception as exc:
            log.error(f"Kitchen {self.id} error: {exc}")
        finally:
            log.info(f"Kitchen {self.id} shutting down")
            self.stop()

    def stop(self) -> None:
        """Stop listening, the cooks and the restocking, and close the queues."""
        self._running.clear()
        self._ipc.stop_listening()
        for cook in self._cooks:
            cook.stop()
        self._stock.stop_restock()
        self._ipc.close()

    def _setup_message_handlers(self) -> None:
        self._ipc.set_message_handler(MessageType.PIZZA_ORDER, self._handle_pizza_order)
        self._ipc.set_message_handler(MessageType.STATUS_REQUEST, self._handle_status_request)
        self._ipc.set_message_handler(MessageType.SHUTDOWN, self._handle_shutdown)

    def _assign_to_cook(self, pizza: Pizza, what: str) -> bool:
        for cook in self._cooks:
            if cook.assign_pizza(pizza):
                with self._counter_lock:
                    self._pending_pizzas += 1
                self._touch()
                get_logger().info(
                    f"Kitchen {self.id} {what}: {pizza.type} {pizza.size}"
                )
                return True
        return False

    def _try_assign(self, pizza: Pizza, what: str) -> bool:
        return self._stock.consume_ingredients(
            pizza.ingredients, lambda: self._assign_to_cook(pizza, what)
        )

    def _handle_pizza_order(self, message: Message) -> None:
        try:
            order = PizzaOrder.unpack(OpaqueObject.from_hex(message.payload))
            pizza = create_pizza(order.type, order.size)
            if not self._try_assign(pizza, "accepted pizza order"):
                with self._pending_lock:
                    self._pending_orders.append(order)
                get_logger().info(
                    f"Kitchen {self.id} queued pizza order (no cook/stock available): "
                    f"{pizza.type} {pizza.size}"
                )
        except Exception as exc:
            get_logger().error(f"Error handling pizza order in kitchen {self.id}: {exc}")

    def _handle_status_request(self, message: Message) -> None:
        self._send_status()
        self._touch()

    def _handle_shutdown(self, message: Message) -> None:
        get_logger().info(f"Kitchen {self.id} received shutdown signal")
        self._running.clear()

    def _on_pizza_completed(self, pizza: Pizza) -> None:
        packet = PizzaPacket.from_pizza(pizza)
        packet.kitchen_id = self.id
        completion = PizzaCompletion(packet, time.monotonic_ns())
        message = Message(
            MessageType.PIZZA_COMPLETED, self.id, _now_seconds(), completion.pack().to_hex()
        )
        self._ipc.send_to_reception(message)
        with self._counter_lock:
            self._pending_pizzas -= 1
        self._touch()

    def _send_heartbeat(self) -> None:
        message = Message(MessageType.HEARTBEAT, self.id, _now_seconds(), "")
        try:
            self._ipc.send_to_reception(message)
        except Exception as exc:
            get_logger().error(f"Kitchen {self.id} failed to send heartbeat: {exc}")

    def _send_status(self) -> None:
        status = KitchenStatus(
            kitchen_id=self.id,
            busy_cooks=self.busy_cooks,
            total_cooks=self.cook_count,
            pending_pizzas=self.pending_pizzas,
            stock=list(self._stock.snapshot().items()),
        )
        message = Message(
            MessageType.STATUS_RESPONSE, self.id, _now_seconds(), status.pack().to_hex()
        )
        try:
            self._ipc.send_to_reception(message)
        except Exception as exc:
            get_logger().error(f"Kitchen {self.id} failed to send status: {exc}")

    def _process_pending_orders(self) -> None:
        with self._pending_lock:
            waiting: deque[PizzaOrder] = deque()
            for order in self._pending_orders:
                pizza = create_pizza(order.type, order.size)
                if not self._try_assign(pizza, "assigned pending pizza order"):
                    waiting.append(order)
            self._pending_orders = waiting