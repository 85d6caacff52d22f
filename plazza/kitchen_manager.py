"""The reception's side of the kitchens: creating them and spreading orders."""

from __future__ import annotations

import os
import sys
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, TextIO

from plazza.ipc import IPCManager
from plazza.logger import get_logger
from plazza.message import Message, MessageType
from plazza.opaque import OpaqueObject
from plazza.pizza import Ingredient
from plazza.process import Process
from plazza.serialization import KitchenStatus, PizzaCompletion, PizzaOrder

MAX_PIZZAS_PER_KITCHEN_MULTIPLIER = 2
HEARTBEAT_TIMEOUT = 10.0

KitchenRunner = Callable[[int], object]


def _now_seconds() -> int:
    return int(time.time())


@dataclass
class KitchenInfo:
    """What the reception knows about one kitchen process."""

    id: int
    process: Process
    last_heartbeat: float = field(default_factory=time.monotonic)
    status: KitchenStatus = field(default_factory=KitchenStatus)
    active: bool = True


class KitchenManager:
    """Starts kitchen processes on demand and gives each order to the least loaded one.

    ``restock_interval`` is in seconds. ``kitchen_runner``, when given, is run in
    each forked child with the kitchen id instead of a real kitchen.
    """

    def __init__(
        self,
        cooks_per_kitchen: int,
        restock_interval: float,
        time_multiplier: float,
        *,
        directory: str | os.PathLike[str] | None = None,
        heartbeat_timeout: float = HEARTBEAT_TIMEOUT,
        output: TextIO | None = None,
        kitchen_runner: KitchenRunner | None = None,
    ) -> None:
        self.cooks_per_kitchen = cooks_per_kitchen
        self.restock_interval = restock_interval
        self.time_multiplier = time_multiplier
        self.heartbeat_timeout = heartbeat_timeout
        self._directory = directory
        self._output = output
        self._runner = kitchen_runner or self._run_kitchen
        self._kitchens: dict[int, KitchenInfo] = {}
        self._next_kitchen_id = 1
        self._lock = threading.RLock()
        self._ipc = IPCManager(
            0,
            True,
            cooks_per_kitchen * MAX_PIZZAS_PER_KITCHEN_MULTIPLIER,
            directory=directory,
        )
        self._setup_message_handlers()
        self._ipc.start_listening()

    @property
    def kitchens(self) -> dict[int, KitchenInfo]:
        """Snapshot of the known kitchens by id."""
        with self._lock:
            return dict(self._kitchens)

    def __enter__(self) -> KitchenManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cleanup()

    def _setup_message_handlers(self) -> None:
        self._ipc.set_message_handler(MessageType.PIZZA_COMPLETED, self._handle_pizza_completed)
        self._ipc.set_message_handler(MessageType.STATUS_RESPONSE, self._handle_status_response)
        self._ipc.set_message_handler(MessageType.HEARTBEAT, self._handle_heartbeat)

    def _run_kitchen(self, kitchen_id: int) -> None:
        from plazza.kitchen import Kitchen

        Kitchen(
            kitchen_id,
            self.cooks_per_kitchen,
            self.restock_interval,
            self.time_multiplier,
            directory=self._directory,
        ).run()

    def distribute_orders(self, orders: Iterable[PizzaOrder]) -> None:
        """Send each order to the least loaded kitchen, creating kitchens as needed."""
        log = get_logger()
        with self._lock:
            self._remove_inactive_kitchens()
            for order in orders:
                kitchen_id = self._find_best_kitchen()
                if kitchen_id == 0:
                    self._create_kitchen()
                    kitchen_id = self._next_kitchen_id - 1

                message = Message(
                    MessageType.PIZZA_ORDER, 0, _now_seconds(), order.pack().to_hex()
                )
                try:
                    self._ipc.send_to_kitchen(kitchen_id, message)
                    info = self._kitchens.get(kitchen_id)
                    if info is not None:
                        info.status.pending_pizzas += 1
                        info.last_heartbeat = time.monotonic()
                    log.info(
                        f"Assigned pizza {order.type} {order.size} to kitchen {kitchen_id}"
                    )
                except Exception as exc:
                    log.error(f"Failed to send order to kitchen {kitchen_id}: {exc}")
            self._remove_inactive_kitchens()

    def _render_status(self) -> str:
        lines = [
            "",
            "=== Kitchen Status ===",
            f"{'Kitchen':<10}{'Busy/Total':<12}{'Pending':<10}{'Status':<8}",
            "-" * 50,
        ]
        now = time.monotonic()
        with self._lock:
            kitchens = list(self._kitchens.items())
        for kitchen_id, info in kitchens:
            status = info.status
            active = now - info.last_heartbeat < self.heartbeat_timeout
            load = f"{status.busy_cooks}/{status.total_cooks}"
            state = "Active" if active else "Inactive"
            lines.append(f"{kitchen_id:<10}{load:<12}{status.pending_pizzas:<10}{state:<8}")
            if active and status.stock:
                entries = ", ".join(
                    f"{ingredient if isinstance(ingredient, Ingredient) else 'unknown'}:{count}"
                    for ingredient, count in status.stock
                )
                lines.append(f"Stock: {entries}")
            elif active:
                lines.append("Stock: No data available")
        if not kitchens:
            lines.append("No kitchens running")
        lines.append("======================")
        return "\n".join(lines)

    def display_status(self) -> None:
        """Print a table of the kitchens, then ask every kitchen for fresh status."""
        out = self._output if self._output is not None else sys.stdout
        print(self._render_status(), file=out, flush=True)
        self._request_status_updates()

    def cleanup(self) -> None:
        """Shut every kitchen down, wait for them and close the channels."""
        log = get_logger()
        shutdown = Message(MessageType.SHUTDOWN, 0, _now_seconds(), "")
        with self._lock:
            kitchens = list(self._kitchens.items())
            for kitchen_id, _ in kitchens:
                try:
                    self._ipc.send_to_kitchen(kitchen_id, shutdown)
                except Exception as exc:
                    log.error(f"Failed to send shutdown to kitchen {kitchen_id}: {exc}")
            for _, info in kitchens:
                info.process.wait()
            self._kitchens.clear()
        self._ipc.close()

    def _find_best_kitchen(self) -> int:
        best = 0
        lowest_load: int | None = None
        now = time.monotonic()
        for kitchen_id, info in self._kitchens.items():
            if not info.active or now - info.last_heartbeat > self.heartbeat_timeout:
                continue
            capacity = info.status.total_cooks * MAX_PIZZAS_PER_KITCHEN_MULTIPLIER
            load = info.status.pending_pizzas
            if load < capacity and (lowest_load is None or load < lowest_load):
                lowest_load = load
                best = kitchen_id
        return best

    def _create_kitchen(self) -> None:
        log = get_logger()
        kitchen_id = self._next_kitchen_id
        self._next_kitchen_id += 1
        info = KitchenInfo(
            id=kitchen_id,
            process=Process(),
            status=KitchenStatus(
                kitchen_id=kitchen_id, total_cooks=self.cooks_per_kitchen
            ),
        )
        self._ipc.create_kitchen_channel(kitchen_id)
        runner = self._runner
        try:
            info.process.fork(lambda: runner(kitchen_id))
        except Exception as exc:
            log.error(f"Failed to create kitchen {kitchen_id}: {exc}")
            self._ipc.remove_kitchen_channel(kitchen_id)
            return
        self._kitchens[kitchen_id] = info
        log.info(f"Created kitchen {kitchen_id}")

    def _remove_inactive_kitchens(self) -> None:
        now = time.monotonic()
        stale = [
            kitchen_id
            for kitchen_id, info in self._kitchens.items()
            if not info.process.is_running()
            or now - info.last_heartbeat > self.heartbeat_timeout
        ]
        for kitchen_id in stale:
            get_logger().info(f"Removing inactive kitchen {kitchen_id}")
            self._ipc.remove_kitchen_channel(kitchen_id)
            del self._kitchens[kitchen_id]

    def _request_status_updates(self) -> None:
        message = Message(MessageType.STATUS_REQUEST, 0, _now_seconds(), "")
        with self._lock:
            kitchen_ids = list(self._kitchens)
            for kitchen_id in kitchen_ids:
                try:
                    self._ipc.send_to_kitchen(kitchen_id, message)
                except Exception as exc:
                    get_logger().error(
                        f"Failed to request status from kitchen {kitchen_id}: {exc}"
                    )

    def _handle_pizza_completed(self, message: Message) -> None:
        log = get_logger()
        try:
            completion = PizzaCompletion.unpack(OpaqueObject.from_hex(message.payload))
            packet = completion.pizza
            log.info(
                f"Pizza completed: {packet.type} {packet.size} "
                f"from kitchen {packet.kitchen_id}"
            )
            with self._lock:
                info = self._kitchens.get(message.sender_id)
                if info is not None:
                    info.status.pending_pizzas = max(0, info.status.pending_pizzas - 1)
                    info.last_heartbeat = time.monotonic()
        except Exception as exc:
            log.error(f"Error handling pizza completion: {exc}")

    def _handle_status_response(self, message: Message) -> None:
        try:
            status = KitchenStatus.unpack(OpaqueObject.from_hex(message.payload))
            with self._lock:
                info = self._kitchens.get(message.sender_id)
                if info is not None:
                    info.status = status
                    info.last_heartbeat = time.monotonic()
        except Exception as exc:
            get_logger().error(f"Error handling status response: {exc}")

    def _handle_heartbeat(self, message: Message) -> None:
        with self._lock:
            info = self._kitchens.get(message.sender_id)
            if info is not None:
                info.last_heartbeat = time.monotonic()