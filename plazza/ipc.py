"""Routing of messages between the reception and its kitchens."""

from __future__ import annotations

import os
import threading
from typing import Callable

from plazza.exceptions import IPCError
from plazza.logger import get_logger
from plazza.message import Message, MessageType
from plazza.message_queue import MessageQueue

Handler = Callable[[Message], object]

RECEPTION_INBOX = "reception_inbox"


def kitchen_inbox_name(kitchen_id: int) -> str:
    """Name of the inbox queue of kitchen ``kitchen_id``."""
    return f"kitchen_{kitchen_id}_inbox"


class IPCManager:
    """Owns the queues of one side (reception or kitchen) and dispatches incoming messages."""

    def __init__(
        self,
        manager_id: int,
        is_reception: bool = False,
        cooks_count: int = 0,
        *,
        directory: str | os.PathLike[str] | None = None,
        poll_interval: float = 0.1,
    ) -> None:
        self.id = manager_id
        self.is_reception = is_reception
        self.cooks_count = cooks_count
        self._directory = directory
        self._poll_interval = poll_interval
        self._connected = False
        self._listening = threading.Event()
        self._listener: threading.Thread | None = None
        self._handlers: dict[MessageType, Handler] = {}
        self._kitchen_queues: dict[int, MessageQueue] = {}
        self._kitchen_inbox: MessageQueue | None = None
        self._reception_inbox: MessageQueue | None = None
        self._reception_outbox: MessageQueue | None = None

        if is_reception:
            self._reception_inbox = MessageQueue(
                RECEPTION_INBOX, True, cooks_count, directory=directory
            )

    @property
    def is_connected(self) -> bool:
        return self._connected

    @property
    def kitchen_ids(self) -> list[int]:
        """Identifiers of the kitchens that currently have a channel."""
        return list(self._kitchen_queues)

    def __enter__(self) -> IPCManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def create_kitchen_channel(self, kitchen_id: int) -> None:
        """Create the inbox of kitchen ``kitchen_id`` (reception only)."""
        if not self.is_reception:
            raise IPCError("Only reception can create kitchen channels")
        previous = self._kitchen_queues.pop(kitchen_id, None)
        if previous is not None:
            previous.close()
        self._kitchen_queues[kitchen_id] = MessageQueue(
            kitchen_inbox_name(kitchen_id), True, self.cooks_count, directory=self._directory
        )

    def remove_kitchen_channel(self, kitchen_id: int) -> None:
        """Close and remove the inbox of kitchen ``kitchen_id`` (reception only)."""
        if not self.is_reception:
            raise IPCError("Only reception can remove kitchen channels")
        queue = self._kitchen_queues.pop(kitchen_id, None)
        if queue is not None:
            queue.close()

    def send_to_kitchen(self, kitchen_id: int, message: Message) -> None:
        """Send ``message`` to one kitchen; unknown kitchens are ignored."""
        if not self.is_reception:
            raise IPCError("Only reception can send to kitchens")
        queue = self._kitchen_queues.get(kitchen_id)
        if queue is not None:
            queue.send(message.serialize())

    def broadcast_to_kitchens(self, message: Message) -> None:
        """Send ``message`` to every kitchen, logging failures."""
        if not self.is_reception:
            raise IPCError("Broadcasting to kitchens is only allowed from reception")
        payload = message.serialize()
        for kitchen_id, queue in list(self._kitchen_queues.items()):
            try:
                queue.send(payload)
            except Exception as exc:
                get_logger().error(f"Failed to send message to kitchen {kitchen_id}: {exc}")

    def connect_to_reception(self) -> None:
        """Open this kitchen's inbox and the reception's inbox (kitchen only)."""
        if self.is_reception:
            raise IPCError("Reception doesn't connect to itself")
        self._kitchen_inbox = MessageQueue(
            kitchen_inbox_name(self.id), False, self.cooks_count, directory=self._directory
        )
        self._reception_outbox = MessageQueue(
            RECEPTION_INBOX, False, self.cooks_count, directory=self._directory
        )
        self._connected = True

    def send_to_reception(self, message: Message) -> None:
        """Send ``message`` to the reception (kitchen only, once connected)."""
        if self.is_reception:
            raise IPCError("Reception doesn't send to itself")
        if not self._connected or self._reception_outbox is None:
            raise IPCError("Not connected to reception")
        self._reception_outbox.send(message.serialize())

    def set_message_handler(self, message_type: MessageType, handler: Handler) -> None:
        """Call ``handler`` for every received message of ``message_type``."""
        self._handlers[MessageType(message_type)] = handler

    def start_listening(self) -> None:
        """Start dispatching incoming messages in a background thread."""
        if self._listening.is_set():
            return
        self._listening.set()
        self._listener = threading.Thread(target=self._listen_loop, daemon=True)
        self._listener.start()

    def stop_listening(self) -> None:
        """Stop the background dispatcher and wait for it."""
        if not self._listening.is_set():
            return
        self._listening.clear()
        listener, self._listener = self._listener, None
        if listener is not None and listener is not threading.current_thread():
            listener.join()

    def close(self) -> None:
        """Stop listening and close every queue this side holds."""
        self.stop_listening()
        for queue in self._kitchen_queues.values():
            queue.close()
        self._kitchen_queues.clear()
        for queue in (self._kitchen_inbox, self._reception_inbox, self._reception_outbox):
            if queue is not None:
                queue.close()
        self._connected = False

    def _listen_loop(self) -> None:
        inbox = self._reception_inbox if self.is_reception else self._kitchen_inbox
        if inbox is None:
            return
        while self._listening.is_set():
            try:
                data = inbox.timed_receive(self._poll_interval)
                if data is not None:
                    self._process(Message.deserialize(data))
            except Exception as exc:
                if self._listening.is_set():
                    get_logger().error(f"Error receiving message: {exc}")

    def _process(self, message: Message) -> None:
        handler = self._handlers.get(message.type)
        if handler is None:
            return
        try:
            handler(message)
        except Exception as exc:
            get_logger().error(f"Error processing message: {exc}")