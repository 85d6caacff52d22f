"""Text envelope for every message passed between processes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from plazza.exceptions import MessageError


class MessageType(IntEnum):
    PIZZA_ORDER = 1
    PIZZA_COMPLETED = 2
    STATUS_REQUEST = 3
    STATUS_RESPONSE = 4
    SHUTDOWN = 5
    HEARTBEAT = 6


def _parse_int(token: str) -> int:
    try:
        return int(token)
    except ValueError as exc:
        raise MessageError(f"Invalid number in message: {token!r}") from exc


@dataclass(frozen=True)
class Message:
    """A typed message with its sender, a timestamp in seconds and a payload."""

    type: MessageType
    sender_id: int
    timestamp: int
    payload: str = ""

    def serialize(self) -> str:
        """Return ``type|sender|timestamp|length|payload``."""
        return (
            f"{int(self.type)}|{self.sender_id}|{self.timestamp}"
            f"|{len(self.payload)}|{self.payload}"
        )

    @classmethod
    def deserialize(cls, data: str) -> Message:
        """Parse the text produced by :meth:`serialize`."""
        parts = data.split("|", 4)
        if len(parts) < 4:
            raise MessageError("Invalid message format")
        type_token, sender_token, time_token, length_token = parts[:4]
        rest = parts[4] if len(parts) == 5 else ""

        raw_type = _parse_int(type_token)
        try:
            message_type = MessageType(raw_type)
        except ValueError as exc:
            raise MessageError(f"Unknown message type: {raw_type}") from exc
        sender_id = _parse_int(sender_token)
        timestamp = _parse_int(time_token)
        length = _parse_int(length_token)
        if length < 0 or len(rest) < length:
            raise MessageError("Invalid message format")
        return cls(message_type, sender_id, timestamp, rest[:length])