"""Named message queues shared between processes, built on FIFOs."""

from __future__ import annotations

import heapq
import itertools
import os
import select
import stat
import struct
import tempfile
import threading
import time
from pathlib import Path

from plazza.exceptions import MessageError

MAX_MESSAGE_SIZE = 1024

# Each frame: priority and body length, then the body.  Frames are far below
# PIPE_BUF, so a single write is atomic even with many writers.
_HEADER = struct.Struct("<II")
_READ_CHUNK = 65536


def default_queue_directory() -> Path:
    """Directory holding the queue endpoints when none is given."""
    return Path(tempfile.gettempdir()) / "plazza-mq"


class MessageQueue:
    """A named queue of text messages; higher priorities are received first.

    The creator makes the endpoint (replacing any stale one) and removes it on
    close; other processes open it by name.  Operations on the creator's side
    never block: a full queue raises and an empty one yields ``None``.
    """

    def __init__(
        self,
        queue_name: str,
        is_creator: bool = False,
        max_messages: int = 10,
        *,
        directory: str | os.PathLike[str] | None = None,
    ) -> None:
        self._name = "/" + queue_name
        base = Path(directory) if directory is not None else default_queue_directory()
        self._path = base / queue_name
        self._is_creator = is_creator
        self.max_messages = max_messages
        self._fd = -1
        self._buffer = bytearray()
        self._pending: list[tuple[int, int, bytes]] = []
        self._sequence = itertools.count()
        self._read_lock = threading.Lock()

        if is_creator and max_messages <= 0:
            raise MessageError(
                f"Failed to open message queue: {self._name} - Invalid argument"
            )
        try:
            if is_creator:
                base.mkdir(parents=True, exist_ok=True)
                self._path.unlink(missing_ok=True)
                os.mkfifo(self._path, 0o644)
            fd = os.open(self._path, os.O_RDWR | os.O_NONBLOCK)
        except OSError as exc:
            raise MessageError(
                f"Failed to open message queue: {self._name} - {exc.strerror}"
            ) from exc
        if not stat.S_ISFIFO(os.fstat(fd).st_mode):
            os.close(fd)
            raise MessageError(
                f"Failed to open message queue: {self._name} - not a message queue"
            )
        self._fd = fd

    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> Path:
        return self._path

    def is_valid(self) -> bool:
        """True while the queue is open."""
        return self._fd != -1

    def __enter__(self) -> MessageQueue:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self._fd == -1:
            raise MessageError("Message queue is not open")

    def send(self, message: str, priority: int = 0) -> None:
        """Queue ``message``; raises if it is too large or cannot be sent."""
        self._ensure_open()
        body = message.encode("utf-8")
        if len(body) >= MAX_MESSAGE_SIZE:
            raise MessageError("Message too large")
        frame = _HEADER.pack(priority, len(body)) + body
        while True:
            try:
                os.write(self._fd, frame)
                return
            except BlockingIOError as exc:
                if self._is_creator:
                    raise MessageError(f"Failed to send message: {exc.strerror}") from exc
                select.select([], [self._fd], [], 0.01)
            except OSError as exc:
                raise MessageError(f"Failed to send message: {exc.strerror}") from exc

    def _drain(self) -> None:
        while True:
            try:
                chunk = os.read(self._fd, _READ_CHUNK)
            except BlockingIOError:
                break
            except OSError as exc:
                raise MessageError(f"Failed to receive message: {exc.strerror}") from exc
            if not chunk:
                break
            self._buffer += chunk
        while len(self._buffer) >= _HEADER.size:
            priority, length = _HEADER.unpack_from(self._buffer)
            end = _HEADER.size + length
            if len(self._buffer) < end:
                break
            body = bytes(self._buffer[_HEADER.size:end])
            del self._buffer[:end]
            heapq.heappush(self._pending, (-priority, next(self._sequence), body))

    def _take(self) -> str | None:
        self._drain()
        if not self._pending:
            return None
        _, _, body = heapq.heappop(self._pending)
        return body.decode("utf-8", errors="replace")

    def _wait_readable(self, timeout: float | None) -> None:
        try:
            select.select([self._fd], [], [], timeout)
        except (OSError, ValueError) as exc:
            raise MessageError(f"Failed to receive message: {exc}") from exc

    def receive(self) -> str | None:
        """Return the next message.

        On the creator's side this returns ``None`` at once when nothing is
        queued; elsewhere it waits for a message.
        """
        self._ensure_open()
        with self._read_lock:
            while True:
                message = self._take()
                if message is not None or self._is_creator:
                    return message
                self._wait_readable(None)
                self._ensure_open()

    def timed_receive(self, timeout: float) -> str | None:
        """Wait up to ``timeout`` seconds for a message; ``None`` when none came."""
        self._ensure_open()
        deadline = time.monotonic() + timeout
        with self._read_lock:
            while True:
                message = self._take()
                if message is not None:
                    return message
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return None
                self._wait_readable(remaining)
                self._ensure_open()

    def close(self) -> None:
        """Close the queue; the creator also removes its endpoint."""
        if self._fd == -1:
            return
        fd, self._fd = self._fd, -1
        try:
            os.close(fd)
        except OSError:
            pass
        if self._is_creator:
            try:
                self._path.unlink(missing_ok=True)
            except OSError:
                pass