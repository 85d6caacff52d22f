"""Running a function as a separately managed unit of work."""

from __future__ import annotations

import signal
import threading
from typing import Callable

from plazza.exceptions import ProcessError


class Process:
    """Runs one function in the background; it ends with code 0, or 1 if it raised."""

    def __init__(self, terminate_timeout: float = 5.0) -> None:
        self._thread: threading.Thread | None = None
        self._forked = False
        self._exit_code: int | None = None
        self._stop_event = threading.Event()
        self._terminate_timeout = terminate_timeout

    @property
    def pid(self) -> int:
        """Native id of the running unit, or -1 when there is none."""
        if not self._forked or self._thread is None:
            return -1
        native_id = self._thread.native_id
        return native_id if native_id is not None else -1

    @property
    def exit_code(self) -> int | None:
        """Exit code of the finished unit; negative when terminated before finishing."""
        return self._exit_code

    @property
    def stop_requested(self) -> bool:
        """True once terminate() has been asked for."""
        return self._stop_event.is_set()

    def __enter__(self) -> Process:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.terminate()

    def _run(self, target: Callable[[], object]) -> None:
        code = 1
        try:
            target()
            code = 0
        except BaseException:
            code = 1
        finally:
            self._exit_code = code

    def fork(self, target: Callable[[], object]) -> None:
        """Start running ``target`` in the background."""
        self._exit_code = None
        self._stop_event = threading.Event()
        thread = threading.Thread(target=self._run, args=(target,), daemon=True)
        try:
            thread.start()
        except RuntimeError as exc:
            raise ProcessError("Failed to fork process") from exc
        self._thread = thread
        self._forked = True

    def _finish(self) -> None:
        self._forked = False
        self._thread = None

    def wait(self) -> None:
        """Block until the unit has finished."""
        if not self._forked or self._thread is None:
            return
        self._thread.join()
        self._finish()

    def is_running(self) -> bool:
        """True while the unit has not finished."""
        if not self._forked or self._thread is None:
            return False
        if self._thread.is_alive():
            return True
        self._finish()
        return False

    def terminate(self) -> None:
        """Ask the unit to stop and wait for it, up to the termination timeout."""
        if not self._forked or self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(self._terminate_timeout)
        if self._thread.is_alive():
            self._exit_code = -int(signal.SIGTERM)
        self._finish()