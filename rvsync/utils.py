"""Small helpers: worker counts and a terminal spinner."""

from __future__ import annotations

import itertools
import os
import re
import sys
import threading
from typing import TextIO

NUM_CPUS_ENV_VAR = "RV_NUM_CPUS"
TICK_CHARS = "⠁⠂⠄⡀⢀⠠⠐⠈ "
_CLEAR_LINE = "\r\x1b[2K"
_UNSIGNED = re.compile(r"\+?[0-9]+")


def get_max_workers(env_var: str = NUM_CPUS_ENV_VAR) -> int:
    """Number of workers from the environment, or the number of CPUs."""
    value = os.environ.get(env_var)
    if value is not None and _UNSIGNED.fullmatch(value):
        return int(value)
    return os.cpu_count() or 1


class Spinner:
    """A spinner drawn on one terminal line from a background thread."""

    def __init__(
        self,
        message: str,
        visible: bool = True,
        stream: TextIO | None = None,
        interval: float = 0.1,
    ) -> None:
        self.message = message
        self.visible = visible
        self.interval = interval
        self._stream = stream if stream is not None else sys.stderr
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._drawn = False

    @property
    def running(self) -> bool:
        return self._thread is not None

    def start(self) -> Spinner:
        if self.visible and self._thread is None:
            self._stop.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def _spin(self) -> None:
        for frame in itertools.cycle(TICK_CHARS[:-1]):
            self._stream.write(f"\r{frame} {self.message}")
            self._stream.flush()
            self._drawn = True
            if self._stop.wait(self.interval):
                break

    def finish_and_clear(self) -> None:
        if self._thread is not None:
            self._stop.set()
            self._thread.join()
            self._thread = None
        if self._drawn:
            self._stream.write(_CLEAR_LINE)
            self._stream.flush()
            self._drawn = False

    def __enter__(self) -> Spinner:
        return self.start()

    def __exit__(self, *exc_info: object) -> None:
        self.finish_and_clear()


def create_spinner(visible: bool, message: str) -> Spinner:
    """Create a spinner and start it if it is visible."""
    return Spinner(message, visible=visible).start()