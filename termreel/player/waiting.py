"""Progress indicator for blocking steps (downloading, preprocessing)."""

from __future__ import annotations

import sys
import threading
from typing import TextIO

DOT_CYCLE = 4


class WaitingAnimation:
    """Prints ``message`` followed by cycling dots until stopped.

    Runs on a daemon thread, so a blocking step can proceed on the caller's
    thread::

        with WaitingAnimation("Downloading"):
            path = download_media(url, directory)

    :param message: Text shown before the dots
    :param interval: Seconds between animation steps
    :param stream: Output stream (default: stdout)
    """

    def __init__(self, message: str, interval: float = 0.8, stream: TextIO | None = None):
        self.message = message
        self.interval = interval
        self._stream = stream if stream is not None else sys.stdout
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the animation (no-op if already running)."""
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="termreel_waiting",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop the animation and finish its line."""
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None
        self._stream.write("\n")
        self._stream.flush()

    def _run(self) -> None:
        step = 0
        while True:
            dots = "." * (step % DOT_CYCLE)
            # Pad so a shorter line overwrites the previous one
            self._stream.write(f"\r{self.message}{dots:<{DOT_CYCLE - 1}}")
            self._stream.flush()
            step += 1
            if self._stop.wait(self.interval):
                break

    def __enter__(self) -> "WaitingAnimation":
        self.start()
        return self

    def __exit__(self, *args) -> None:
        self.stop()


__all__ = ["WaitingAnimation"]
