# util/terminal.py
import logging
import os
import select
import shutil
import signal
import sys
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, TextIO

logger = logging.getLogger(__name__)


def terminal_size() -> tuple[int, int]:
    size = shutil.get_terminal_size()
    return size.columns, size.lines


@contextmanager
def cbreak(stream: TextIO | None = None) -> Iterator[bool]:
    """
    Put a tty into cbreak mode (one key at a time, no echo) for the
    duration of the block. Yields False when the stream is not a tty.
    """
    stream = stream or sys.stdin
    if not stream.isatty():
        yield False
        return

    import termios
    import tty

    fd = stream.fileno()
    saved = termios.tcgetattr(fd)
    tty.setcbreak(fd)
    try:
        yield True
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


class KeyReader(threading.Thread):
    """Reads single key presses and hands each one to `on_key`."""

    def __init__(
        self,
        on_key: Callable[[str], None],
        stream: TextIO | None = None,
        poll_seconds: float = 0.1,
    ) -> None:
        super().__init__(name="key-reader", daemon=True)
        self._on_key = on_key
        self._stream = stream or sys.stdin
        self._poll = poll_seconds
        self._stopped = threading.Event()

    def run(self) -> None:
        fd = self._stream.fileno()
        while not self._stopped.is_set():
            ready, _, _ = select.select([fd], [], [], self._poll)
            if not ready:
                continue
            data = os.read(fd, 32)
            if not data:
                # EOF: nobody can press a key any more
                return
            self._on_key(data.decode("utf-8", errors="replace"))
            return

    def stop(self) -> None:
        self._stopped.set()
        # Wait out the current select so no later keystroke is consumed here
        if self.is_alive() and threading.current_thread() is not self:
            self.join(self._poll * 2)


@contextmanager
def on_resize(callback: Callable[[int, int], None]) -> Iterator[None]:
    """Call `callback(columns, lines)` whenever the terminal is resized."""
    if not hasattr(signal, "SIGWINCH"):
        yield
        return

    def _handler(signum, frame):
        callback(*terminal_size())

    previous = signal.signal(signal.SIGWINCH, _handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGWINCH, previous)
