"""Clipboard polling for repository URLs."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

import pyperclip

from .models import RepositoryReference
from .urls import parse_repository


logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0


def read_clipboard() -> str:
    """Return the current clipboard text."""
    return pyperclip.paste()


class ClipboardWatcher:
    """Poll the clipboard and report whether it holds a repository URL.

    ``on_detected`` fires on every tick that sees a repository, even when it is
    the same one as last time, so it must be idempotent. ``on_no_repository``
    fires on every other tick, including ticks where the clipboard could not be
    read.
    """

    def __init__(
        self,
        on_detected: Callable[[RepositoryReference], None],
        on_no_repository: Callable[[], None],
        *,
        interval: float = DEFAULT_INTERVAL,
        read_clipboard: Callable[[], Optional[str]] = read_clipboard,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.on_detected = on_detected
        self.on_no_repository = on_no_repository
        self.interval = interval
        self.read_clipboard = read_clipboard
        self.current: Optional[RepositoryReference] = None
        self._stop = threading.Event()
        self._tick_lock = threading.Lock()
        self.thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self.thread is not None and self.thread.is_alive() and not self._stop.is_set()

    def start(self) -> None:
        """Check once right away, then keep checking every ``interval`` seconds."""
        if self.is_running:
            return

        # each run owns its event so a thread left over from an earlier run still sees its stop
        stop = threading.Event()
        self._stop = stop
        self._tick()
        self.thread = threading.Thread(target=self._monitor, args=(stop,), name="clipboard-watcher", daemon=True)
        self.thread.start()

    def stop(self) -> None:
        """Stop scheduling ticks. A tick already running is allowed to finish."""
        self._stop.set()
        thread = self.thread
        if thread and thread is not threading.current_thread():
            thread.join(timeout=max(2.0, self.interval))
        self.thread = None

    def check(self) -> Optional[RepositoryReference]:
        """Run a single tick and return the repository now held, if any."""
        try:
            text = self.read_clipboard()
        except Exception as exc:
            logger.debug("Clipboard read failed: %s", exc)
            text = None

        repo = parse_repository(text)
        self.current = repo
        if repo is not None:
            self.on_detected(repo)
        else:
            self.on_no_repository()
        return repo

    def _tick(self, stop: Optional[threading.Event] = None) -> None:
        with self._tick_lock:
            if stop is not None and stop.is_set():
                return
            try:
                self.check()
            except Exception:
                logger.exception("Clipboard watcher callback failed")

    def _monitor(self, stop: threading.Event) -> None:
        while not stop.wait(self.interval):
            self._tick(stop)
