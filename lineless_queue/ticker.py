from __future__ import annotations

# Periodic queue advancement.
#
# A ticker is a daemon thread that calls `engine.advance()` every `interval`
# seconds until cancelled. Two tickers on the same engine would advance the
# serving pointer twice as fast, so callers keep their handle in a
# `TickerSlot`, which cancels the previous handle before starting a new one.

import threading
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .engine import QueueEngine


AdvanceCallback = Callable[[str], None]


class AutoAdvance:
    """Handle for one running ticker."""

    def __init__(self, engine: QueueEngine, callback: AdvanceCallback | None, interval: float) -> None:
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self.engine = engine
        self.interval = interval
        self._callback = callback
        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._loop, name="auto-advance", daemon=True)

    @property
    def active(self) -> bool:
        return self._thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> AutoAdvance:
        self._thread.start()
        return self

    def cancel(self) -> None:
        """Stop ticking. Safe to call more than once, and from the callback."""
        self._stop_event.set()
        t = self._thread
        if t.is_alive() and t is not threading.current_thread():
            t.join(timeout=max(1.0, self.interval))

    def _loop(self) -> None:
        # First advance happens one interval after start.
        while not self._stop_event.wait(self.interval):
            identifier = self.engine.advance()
            if self._callback is None:
                continue
            try:
                self._callback(identifier)
            except Exception as e:
                # Keep ticking even if a listener fails.
                print(f"[ticker] callback failed after {identifier}: {e!r}")


def start_auto_advance(
    engine: QueueEngine,
    callback: AdvanceCallback | None = None,
    interval: float = 5.0,
) -> AutoAdvance:
    """Start advancing `engine` every `interval` seconds; returns the handle."""
    return AutoAdvance(engine, callback, interval).start()


class TickerSlot:
    """Holds at most one active ticker for an engine."""

    def __init__(self, engine: QueueEngine) -> None:
        self.engine = engine
        self._lock = threading.Lock()
        self._handle: AutoAdvance | None = None

    @property
    def handle(self) -> AutoAdvance | None:
        return self._handle

    def start(self, callback: AdvanceCallback | None = None, interval: float = 5.0) -> AutoAdvance:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._handle = start_auto_advance(self.engine, callback, interval)
            return self._handle

    def stop(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None
