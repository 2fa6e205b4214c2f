import heapq
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Tuple


logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """Runs a callback once after a delay. Timers are single-shot and are
    never cancelled; staleness is decided by the caller when it fires."""

    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callable[[], None], label: str = '') -> None: ...


class SocketIOScheduler(Scheduler):
    """Timers as Socket.IO background tasks, so they cooperate with the
    server's async mode (threading, eventlet or gevent)."""

    def __init__(self, app, socketio):
        self.app = app
        self.socketio = socketio

    def call_later(self, delay_ms: int, callback: Callable[[], None], label: str = '') -> None:
        delay = max(0, int(delay_ms)) / 1000.0
        try:
            self.app.logger.debug(f"[timer-set] step={label} delay={delay_ms}ms")
        except Exception:
            pass

        def _worker():
            self.socketio.sleep(delay)
            with self.app.app_context():
                try:
                    callback()
                except Exception:
                    self.app.logger.exception(f"[timer-error] step={label}")

        self.socketio.start_background_task(_worker)


class ManualScheduler(Scheduler):
    """Virtual clock. Nothing fires until ``advance`` or ``run_next``.

    Timers due at the same instant fire in the order they were scheduled.
    """

    def __init__(self):
        self.now_ms = 0
        self._queue: List[Tuple[int, int, str, Callable[[], None]]] = []
        self._seq = itertools.count()

    def call_later(self, delay_ms: int, callback: Callable[[], None], label: str = '') -> None:
        due = self.now_ms + max(0, int(delay_ms))
        heapq.heappush(self._queue, (due, next(self._seq), label, callback))
        logger.debug(f"[timer-set] step={label} due={due}ms")

    @property
    def pending(self) -> int:
        return len(self._queue)

    def next_due(self):
        return self._queue[0][0] if self._queue else None

    def run_next(self) -> bool:
        """Jump the clock to the earliest timer and fire it."""
        if not self._queue:
            return False
        due, _, label, callback = heapq.heappop(self._queue)
        self.now_ms = max(self.now_ms, due)
        callback()
        return True

    def advance(self, ms: int) -> int:
        """Move the clock forward, firing every timer that falls due
        (including ones scheduled by fired timers). Returns the count fired."""
        target = self.now_ms + max(0, int(ms))
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            self.run_next()
            fired += 1
        self.now_ms = target
        return fired

    def run_until_idle(self, limit: int = 10000) -> int:
        fired = 0
        while self._queue and fired < limit:
            self.run_next()
            fired += 1
        return fired
