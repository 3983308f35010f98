import logging
import threading
from typing import Any, Callable, Hashable

from coursedesk.core.config import AUTOSAVE_IDLE_SECONDS

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Commit an edit once its key has been idle for ``idle_seconds``.

    A newer ``submit`` for the same key cancels the outstanding timer, so only
    the latest value is committed. ``close()`` cancels everything and refuses
    further edits. ``timer_factory`` must build an object with ``start()`` and
    ``cancel()`` from ``(interval, function)``, like ``threading.Timer``.
    """

    def __init__(
        self,
        callback: Callable[[Hashable, Any], None],
        idle_seconds: float = AUTOSAVE_IDLE_SECONDS,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self._callback = callback
        self._idle_seconds = idle_seconds
        self._timer_factory = timer_factory
        self._timers: dict[Hashable, Any] = {}
        self._values: dict[Hashable, Any] = {}
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, key: Hashable, value: Any) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("debouncer is closed")

            previous = self._timers.pop(key, None)
            if previous is not None:
                previous.cancel()
                logger.debug("superseded pending save for %r", key)

            timer = self._timer_factory(self._idle_seconds, lambda: self._fire(key, timer))
            self._timers[key] = timer
            self._values[key] = value

        timer.start()

    def _fire(self, key: Hashable, timer: Any) -> None:
        with self._lock:
            # a superseded or cancelled timer may still fire once
            if self._timers.get(key) is not timer:
                return
            del self._timers[key]
            value = self._values.pop(key)

        logger.debug("auto-saving %r", key)
        self._callback(key, value)

    def cancel(self, key: Hashable) -> bool:
        with self._lock:
            timer = self._timers.pop(key, None)
            self._values.pop(key, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def pending(self) -> set:
        with self._lock:
            return set(self._timers)

    def flush(self) -> None:
        with self._lock:
            items = list(self._values.items())
            timers = list(self._timers.values())
            self._timers.clear()
            self._values.clear()

        for timer in timers:
            timer.cancel()
        for key, value in items:
            self._callback(key, value)

    def close(self) -> None:
        with self._lock:
            self._closed = True
            timers = list(self._timers.values())
            self._timers.clear()
            self._values.clear()

        for timer in timers:
            timer.cancel()
        logger.debug("debouncer closed, %d pending save(s) dropped", len(timers))
