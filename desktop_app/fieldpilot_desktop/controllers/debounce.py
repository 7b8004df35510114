"""Trailing-edge debounce for search inputs."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional, Protocol

DEFAULT_DELAY_SECONDS = 0.5


class TimerHandle(Protocol):
    """What a timer factory returns: something that can be started and cancelled."""

    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]


def _thread_timer(delay: float, callback: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    return timer


class Debouncer:
    """Run ``callback`` once the caller has been quiet for ``delay`` seconds.

    Every :meth:`trigger` cancels the pending timer and schedules a new one,
    so only the last value of a burst reaches the callback.
    """

    def __init__(self, callback: Callable[..., Any], delay: float = DEFAULT_DELAY_SECONDS,
                 timer_factory: Optional[TimerFactory] = None) -> None:
        self.callback = callback
        self.delay = delay
        self.timer_factory = timer_factory or _thread_timer
        self._timer: Optional[TimerHandle] = None
        self._args: tuple = ()
        self._kwargs: dict = {}

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def trigger(self, *args: Any, **kwargs: Any) -> None:
        """Restart the quiet period; only the last call's arguments are used."""

        self.cancel()
        self._args = args
        self._kwargs = kwargs
        self._timer = self.timer_factory(self.delay, self._fire)
        self._timer.start()

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def flush(self) -> None:
        """Run a pending call right away."""

        if self._timer is None:
            return
        self.cancel()
        self.callback(*self._args, **self._kwargs)

    def _fire(self) -> None:
        self._timer = None
        self.callback(*self._args, **self._kwargs)


__all__ = ["DEFAULT_DELAY_SECONDS", "Debouncer", "TimerFactory", "TimerHandle"]
