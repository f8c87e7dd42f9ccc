"""Fixed-interval polling with an explicit stop handle."""

import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

from .errors import TransitFeedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_POLL_INTERVAL = 30.0  # Seconds


class Poller(Generic[T]):
    """
    Calls ``fetch`` every ``interval`` seconds and hands results to ``on_result``.

    A single worker thread runs the ticks, so two fetches never overlap and
    results are delivered in the order they were requested. A fetch that
    takes longer than the interval pushes the next tick back rather than
    stacking a second request behind it.

    Once stop() returns, neither callback is invoked again.
    """

    def __init__(
        self,
        fetch: Callable[[], T],
        on_result: Callable[[T], None],
        interval: float = DEFAULT_POLL_INTERVAL,
        on_error: Optional[Callable[[Exception], None]] = None,
        name: str = "bustrack-poller",
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.fetch = fetch
        self.on_result = on_result
        self.on_error = on_error
        self.interval = interval
        self.name = name
        self.ticks = 0
        self._stop_event = threading.Event()
        self._deliver_lock = threading.RLock()  # stop() may be called from a callback
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> "Poller[T]":
        """Start polling; the first fetch happens immediately."""
        if self._stop_event.is_set():
            raise RuntimeError(f"Poller {self.name} was stopped and cannot be restarted")
        if self._thread is not None:
            return self

        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        logger.debug(f"Started {self.name} (interval: {self.interval}s)")
        return self

    def stop(self, timeout: float = 5.0) -> None:
        """Stop polling. No callback fires after this returns."""
        # Taking the lock waits out a delivery already in progress
        with self._deliver_lock:
            already_stopped = self._stop_event.is_set()
            self._stop_event.set()

        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        if not already_stopped:
            logger.debug(f"Stopped {self.name}")

    def __enter__(self) -> "Poller[T]":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self._tick()
            if self._stop_event.wait(self.interval):
                break

    def _tick(self) -> None:
        self.ticks += 1
        try:
            result = self.fetch()
        except TransitFeedError as e:
            logger.warning(f"{self.name}: fetch failed, keeping previous data: {e}")
            self._deliver(self.on_error, e)
            return
        except Exception as e:
            logger.error(f"{self.name}: unexpected error while fetching: {e}", exc_info=True)
            self._deliver(self.on_error, e)
            return

        self._deliver(self.on_result, result)

    def _deliver(self, callback, value) -> None:
        if callback is None:
            return
        with self._deliver_lock:
            if self._stop_event.is_set():
                logger.debug(f"{self.name}: dropping result that arrived after stop")
                return
            try:
                callback(value)
            except Exception as e:
                logger.error(f"{self.name}: callback raised: {e}", exc_info=True)
