"""Scheduler - background loop that collects and sends on every tick."""

import logging
import threading
from typing import Callable, Optional

import httpx

from .collector import Batch
from .errors import ClientAlreadyRunningError, PromWriteError
from .transport import WriteStats

logger = logging.getLogger(__name__)


class PushScheduler:
    """
    Runs ``collect`` then ``send`` once per interval on a daemon thread.

    Only one loop may be active at a time. ``stop`` is cooperative: it asks
    the loop to exit and returns without waiting; the running flag is cleared
    by the loop thread itself once it has left.
    """

    def __init__(
        self,
        collect: Callable[[], Batch],
        send: Callable[[Batch], WriteStats],
        name: str = "promwrite-push",
    ):
        self._collect = collect
        self._send = send
        self._name = name
        self._lock = threading.Lock()
        self._running = False
        self._cancel: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    def start(self, interval: float):
        """Start the loop. Raises ClientAlreadyRunningError if one is active."""
        if interval <= 0:
            raise ValueError(f"Interval must be positive, got {interval}")

        with self._lock:
            if self._running:
                raise ClientAlreadyRunningError()
            self._running = True
            cancel = threading.Event()
            self._cancel = cancel
            self._thread = threading.Thread(
                target=self._loop,
                args=(interval, cancel),
                daemon=True,
                name=self._name,
            )
            thread = self._thread

        try:
            thread.start()
        except BaseException:
            with self._lock:
                self._running = False
                self._cancel = None
                self._thread = None
            raise

    def stop(self):
        """Ask the loop to exit. Does nothing if it is not running."""
        with self._lock:
            if self._running and self._cancel is not None:
                self._cancel.set()

    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the loop thread has exited. Returns False on timeout."""
        with self._lock:
            thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def tick(self) -> Optional[WriteStats]:
        """Run one collect-and-send cycle, logging instead of raising."""
        try:
            batch = self._collect()
        except PromWriteError as e:
            logger.error(f"Failed to collect metrics for remote_write: {e}")
            return None

        try:
            stats = self._send(batch)
        except (PromWriteError, httpx.HTTPError) as e:
            logger.error(f"Failed to send metrics to remote endpoint: {e}")
            return None

        logger.debug(
            f"Successfully sent metrics via remote_write: "
            f"count={stats.all_samples} written={not stats.no_data_written}"
        )
        return stats

    def _loop(self, interval: float, cancel: threading.Event):
        logger.debug("Starting remote_write client")
        try:
            while not cancel.wait(interval):
                try:
                    self.tick()
                except Exception as e:
                    # A misbehaving registry collector must not end the loop
                    logger.exception(f"Unexpected error during remote_write tick: {e}")
        finally:
            with self._lock:
                self._running = False
                self._cancel = None
            logger.info("Stopping remote_write client")
