"""
Cooperative cancellation.

A CancellationToken is created by the caller and passed explicitly into each
operation. Cancelling it runs the registered callbacks once; the process
layer uses this to deliver an interrupt signal to the build tool.
"""

import logging
import threading
from typing import Callable, List

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Request that an in-flight operation stop early.

    Cancellation is advisory: the operation still completes through its
    normal exit path.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._cancelled = False
        self._callbacks: List[Callable[[], None]] = []

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Mark the token cancelled and run callbacks. Repeated calls are no-ops."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            callbacks = list(self._callbacks)
            self._callbacks.clear()

        logger.debug(f"Cancellation requested, notifying {len(callbacks)} listener(s)")
        for callback in callbacks:
            callback()

    def register(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Run ``callback`` on cancellation.

        If the token is already cancelled the callback runs immediately.

        Returns:
            A function that unregisters the callback
        """
        with self._lock:
            if not self._cancelled:
                self._callbacks.append(callback)
                return lambda: self._unregister(callback)

        callback()
        return lambda: None

    def _unregister(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)
