"""Cancellation tokens for preemptible retry loops.

A token combines explicit cancellation with an optional deadline. It can be
polled synchronously and waited on with a timeout, which is what lets the
retry loop abandon a backoff wait as soon as the caller gives up.
"""

from __future__ import annotations

import logging
import threading
import time
import weakref
from typing import Optional

logger = logging.getLogger(__name__)


class CancellationError(Exception):
    """Raised when a cancellation token has been cancelled."""

    pass


class DeadlineExceededError(CancellationError):
    """Raised when a cancellation token's deadline has passed."""

    pass


class CancellationToken:
    """Explicit-cancel and deadline signal shared between caller and retry loop.

    Cancelling a token cancels every child derived from it. A child's deadline
    is the earlier of its own and its parent's. Parents hold children weakly
    and a cancelled child detaches itself; children hold their parent strongly
    so a chain kept alive from its leaf still sees the root's cancellation.
    """

    def __init__(self, timeout: Optional[float] = None, parent: Optional[CancellationToken] = None):
        """Initialize token

        Args:
            timeout: Seconds from now until the deadline (None = no deadline)
            parent: Token whose cancellation propagates to this one

        Raises:
            ValueError: If timeout is negative
        """
        if timeout is not None and timeout < 0:
            raise ValueError("timeout must be non-negative")

        self._event = threading.Event()
        self._lock = threading.Lock()
        self._children: weakref.WeakSet = weakref.WeakSet()
        self._parent: Optional[CancellationToken] = None
        self._reason: Optional[str] = None
        self._expired = False
        self._deadline = None if timeout is None else time.monotonic() + timeout

        if parent is not None:
            if parent.deadline is not None and (self._deadline is None or parent.deadline < self._deadline):
                self._deadline = parent.deadline
            self._parent = parent
            parent._attach(self)

    @property
    def deadline(self) -> Optional[float]:
        """Deadline on the time.monotonic() clock, if any"""
        return self._deadline

    def child(self, timeout: Optional[float] = None) -> CancellationToken:
        """Derive a token that is cancelled together with this one"""
        return CancellationToken(timeout=timeout, parent=self)

    def _attach(self, child: CancellationToken) -> None:
        with self._lock:
            if not self._event.is_set():
                self._children.add(child)
                return
            reason = self._reason
        child.cancel(reason)

    def _detach(self, child: CancellationToken) -> None:
        with self._lock:
            self._children.discard(child)

    def cancel(self, reason: Optional[str] = None) -> None:
        """Cancel this token and all of its children. Idempotent."""
        with self._lock:
            if self._event.is_set():
                return
            self._reason = reason or "operation cancelled"
            self._event.set()
            children = list(self._children)
            self._children.clear()
        if self._parent is not None:
            self._parent._detach(self)
        logger.debug(f"Cancellation requested: {self._reason}")
        for child in children:
            child.cancel(self._reason)

    def remaining(self) -> Optional[float]:
        """Seconds until the deadline (None if no deadline, never negative)"""
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def deadline_exceeded(self) -> bool:
        if self._expired:
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def is_cancelled(self) -> bool:
        """Check whether the token was cancelled or its deadline has passed"""
        return self._event.is_set() or self.deadline_exceeded()

    def error(self) -> Optional[CancellationError]:
        """Build the error describing why this token fired

        Returns:
            CancellationError, DeadlineExceededError, or None if still live
        """
        if self._event.is_set():
            return CancellationError(self._reason)
        if self.deadline_exceeded():
            return DeadlineExceededError("deadline exceeded")
        return None

    def raise_if_cancelled(self) -> None:
        """Raise the cancellation error if the token has fired

        Raises:
            CancellationError: If the token was cancelled or timed out
        """
        err = self.error()
        if err is not None:
            raise err

    def wait(self, timeout: float) -> bool:
        """Block for up to timeout seconds, waking early on cancellation

        Args:
            timeout: Maximum seconds to block

        Returns:
            True if the token fired before the timeout elapsed, else False
        """
        if timeout <= 0:
            return self.is_cancelled()

        remaining = self.remaining()
        if remaining is not None and remaining <= timeout:
            # The deadline arrives first; an explicit cancel may still beat it
            if not self._event.wait(remaining):
                self._expired = True
            return True
        return self._event.wait(timeout)
