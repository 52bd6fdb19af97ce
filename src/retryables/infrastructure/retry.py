"""Retry executor built on tenacity.

This module drives the bounded retry loop: capped exponential backoff with
full jitter between attempts, a caller-supplied retry predicate, diagnostic
lines for each retried failure, and preemptible waits via CancellationToken.
"""

from __future__ import annotations

import functools
import logging
import random
from typing import Any, Callable, Dict, Optional, TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
)

from retryables.domain.config.retry import RetryConfig
from retryables.domain.models.attempt import AttemptRecord
from retryables.infrastructure.backoff import wait_full_jitter
from retryables.infrastructure.cancellation import CancellationError, CancellationToken
from retryables.infrastructure.sinks.base import DiagnosticSink
from retryables.infrastructure.sinks.null import DISCARD
from retryables.infrastructure.sinks.stream import StreamSink

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _retry_any(exception: Exception) -> bool:
    return True


def _coerce_sink(sink: Any) -> DiagnosticSink:
    """Accept a DiagnosticSink, any writable text stream, or None."""
    if sink is None:
        return DISCARD
    if isinstance(sink, DiagnosticSink):
        return sink
    if callable(getattr(sink, "write", None)):
        return StreamSink(sink)
    raise TypeError(f"Unsupported diagnostic sink: {sink!r}")


class RetryExecutor:
    """Runs operations under a bounded-retry, backoff-with-jitter policy.

    Executors are immutable: the with_* methods return a new executor, so a
    single instance can be shared between threads once built.
    """

    def __init__(
        self,
        config: Optional[RetryConfig] = None,
        *,
        retry_if: Optional[Callable[[Exception], bool]] = None,
        sink: Any = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize executor

        Args:
            config: Attempt budget and delay policy (defaults if None)
            retry_if: Returns True if the exception should be retried (any exception if None)
            sink: DiagnosticSink or text stream receiving failed-attempt lines (discarded if None)
            rng: Random source for jitter (private random.Random if None)

        Raises:
            TypeError: If sink is neither a DiagnosticSink nor writable
        """
        self._config = config or RetryConfig()
        self._retry_if = retry_if or _retry_any
        self._sink = _coerce_sink(sink)
        self._rng = rng or random.Random()

    @property
    def config(self) -> RetryConfig:
        return self._config

    @property
    def retry_if(self) -> Callable[[Exception], bool]:
        return self._retry_if

    @property
    def sink(self) -> DiagnosticSink:
        return self._sink

    def _replace(self, **changes: Any) -> RetryExecutor:
        params: Dict[str, Any] = {
            "config": self._config,
            "retry_if": self._retry_if,
            "sink": self._sink,
            "rng": self._rng,
        }
        params.update(changes)
        config = params.pop("config")
        return RetryExecutor(config, **params)

    def with_retry_condition(self, retry_if: Callable[[Exception], bool]) -> RetryExecutor:
        """Return a copy using retry_if to decide whether a failure is retried"""
        return self._replace(retry_if=retry_if)

    def with_attempt_budget(self, attempt_budget: int) -> RetryExecutor:
        """Return a copy allowing at most attempt_budget invocations

        Raises:
            pydantic.ValidationError: If attempt_budget < 1
        """
        config = RetryConfig.model_validate({**self._config.model_dump(), "attempt_budget": attempt_budget})
        return self._replace(config=config)

    def with_delay_policy(self, base_delay: float, max_delay: float) -> RetryExecutor:
        """Return a copy using the given base delay and backoff cap (seconds)

        Raises:
            pydantic.ValidationError: If either delay is negative
        """
        config = RetryConfig.model_validate(
            {**self._config.model_dump(), "base_delay": base_delay, "max_delay": max_delay}
        )
        return self._replace(config=config)

    def with_sink(self, sink: Any) -> RetryExecutor:
        """Return a copy writing diagnostic lines to sink"""
        return self._replace(sink=sink)

    def retry(self, operation: Callable[[], T], cancellation: Optional[CancellationToken] = None) -> T:
        """Run operation until it succeeds, fails non-retryably, or the budget runs out.

        Args:
            operation: Zero-argument callable to invoke
            cancellation: Token checked before each attempt and raced against every wait

        Returns:
            The operation's return value

        Raises:
            CancellationError: If the token fired before an attempt or during a wait
            Exception: The operation's last error, unchanged
        """
        token = cancellation or CancellationToken()
        budget = self._config.attempt_budget
        state = {"attempts": 0, "retryable": False}

        def _attempt() -> T:
            token.raise_if_cancelled()
            state["attempts"] += 1
            logger.debug(f"Attempt {state['attempts']}/{budget} starting")
            return operation()

        def _should_retry(exception: BaseException) -> bool:
            # Cancellation and non-Exception signals always propagate
            if isinstance(exception, CancellationError) or not isinstance(exception, Exception):
                state["retryable"] = False
            else:
                state["retryable"] = bool(self._retry_if(exception))
            return state["retryable"]

        def _sleep(seconds: float) -> None:
            if token.wait(seconds):
                logger.debug(f"Cancelled while waiting {seconds:.3f}s before next attempt")
                token.raise_if_cancelled()

        def _before_sleep(retry_state: RetryCallState) -> None:
            if retry_state.outcome is None:
                return
            record = AttemptRecord(
                index=retry_state.attempt_number - 1,
                error=retry_state.outcome.exception(),
                delay=retry_state.next_action.sleep if retry_state.next_action else None,
            )
            self._sink.write(record.describe(budget))
            logger.debug(f"Retrying in {record.delay or 0.0:.3f}s after attempt {record.number}/{budget}")

        retrying = Retrying(
            stop=stop_after_attempt(budget),
            wait=wait_full_jitter(self._config.base_delay, self._config.max_delay, self._rng, budget),
            retry=retry_if_exception(_should_retry),
            reraise=True,
            before_sleep=_before_sleep,
            sleep=_sleep,
        )

        try:
            result = retrying(_attempt)
        except Exception as e:
            if state["retryable"] and state["attempts"] == budget:
                logger.error(f"Giving up after {budget} attempts: {e}")
            raise
        if state["attempts"] > 1:
            logger.debug(f"Succeeded on attempt {state['attempts']}/{budget}")
        return result

    def __call__(self, func: Callable[..., T]) -> Callable[..., T]:
        """Use the executor as a decorator: every call to func is retried."""

        @functools.wraps(func)
        def wrapped(*args: Any, **kwargs: Any) -> T:
            return self.retry(functools.partial(func, *args, **kwargs))

        return wrapped
