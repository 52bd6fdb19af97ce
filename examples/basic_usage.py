"""Retry a flaky call, only while it reports a busy resource"""

import errno
import logging

from retryables.infrastructure.cancellation import CancellationToken
from retryables.infrastructure.retry import RetryExecutor
from retryables.infrastructure.sinks import LoggerSink

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

state = {"count": 0}


def read_counter() -> int:
    if state["count"] < 2:
        state["count"] += 1
        raise OSError(errno.EBUSY, "Device or resource busy")
    return state["count"]


executor = (
    RetryExecutor(sink=LoggerSink(logging.getLogger("example")))
    .with_delay_policy(0.1, 0.5)
    .with_attempt_budget(3)
    .with_retry_condition(lambda e: isinstance(e, OSError) and e.errno == errno.EBUSY)
)

print(executor.retry(read_counter, CancellationToken(timeout=5)))
