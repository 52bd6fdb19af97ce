"""AttemptRecord model - represents the outcome of a single attempt"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AttemptRecord:
    """Outcome of one attempt inside a retry call"""

    index: int  # 0-based
    error: Optional[BaseException] = None
    delay: Optional[float] = None  # Realized wait before the next attempt

    @property
    def number(self) -> int:
        """1-based attempt number, as shown to humans"""
        return self.index + 1

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def describe(self, budget: int) -> str:
        """Format the diagnostic line for a failed attempt"""
        return f"Attempt {self.number}/{budget} failed: {self.error}"
