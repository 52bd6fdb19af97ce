"""Base diagnostic sink interface"""

from abc import ABC, abstractmethod


class DiagnosticSink(ABC):
    """Append-only target for human-readable retry diagnostics

    Sinks are not synchronized. Callers sharing one sink between threads
    are responsible for serializing writes.
    """

    @abstractmethod
    def write(self, line: str) -> None:
        """Append one diagnostic line

        Args:
            line: Line without trailing newline
        """
        pass
