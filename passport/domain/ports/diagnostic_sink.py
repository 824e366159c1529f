from typing import Protocol


class DiagnosticSink(Protocol):
    """Ordered debug map filled per request. Never wired up in production."""

    def record(self, key: str, value: str) -> None:
        """Store one diagnostic value."""
