"""Error taxonomy shared by folder resolution and uploads."""

from __future__ import annotations


class ValidationError(Exception):
    """Raised when caller-supplied data is rejected before any remote call."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class StoreError(Exception):
    """Raised when a call to the remote directory fails.

    Carries the operation and the id or path it targeted so the caller can
    decide whether to retry. Nothing is retried or rolled back internally.
    """

    def __init__(
        self,
        operation: str,
        target: str,
        detail: str,
        segment: str | None = None,
    ) -> None:
        message = f"{operation} failed for {target}: {detail}"
        if segment is not None:
            message = f"{message} (segment: {segment})"
        super().__init__(message)
        self.operation = operation
        self.target = target
        self.detail = detail
        self.segment = segment
