"""Custom exception hierarchy for hqtrack."""

from __future__ import annotations


class HqError(Exception):
    """Base exception for all hqtrack errors."""


class HqConfigError(HqError):
    """Invalid or missing configuration."""


class HqDecodeError(HqError):
    """A frame could not be decoded into a reading.

    The whole message is rejected; the owning connection keeps reading.
    """

    def __init__(self, message: str, *, frame: str = "") -> None:
        self.frame = frame
        super().__init__(message)


class HqTransportError(HqError):
    """Connection-level failure (read error, idle timeout, peer reset).

    Fatal for the owning connection only.
    """

    def __init__(self, message: str, *, peer: str = "") -> None:
        self.peer = peer
        super().__init__(message)


class HqStoreError(HqError):
    """A store lookup or mutation failed."""

    def __init__(self, message: str, *, operation: str = "") -> None:
        self.operation = operation
        super().__init__(message)
