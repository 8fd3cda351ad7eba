"""Engine error types."""

from __future__ import annotations


class PingSourceError(Exception):
    """Base exception for update engine errors."""


class NotFoundError(PingSourceError):
    """Raised when the PingSource does not exist."""

    def __init__(self, name: str, namespace: str) -> None:
        super().__init__(f"ping source '{name}' not found in namespace '{namespace}'")
        self.name = name
        self.namespace = namespace


class AlreadyDeletingError(PingSourceError):
    """Raised when the PingSource carries a deletion timestamp."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"can't update ping source {name} because it has been marked for deletion"
        )
        self.name = name


class MalformedInputError(PingSourceError):
    """One or more update inputs are invalid."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        msg = "Invalid input:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(msg)


class SinkResolutionError(PingSourceError):
    """Raised when a sink reference cannot be resolved."""


class StoreError(PingSourceError):
    """Raised when reading or writing the PingSource fails."""
