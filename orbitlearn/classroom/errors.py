"""
Error types raised by the classroom components.

StorageError is caught by the progress store; the loader errors and
ImportValidationError propagate to the caller.
"""

from typing import Optional


class OrbitLearnError(Exception):
    """Base class for all OrbitLearn errors."""


class StorageError(OrbitLearnError):
    """A storage backend could not read or write a value."""


class CurriculumError(OrbitLearnError, ValueError):
    """The curriculum configuration is invalid."""


class UnknownGroupError(OrbitLearnError, KeyError):
    """A group ID is not defined in the curriculum."""

    def __init__(self, group_id: str):
        super().__init__(group_id)
        self.group_id = group_id

    def __str__(self) -> str:
        return f"Unknown group: {self.group_id}"


class AssemblyFailure(OrbitLearnError):
    """One of the concurrent content sub-tasks failed."""

    def __init__(self, group_id: str, reason: Optional[str] = None):
        message = f"Failed to load group: {group_id}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.group_id = group_id


class ImportValidationError(OrbitLearnError, ValueError):
    """An imported progress document was rejected."""


class ListenerError(OrbitLearnError):
    """A progress listener raised while handling an event."""

    def __init__(self, event: str, listener: object, error: BaseException):
        name = getattr(listener, "__qualname__", None) or repr(listener)
        super().__init__(f"Listener {name} failed on '{event}': {error!r}")
        self.event = event
        self.listener = listener
        self.error = error
