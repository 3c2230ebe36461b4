"""Exception hierarchy for thinkact."""

from __future__ import annotations


class ThinkactError(Exception):
    """Base exception for thinkact errors."""


class BackendError(ThinkactError):
    """Raised when an LLM backend call fails. Always fatal to a run."""


class BackendConnectionError(BackendError):
    """The backend could not be reached, or the transport failed mid-call."""


class InvalidResponseError(BackendError):
    """The backend call succeeded but produced no usable content."""


class UnsupportedOperationError(BackendError):
    """The backend does not expose the requested capability."""


class TaskCompletedError(ThinkactError):
    """Raised when reasoning is requested after the task has completed."""


class InvalidStateError(ThinkactError):
    """Raised when a step executor operation is called out of order."""
