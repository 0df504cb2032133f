from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class PhotonError(Exception):
    """Base error type for photonctl."""


class ConfigError(PhotonError):
    """Raised when configuration cannot be loaded or validated."""


class AuthError(PhotonError):
    """Raised when authentication or token refresh fails."""


class UsageError(PhotonError):
    """Raised when a command is invoked with missing or conflicting arguments."""


class RequestError(PhotonError):
    """Raised when an HTTP request fails after retries."""


@dataclass(slots=True)
class APIError(RequestError):
    """Represents a non-success control plane API response."""

    status_code: int
    message: str
    code: str | None = None
    body: str | None = None

    def __str__(self) -> str:
        label = f"HTTP {self.status_code}"
        if self.code:
            label = f"{label} {self.code}"
        if self.body and self.body != self.message:
            return f"{label}: {self.message} ({self.body})"
        return f"{label}: {self.message}"


class ResourceNotFoundError(APIError):
    """Raised for 404 responses."""


class TaskError(PhotonError):
    """Base error for task polling."""


class InvalidTaskIdError(TaskError):
    """Raised when a task id is malformed; no request is made."""


class TaskNotFoundError(TaskError):
    """Raised when the server no longer knows the polled task."""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"task '{task_id}' not found")
        self.task_id = task_id


@dataclass(slots=True)
class StepError:
    code: str | None
    message: str
    step: str | None = None

    def __str__(self) -> str:
        prefix = f"[{self.step}] " if self.step else ""
        if self.code:
            return f"{prefix}{self.message} ({self.code})"
        return f"{prefix}{self.message}"


class TaskFailedError(TaskError):
    """Raised when a task reaches the ERROR state."""

    def __init__(self, task: Any, errors: list[StepError] | None = None) -> None:
        self.task = task
        self.errors: list[StepError] = list(errors or [])
        operation = getattr(task, "operation", None) or "task"
        message = f"{operation} failed (task '{getattr(task, 'id', '?')}')"
        if self.errors:
            message = f"{message}: " + "; ".join(str(item) for item in self.errors)
        super().__init__(message)


class TaskTimeoutError(TaskError):
    """Raised when a task does not reach a terminal state within the poll budget."""

    def __init__(self, task_id: str, attempts: int, last_state: str | None = None) -> None:
        detail = f", last state {last_state}" if last_state else ""
        super().__init__(f"timed out waiting for task '{task_id}' after {attempts} polls{detail}")
        self.task_id = task_id
        self.attempts = attempts
        self.last_state = last_state


class ManifestError(PhotonError):
    """Raised when a host manifest cannot be loaded or validated."""


class IpRangeError(ManifestError):
    """Raised for malformed IP range expressions."""
