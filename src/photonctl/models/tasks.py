from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field

from photonctl.models.common import Entity, PhotonModel


class TaskState(StrEnum):
    QUEUED = "QUEUED"
    STARTED = "STARTED"
    COMPLETED = "COMPLETED"
    ERROR = "ERROR"


TERMINAL_STATES = frozenset({TaskState.COMPLETED.value, TaskState.ERROR.value})


class ApiErrorDetail(PhotonModel):
    code: str | None = None
    message: str = ""
    data: dict[str, Any] = Field(default_factory=dict)


class TaskStep(PhotonModel):
    sequence: int = 0
    operation: str | None = None
    state: str | None = None
    errors: list[ApiErrorDetail] = Field(default_factory=list)
    warnings: list[ApiErrorDetail] = Field(default_factory=list)
    startedTime: int | None = None
    endTime: int | None = None
    queuedTime: int | None = None
    options: dict[str, Any] = Field(default_factory=dict)


class Task(PhotonModel):
    """An asynchronous server-side operation.

    States outside QUEUED/STARTED/COMPLETED/ERROR are treated as in-flight.
    """

    id: str
    state: str = TaskState.QUEUED.value
    operation: str | None = None
    entity: Entity = Field(default_factory=Entity)
    steps: list[TaskStep] = Field(default_factory=list)
    resourceProperties: Any = None
    queuedTime: int | None = None
    startedTime: int | None = None
    endTime: int | None = None
    selfLink: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def completed(self) -> bool:
        return self.state == TaskState.COMPLETED

    @property
    def failed(self) -> bool:
        return self.state == TaskState.ERROR

    @property
    def current_step(self) -> TaskStep | None:
        for step in self.steps:
            if step.state == TaskState.STARTED:
                return step
        return None

    def step_errors(self) -> list[tuple[str | None, ApiErrorDetail]]:
        ordered = sorted(self.steps, key=lambda step: step.sequence)
        return [(step.operation, error) for step in ordered for error in step.errors]
