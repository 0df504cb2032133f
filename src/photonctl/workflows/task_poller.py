"""Wait for asynchronous control plane tasks to reach a terminal state."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from photonctl.config.models import TaskPollConfig
from photonctl.constants import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_POLL_MAX_CONSECUTIVE_ERRORS,
    DEFAULT_POLL_TIMEOUT,
    LOGGER_NAME,
)
from photonctl.errors import (
    APIError,
    InvalidTaskIdError,
    RequestError,
    ResourceNotFoundError,
    StepError,
    TaskFailedError,
    TaskNotFoundError,
    TaskTimeoutError,
)
from photonctl.models.tasks import Task

logger = logging.getLogger(f"{LOGGER_NAME}.tasks")

TASK_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._:-]*$")

SleepFunc = Callable[[float], Awaitable[None]]
UpdateCallback = Callable[[Task], None]


class TaskFetcher(Protocol):
    async def get(self, task_id: str) -> Task: ...


class PollState(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(slots=True)
class PollResult:
    state: PollState
    task: Task | None
    attempts: int


def validate_task_id(task_id: str) -> str:
    candidate = (task_id or "").strip()
    if not TASK_ID_PATTERN.fullmatch(candidate):
        raise InvalidTaskIdError(f"invalid task id: {task_id!r}")
    return candidate


def task_step_errors(task: Task) -> list[StepError]:
    return [
        StepError(code=error.code, message=error.message, step=operation)
        for operation, error in task.step_errors()
    ]


class TaskPoller:
    """Bounded-retry poll loop over ``GET /tasks/{id}``.

    Each poll moves the task from PENDING to COMPLETED, FAILED or TIMED_OUT.
    At most ``max_attempts`` fetches are made, with ``interval`` seconds
    slept between consecutive fetches and never after the last one.
    Transport failures are retried up to ``max_consecutive_errors`` times in a
    row; API error responses are not retried here.
    """

    def __init__(
        self,
        tasks: TaskFetcher,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        max_attempts: int | None = None,
        max_consecutive_errors: int = DEFAULT_POLL_MAX_CONSECUTIVE_ERRORS,
        sleep: SleepFunc = asyncio.sleep,
        on_update: UpdateCallback | None = None,
    ) -> None:
        if max_attempts is None:
            max_attempts = TaskPollConfig(interval=interval, timeout=DEFAULT_POLL_TIMEOUT).attempt_budget
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._tasks = tasks
        self.interval = interval
        self.max_attempts = max_attempts
        self.max_consecutive_errors = max_consecutive_errors
        self._sleep = sleep
        self._on_update = on_update

    @classmethod
    def from_config(cls, tasks: TaskFetcher, config: TaskPollConfig, **kwargs: object) -> TaskPoller:
        return cls(
            tasks,
            interval=config.interval,
            max_attempts=config.attempt_budget,
            max_consecutive_errors=config.max_consecutive_errors,
            **kwargs,  # type: ignore[arg-type]
        )

    async def poll(self, task_id: str) -> PollResult:
        task_id = validate_task_id(task_id)
        state = PollState.PENDING
        task: Task | None = None
        attempts = 0
        consecutive_errors = 0

        while state is PollState.PENDING:
            if attempts >= self.max_attempts:
                state = PollState.TIMED_OUT
                break
            if attempts > 0:
                await self._sleep(self.interval)
            attempts += 1

            try:
                task = await self._tasks.get(task_id)
            except ResourceNotFoundError as exc:
                raise TaskNotFoundError(task_id) from exc
            except APIError:
                raise
            except RequestError as exc:
                consecutive_errors += 1
                logger.warning("fetching task %s failed (%d in a row): %s", task_id, consecutive_errors, exc)
                if consecutive_errors > self.max_consecutive_errors:
                    raise
                continue

            consecutive_errors = 0
            logger.debug("task %s poll %d: %s", task_id, attempts, task.state)
            if self._on_update is not None:
                self._on_update(task)

            if task.completed:
                state = PollState.COMPLETED
            elif task.failed:
                state = PollState.FAILED

        logger.info("task %s finished as %s after %d polls", task_id, state, attempts)
        return PollResult(state=state, task=task, attempts=attempts)

    async def wait(self, task_id: str) -> Task:
        """Poll until completion; raise on ERROR or when the budget runs out."""

        result = await self.poll(task_id)
        if result.state is PollState.COMPLETED and result.task is not None:
            return result.task
        if result.state is PollState.FAILED and result.task is not None:
            raise TaskFailedError(result.task, task_step_errors(result.task))
        last_state = result.task.state if result.task is not None else None
        raise TaskTimeoutError(task_id, result.attempts, last_state)

    async def wait_for_entity(self, task_id: str) -> str:
        """Return the id of the entity a completed task operated on."""

        task = await self.wait(task_id)
        return task.entity.id or ""
