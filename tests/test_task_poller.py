from __future__ import annotations

import httpx
import pytest

from photonctl.client import AsyncPhotonClient
from photonctl.config import TaskPollConfig
from photonctl.errors import (
    APIError,
    InvalidTaskIdError,
    RequestError,
    TaskFailedError,
    TaskNotFoundError,
    TaskTimeoutError,
)
from photonctl.models import Task
from photonctl.workflows import PollState, TaskPoller, validate_task_id


def _task(state: str, *, task_id: str = "task-1", steps: list[dict[str, object]] | None = None) -> Task:
    return Task.model_validate(
        {
            "id": task_id,
            "state": state,
            "operation": "CREATE_HOST",
            "entity": {"id": "host-1", "kind": "host"},
            "steps": steps or [],
        }
    )


class _FakeTasks:
    def __init__(self, states: list[str | Exception], **task_kwargs: object) -> None:
        self._states = list(states)
        self._task_kwargs = task_kwargs
        self.fetches = 0

    async def get(self, task_id: str) -> Task:
        self.fetches += 1
        index = min(self.fetches, len(self._states)) - 1
        outcome = self._states[index]
        if isinstance(outcome, Exception):
            raise outcome
        return _task(outcome, task_id=task_id, **self._task_kwargs)  # type: ignore[arg-type]


class _Sleeps:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.mark.asyncio
async def test_completed_task_returns_entity_after_exactly_n_fetches() -> None:
    tasks = _FakeTasks(["QUEUED", "STARTED", "STARTED", "COMPLETED"])
    sleeps = _Sleeps()
    poller = TaskPoller(tasks, interval=0.5, max_attempts=10, sleep=sleeps)

    entity_id = await poller.wait_for_entity("task-1")

    assert entity_id == "host-1"
    assert tasks.fetches == 4
    assert sleeps.calls == [0.5, 0.5, 0.5]


@pytest.mark.asyncio
async def test_already_completed_task_is_fetched_once_without_sleeping() -> None:
    tasks = _FakeTasks(["COMPLETED"])
    sleeps = _Sleeps()
    poller = TaskPoller(tasks, interval=1.0, max_attempts=5, sleep=sleeps)

    result = await poller.poll("task-1")

    assert result.state is PollState.COMPLETED
    assert result.attempts == 1
    assert tasks.fetches == 1
    assert sleeps.calls == []


@pytest.mark.asyncio
async def test_error_state_raises_task_failed_with_step_errors() -> None:
    steps = [
        {
            "sequence": 1,
            "operation": "PROVISION_HOST",
            "state": "ERROR",
            "errors": [{"code": "HostProvisionFailed", "message": "agent unreachable"}],
        },
        {"sequence": 0, "operation": "CHECK_HOST", "state": "COMPLETED"},
    ]
    tasks = _FakeTasks(["QUEUED", "ERROR"], steps=steps)
    poller = TaskPoller(tasks, interval=0.0, max_attempts=10, sleep=_Sleeps())

    with pytest.raises(TaskFailedError) as excinfo:
        await poller.wait("task-1")

    assert not isinstance(excinfo.value, TaskTimeoutError)
    assert "agent unreachable" in str(excinfo.value)
    assert excinfo.value.errors[0].code == "HostProvisionFailed"
    assert excinfo.value.errors[0].step == "PROVISION_HOST"
    assert tasks.fetches == 2


@pytest.mark.asyncio
async def test_budget_exhaustion_raises_timeout_and_never_sleeps_after_last_fetch() -> None:
    tasks = _FakeTasks(["STARTED"])
    sleeps = _Sleeps()
    poller = TaskPoller(tasks, interval=0.25, max_attempts=3, sleep=sleeps)

    with pytest.raises(TaskTimeoutError) as excinfo:
        await poller.wait("task-1")

    assert not isinstance(excinfo.value, TaskFailedError)
    assert excinfo.value.attempts == 3
    assert excinfo.value.last_state == "STARTED"
    assert tasks.fetches == 3
    assert len(sleeps.calls) == 2


@pytest.mark.asyncio
async def test_unknown_state_is_treated_as_in_flight() -> None:
    tasks = _FakeTasks(["RESUMING", "COMPLETED"])
    poller = TaskPoller(tasks, interval=0.0, max_attempts=5, sleep=_Sleeps())

    task = await poller.wait("task-1")

    assert task.completed
    assert tasks.fetches == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("task_id", ["", "   ", "../etc/passwd", "task id", "task/1"])
async def test_invalid_task_id_raises_before_any_fetch(task_id: str) -> None:
    tasks = _FakeTasks(["COMPLETED"])
    poller = TaskPoller(tasks, interval=0.0, max_attempts=5, sleep=_Sleeps())

    with pytest.raises(InvalidTaskIdError):
        await poller.wait(task_id)

    assert tasks.fetches == 0


def test_validate_task_id_accepts_uuid() -> None:
    assert validate_task_id("3f1c2b7e-7a34-4a8b-9c53-2b9d2d1c0a11") == "3f1c2b7e-7a34-4a8b-9c53-2b9d2d1c0a11"


@pytest.mark.asyncio
async def test_transient_transport_errors_are_retried() -> None:
    tasks = _FakeTasks([RequestError("connection reset"), RequestError("connection reset"), "COMPLETED"])
    poller = TaskPoller(tasks, interval=0.0, max_attempts=5, max_consecutive_errors=3, sleep=_Sleeps())

    task = await poller.wait("task-1")

    assert task.completed
    assert tasks.fetches == 3


@pytest.mark.asyncio
async def test_too_many_consecutive_transport_errors_propagate() -> None:
    tasks = _FakeTasks([RequestError("connection refused")])
    poller = TaskPoller(tasks, interval=0.0, max_attempts=10, max_consecutive_errors=2, sleep=_Sleeps())

    with pytest.raises(RequestError, match="connection refused"):
        await poller.wait("task-1")

    assert tasks.fetches == 3


@pytest.mark.asyncio
async def test_api_errors_are_not_retried() -> None:
    tasks = _FakeTasks([APIError(status_code=400, message="bad request")])
    poller = TaskPoller(tasks, interval=0.0, max_attempts=10, sleep=_Sleeps())

    with pytest.raises(APIError):
        await poller.wait("task-1")

    assert tasks.fetches == 1


def test_poll_config_attempt_budget() -> None:
    assert TaskPollConfig(interval=0.5, timeout=10).attempt_budget == 20
    assert TaskPollConfig(interval=0.5, timeout=10, max_attempts=4).attempt_budget == 4
    assert TaskPollConfig(interval=0, timeout=10).attempt_budget == 20
    assert TaskPollConfig(interval=0, timeout=10, max_attempts=2).attempt_budget == 2


@pytest.mark.asyncio
async def test_polls_against_mock_server_count_requests() -> None:
    seen = {"tasks": 0}
    states = ["QUEUED", "STARTED", "COMPLETED"]

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/tasks/task-42":
            state = states[min(seen["tasks"], len(states) - 1)]
            seen["tasks"] += 1
            return httpx.Response(
                200,
                json={"id": "task-42", "state": state, "operation": "CREATE_ZONE", "entity": {"id": "zone-7"}},
            )
        return httpx.Response(404, json={"code": "NotFound", "message": "not found"})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(base_url="https://photon.example", transport=transport) as http_client:
        client = AsyncPhotonClient(
            config={"profiles": {"default": {"target": "https://photon.example"}}},
            http_client=http_client,
        )
        poller = TaskPoller(client.tasks, interval=0.0, max_attempts=10, sleep=_Sleeps())
        assert await poller.wait_for_entity("task-42") == "zone-7"
        assert seen["tasks"] == 3
        await client.aclose()


@pytest.mark.asyncio
async def test_missing_task_raises_task_not_found() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"code": "TaskNotFound", "message": "Task #gone not found"})

    transport = httpx.MockTransport(handler)
    async with httpx.AsyncClient(base_url="https://photon.example", transport=transport) as http_client:
        client = AsyncPhotonClient(
            config={"profiles": {"default": {"target": "https://photon.example"}}},
            http_client=http_client,
        )
        poller = TaskPoller(client.tasks, interval=0.0, max_attempts=10, sleep=_Sleeps())
        with pytest.raises(TaskNotFoundError):
            await poller.wait("gone")
        await client.aclose()
