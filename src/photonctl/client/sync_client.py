"""Blocking facade over :class:`AsyncPhotonClient` for scripts.

Sync methods use plain names; the async services stay reachable with an
``a`` prefix (``client.deployments.list()`` vs ``await client.adeployments.list()``).
"""

from __future__ import annotations

import asyncio
from typing import Any

from photonctl.client.async_client import AsyncPhotonClient
from photonctl.models.tasks import Task
from photonctl.workflows.task_poller import TaskPoller

_SERVICES = (
    "deployments",
    "system",
    "networks",
    "tasks",
    "zones",
    "infrastructure",
    "vms",
    "tenants",
    "projects",
)


class _SyncRunner:
    """Keeps every sync call on a single event loop."""

    def __init__(self) -> None:
        self._runner = asyncio.Runner()
        self._closed = False

    def run(self, coro: Any) -> Any:
        if self._closed:
            coro.close()
            raise RuntimeError("sync client is closed")

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return self._runner.run(coro)

        coro.close()
        raise RuntimeError("sync client methods cannot run inside an active event loop")

    def close(self) -> None:
        if self._closed:
            return

        self._runner.close()
        self._closed = True


class _SyncAPIProxy:
    def __init__(self, target: Any, run_sync: Any) -> None:
        self._target = target
        self._run_sync = run_sync

    def __getattr__(self, item: str) -> Any:
        attr = getattr(self._target, item)
        if not callable(attr):
            return attr

        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return self._run_sync(attr(*args, **kwargs))

        return wrapper


class PhotonClient:
    """Synchronous client exposing the same services as the async one."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._sync_runner = _SyncRunner()
        self._closed = False
        self._async = AsyncPhotonClient(*args, **kwargs)

        for name in _SERVICES:
            service = getattr(self._async, name)
            setattr(self, name, _SyncAPIProxy(service, self._sync_runner.run))
            setattr(self, f"a{name}", service)

    @property
    def profile_name(self) -> str:
        return self._async.profile_name

    @property
    def raw(self) -> AsyncPhotonClient:
        return self._async

    def wait_for_task(self, task: Task | str) -> Task:
        """Block until ``task`` completes, using the profile's poll settings."""

        task_id = task.id if isinstance(task, Task) else task
        poller = TaskPoller.from_config(self._async.tasks, self._async.task_poll)
        return self._sync_runner.run(poller.wait(task_id))

    def request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str | int | float | bool] | None = None,
        json_data: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        return self._sync_runner.run(self._async._request_json(method, path, params=params, json_data=json_data))

    def close(self) -> None:
        if self._closed:
            return

        try:
            self._sync_runner.run(self._async.aclose())
        finally:
            self._sync_runner.close()
            self._closed = True

    def __enter__(self) -> PhotonClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
