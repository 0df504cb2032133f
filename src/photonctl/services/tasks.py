from __future__ import annotations

from photonctl.models.common import ResourceList
from photonctl.models.tasks import Task
from photonctl.services.base import ServiceBase, api_path


class TasksService(ServiceBase):
    """Task lookups."""

    async def get(self, task_id: str) -> Task:
        return await self._get(Task, api_path("tasks", task_id))

    async def list(
        self,
        *,
        entity_id: str | None = None,
        entity_kind: str | None = None,
        state: str | None = None,
    ) -> ResourceList[Task]:
        params: dict[str, str] = {}
        if entity_id:
            params["entityId"] = entity_id
        if entity_kind:
            params["entityKind"] = entity_kind
        if state:
            params["state"] = state.upper()
        return await self._collect(Task, api_path("tasks"), params=params or None)
