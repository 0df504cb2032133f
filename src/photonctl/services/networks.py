from __future__ import annotations

from photonctl.models.common import ResourceList
from photonctl.models.networks import Network, NetworkCreateSpec
from photonctl.models.tasks import Task
from photonctl.services.base import ServiceBase, api_path


class NetworksService(ServiceBase):
    """Virtual network operations; networks live under a project."""

    async def create(self, project_id: str, spec: NetworkCreateSpec) -> Task:
        return await self._task("POST", api_path("projects", project_id, "networks"), json_data=spec.to_payload())

    async def list(self, project_id: str, *, name: str | None = None) -> ResourceList[Network]:
        params = {"name": name} if name else None
        return await self._collect(Network, api_path("projects", project_id, "networks"), params=params)

    async def get(self, network_id: str) -> Network:
        return await self._get(Network, api_path("networks", network_id))

    async def delete(self, network_id: str) -> Task:
        return await self._task("DELETE", api_path("networks", network_id))

    async def update(self, network_id: str, *, name: str) -> Task:
        return await self._task("PATCH", api_path("networks", network_id), json_data={"networkName": name})
