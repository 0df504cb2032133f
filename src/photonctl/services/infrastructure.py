from __future__ import annotations

from photonctl.models.common import ResourceList
from photonctl.models.hosts import HostCreateSpec
from photonctl.models.tasks import Task
from photonctl.models.zones import Zone
from photonctl.services.base import ServiceBase, api_path


class ZonesService(ServiceBase):
    """Availability zone operations."""

    async def list(self) -> ResourceList[Zone]:
        return await self._collect(Zone, api_path("zones"))

    async def create(self, name: str) -> Task:
        return await self._task("POST", api_path("zones"), json_data={"name": name})


class InfrastructureService(ServiceBase):
    """Physical infrastructure registration."""

    async def create_host(self, spec: HostCreateSpec) -> Task:
        return await self._task("POST", api_path("infrastructure", "hosts"), json_data=spec.to_payload())


class VmsService(ServiceBase):
    async def get_networks(self, vm_id: str) -> Task:
        return await self._task("GET", api_path("vms", vm_id, "subnets"))
