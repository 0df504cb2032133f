from __future__ import annotations

from photonctl.models.common import ResourceList
from photonctl.models.deployments import NsxConfigurationSpec, ServiceConfigurationSpec
from photonctl.models.system import SystemInfo, SystemStatus
from photonctl.models.tasks import Task
from photonctl.models.vms import VM
from photonctl.services.base import ServiceBase, api_path


class SystemService(ServiceBase):
    """System-wide operations on the control plane the client targets."""

    async def info(self) -> SystemInfo:
        return await self._get(SystemInfo, api_path("system", "info"))

    async def status(self) -> SystemStatus:
        return await self._get(SystemStatus, api_path("system", "status"))

    async def vms(self) -> ResourceList[VM]:
        return await self._collect(VM, api_path("system", "vms"))

    async def pause(self) -> Task:
        return await self._task("POST", api_path("system", "pause"))

    async def pause_background_tasks(self) -> Task:
        return await self._task("POST", api_path("system", "pause-background-tasks"))

    async def resume(self) -> Task:
        return await self._task("POST", api_path("system", "resume"))

    async def set_security_groups(self, groups: list[str]) -> Task:
        return await self._task("POST", api_path("system", "set-security-groups"), json_data={"items": groups})

    async def enable_service_type(self, spec: ServiceConfigurationSpec) -> Task:
        return await self._task("POST", api_path("system", "enable-service-type"), json_data=spec.to_payload())

    async def disable_service_type(self, spec: ServiceConfigurationSpec) -> Task:
        return await self._task("POST", api_path("system", "disable-service-type"), json_data=spec.to_payload())

    async def configure_nsx(self, spec: NsxConfigurationSpec) -> Task:
        return await self._task("POST", api_path("system", "configure-nsx"), json_data=spec.to_payload())
