from __future__ import annotations

from photonctl.models.common import ResourceList
from photonctl.models.deployments import (
    Deployment,
    DeploymentCreateSpec,
    NsxConfigurationSpec,
    ServiceConfigurationSpec,
)
from photonctl.models.hosts import Host
from photonctl.models.tasks import Task
from photonctl.models.vms import VM
from photonctl.services.base import ServiceBase, api_path


class DeploymentsService(ServiceBase):
    """Deployment API operations."""

    async def list(self) -> ResourceList[Deployment]:
        return await self._collect(Deployment, api_path("deployments"))

    async def get(self, deployment_id: str) -> Deployment:
        return await self._get(Deployment, api_path("deployments", deployment_id))

    async def create(self, spec: DeploymentCreateSpec) -> Task:
        return await self._task("POST", api_path("deployments"), json_data=spec.to_payload())

    async def delete(self, deployment_id: str) -> Task:
        return await self._task("DELETE", api_path("deployments", deployment_id))

    async def hosts(self, deployment_id: str) -> ResourceList[Host]:
        return await self._collect(Host, api_path("deployments", deployment_id, "hosts"))

    async def vms(self, deployment_id: str) -> ResourceList[VM]:
        return await self._collect(VM, api_path("deployments", deployment_id, "vms"))

    async def set_image_datastores(self, deployment_id: str, datastores: list[str]) -> Task:
        return await self._task(
            "POST",
            api_path("deployments", deployment_id, "set_image_datastores"),
            json_data={"items": datastores},
        )

    async def sync_hosts_config(self, deployment_id: str) -> Task:
        return await self._task("POST", api_path("deployments", deployment_id, "sync_hosts_config"))

    async def pause_system(self, deployment_id: str) -> Task:
        return await self._task("POST", api_path("deployments", deployment_id, "pause_system"))

    async def pause_background_tasks(self, deployment_id: str) -> Task:
        return await self._task("POST", api_path("deployments", deployment_id, "pause_background_tasks"))

    async def resume_system(self, deployment_id: str) -> Task:
        return await self._task("POST", api_path("deployments", deployment_id, "resume_system"))

    async def set_security_groups(self, deployment_id: str, groups: list[str]) -> Task:
        return await self._task(
            "POST",
            api_path("deployments", deployment_id, "set_security_groups"),
            json_data={"items": groups},
        )

    async def enable_cluster_type(self, deployment_id: str, spec: ServiceConfigurationSpec) -> Task:
        return await self._task(
            "POST",
            api_path("deployments", deployment_id, "enable_cluster_type"),
            json_data=spec.to_payload(),
        )

    async def disable_cluster_type(self, deployment_id: str, spec: ServiceConfigurationSpec) -> Task:
        return await self._task(
            "POST",
            api_path("deployments", deployment_id, "disable_cluster_type"),
            json_data=spec.to_payload(),
        )

    async def configure_nsx(self, deployment_id: str, spec: NsxConfigurationSpec) -> Task:
        return await self._task(
            "POST",
            api_path("deployments", deployment_id, "configure_nsx"),
            json_data=spec.to_payload(),
        )

    async def initialize_migration(self, deployment_id: str, source_endpoint: str) -> Task:
        return await self._task(
            "POST",
            api_path("deployments", deployment_id, "initialize_migration"),
            json_data={"sourceNodeGroupReference": source_endpoint},
        )

    async def finalize_migration(self, deployment_id: str, source_endpoint: str) -> Task:
        return await self._task(
            "POST",
            api_path("deployments", deployment_id, "finalize_migration"),
            json_data={"sourceNodeGroupReference": source_endpoint},
        )
