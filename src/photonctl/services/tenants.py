from __future__ import annotations

from photonctl.errors import ConfigError
from photonctl.models.tenants import Project, Tenant
from photonctl.services.base import ServiceBase, api_path


class TenantsService(ServiceBase):
    async def find(self, name: str) -> Tenant:
        """Resolve a tenant by exact name."""

        tenants = await self._collect(Tenant, api_path("tenants"), params={"name": name})
        for tenant in tenants.items:
            if tenant.name == name:
                return tenant
        raise ConfigError(f"tenant '{name}' not found")


class ProjectsService(ServiceBase):
    async def find(self, tenant_id: str, name: str) -> Project:
        projects = await self._collect(Project, api_path("tenants", tenant_id, "projects"), params={"name": name})
        for project in projects.items:
            if project.name == name:
                return project
        raise ConfigError(f"project '{name}' not found")
