from photonctl.services.deployments import DeploymentsService
from photonctl.services.infrastructure import InfrastructureService, VmsService, ZonesService
from photonctl.services.networks import NetworksService
from photonctl.services.system import SystemService
from photonctl.services.tasks import TasksService
from photonctl.services.tenants import ProjectsService, TenantsService

__all__ = [
    "DeploymentsService",
    "InfrastructureService",
    "NetworksService",
    "ProjectsService",
    "SystemService",
    "TasksService",
    "TenantsService",
    "VmsService",
    "ZonesService",
]
