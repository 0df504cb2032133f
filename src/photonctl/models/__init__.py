from photonctl.models.common import Entity, PhotonModel, ResourceList
from photonctl.models.deployments import (
    AuthInfo,
    Deployment,
    DeploymentCreateSpec,
    IpRange,
    MigrationStatus,
    NetworkConfiguration,
    NsxConfigurationSpec,
    ServiceConfiguration,
    ServiceConfigurationSpec,
    StatsInfo,
)
from photonctl.models.hosts import Host, HostCreateSpec
from photonctl.models.networks import Network, NetworkCreateSpec
from photonctl.models.system import ComponentStatus, SystemInfo, SystemStatus
from photonctl.models.tasks import TERMINAL_STATES, ApiErrorDetail, Task, TaskState, TaskStep
from photonctl.models.tenants import Project, Tenant
from photonctl.models.vms import (
    VM,
    AttachedNetwork,
    NoNetwork,
    VmNetworkConnection,
    VmNetworkIp,
    network_connections,
    vm_network_ip,
)
from photonctl.models.zones import Zone

__all__ = [
    "TERMINAL_STATES",
    "VM",
    "ApiErrorDetail",
    "AttachedNetwork",
    "AuthInfo",
    "ComponentStatus",
    "Deployment",
    "DeploymentCreateSpec",
    "Entity",
    "Host",
    "HostCreateSpec",
    "IpRange",
    "MigrationStatus",
    "Network",
    "NetworkConfiguration",
    "NetworkCreateSpec",
    "NoNetwork",
    "NsxConfigurationSpec",
    "PhotonModel",
    "Project",
    "ResourceList",
    "ServiceConfiguration",
    "ServiceConfigurationSpec",
    "StatsInfo",
    "SystemInfo",
    "SystemStatus",
    "Task",
    "TaskState",
    "TaskStep",
    "Tenant",
    "VmNetworkConnection",
    "VmNetworkIp",
    "Zone",
    "network_connections",
    "vm_network_ip",
]
