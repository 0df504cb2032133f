from __future__ import annotations

from pydantic import Field

from photonctl.models.common import PhotonModel
from photonctl.models.deployments import AuthInfo, MigrationStatus, ServiceConfiguration, StatsInfo


class SystemInfo(PhotonModel):
    id: str | None = None
    baseVersion: str | None = None
    fullVersion: str | None = None
    gitCommitHash: str | None = None
    networkType: str | None = None
    state: str | None = None
    imageDatastores: list[str] = Field(default_factory=list)
    useImageDatastoreForVms: bool = False
    syslogEndpoint: str | None = None
    ntpEndpoint: str | None = None
    loadBalancerEnabled: bool = False
    loadBalancerAddress: str | None = None
    auth: AuthInfo = Field(default_factory=AuthInfo)
    stats: StatsInfo | None = None
    serviceConfigurations: list[ServiceConfiguration] = Field(default_factory=list)
    migration: MigrationStatus | None = None


class ComponentStatus(PhotonModel):
    component: str
    status: str
    message: str | None = None


class SystemStatus(PhotonModel):
    status: str
    components: list[ComponentStatus] = Field(default_factory=list)
