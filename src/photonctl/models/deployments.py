from __future__ import annotations

from pydantic import BaseModel, Field

from photonctl.models.common import PhotonModel


class AuthInfo(PhotonModel):
    enabled: bool = False
    endpoint: str | None = None
    port: int | None = None
    domain: str | None = None
    tenant: str | None = None
    securityGroups: list[str] = Field(default_factory=list)


class StatsInfo(PhotonModel):
    enabled: bool = False
    storeEndpoint: str | None = None
    storePort: int | None = None
    storeType: str | None = None


class MigrationStatus(PhotonModel):
    completedDataMigrationCycles: int = 0
    dataMigrationCycleProgress: int = 0
    dataMigrationCycleSize: int = 0
    vibsUploaded: int = 0
    vibsUploading: int = 0

    @property
    def vibs_total(self) -> int:
        return self.vibsUploaded + self.vibsUploading


class ServiceConfiguration(PhotonModel):
    kind: str | None = None
    type: str
    imageId: str | None = None


class NetworkConfiguration(PhotonModel):
    sdnEnabled: bool = False
    networkManagerAddress: str | None = None
    networkZoneId: str | None = None
    networkTopRouterId: str | None = None
    ipRange: str | None = None
    floatingIpRange: str | None = None
    dhcpServers: list[str] = Field(default_factory=list)


class Deployment(PhotonModel):
    id: str
    state: str | None = None
    imageDatastores: list[str] = Field(default_factory=list)
    useImageDatastoreForVms: bool = False
    syslogEndpoint: str | None = None
    ntpEndpoint: str | None = None
    loadBalancerEnabled: bool = False
    loadBalancerAddress: str | None = None
    auth: AuthInfo = Field(default_factory=AuthInfo)
    stats: StatsInfo | None = None
    migrationStatus: MigrationStatus | None = None
    serviceConfigurations: list[ServiceConfiguration] = Field(default_factory=list)
    networkConfiguration: NetworkConfiguration | None = None


class DeploymentCreateSpec(BaseModel):
    """Options for ``deployment create``."""

    image_datastores: list[str]
    use_image_datastore_for_vms: bool = False
    syslog_endpoint: str | None = None
    ntp_endpoint: str | None = None
    enable_loadbalancer: bool = True
    enable_auth: bool = False
    oauth_endpoint: str | None = None
    oauth_port: int | None = None
    oauth_tenant: str | None = None
    oauth_username: str | None = None
    oauth_password: str | None = None
    oauth_security_groups: list[str] = Field(default_factory=list)
    enable_stats: bool = False
    stats_store_endpoint: str | None = None
    stats_store_port: int | None = None
    stats_store_type: str | None = None

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "imageDatastores": self.image_datastores,
            "useImageDatastoreForVms": self.use_image_datastore_for_vms,
            "loadBalancerEnabled": self.enable_loadbalancer,
            "auth": {
                "enabled": self.enable_auth,
                "endpoint": self.oauth_endpoint,
                "port": self.oauth_port,
                "tenant": self.oauth_tenant,
                "username": self.oauth_username,
                "password": self.oauth_password,
                "securityGroups": self.oauth_security_groups,
            },
            "stats": {
                "enabled": self.enable_stats,
                "storeEndpoint": self.stats_store_endpoint,
                "storePort": self.stats_store_port,
                "storeType": self.stats_store_type,
            },
        }
        if self.syslog_endpoint:
            payload["syslogEndpoint"] = self.syslog_endpoint
        if self.ntp_endpoint:
            payload["ntpEndpoint"] = self.ntp_endpoint
        return payload


class ServiceConfigurationSpec(BaseModel):
    type: str
    image_id: str | None = None

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {"type": self.type}
        if self.image_id:
            payload["imageId"] = self.image_id
        return payload


class IpRange(BaseModel):
    start: str
    end: str


class NsxConfigurationSpec(BaseModel):
    nsx_address: str
    nsx_username: str
    nsx_password: str
    private_ip_root_cidr: str
    floating_ip_root_range: IpRange
    t0_router_id: str
    edge_cluster_id: str
    overlay_transport_zone_id: str
    tunnel_ip_pool_id: str
    host_uplink_pnic: str
    host_uplink_vlan_id: int = 0
    dns_server_addresses: list[str] = Field(default_factory=list)

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "nsxAddress": self.nsx_address,
            "nsxUsername": self.nsx_username,
            "nsxPassword": self.nsx_password,
            "privateIpRootCidr": self.private_ip_root_cidr,
            "floatingIpRootRange": {
                "start": self.floating_ip_root_range.start,
                "end": self.floating_ip_root_range.end,
            },
            "t0RouterId": self.t0_router_id,
            "edgeClusterId": self.edge_cluster_id,
            "overlayTransportZoneId": self.overlay_transport_zone_id,
            "tunnelIpPoolId": self.tunnel_ip_pool_id,
            "hostUplinkPnic": self.host_uplink_pnic,
            "hostUplinkVlanId": self.host_uplink_vlan_id,
        }
        if self.dns_server_addresses:
            payload["dnsServerAddresses"] = self.dns_server_addresses
        return payload
