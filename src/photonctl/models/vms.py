from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import Field

from photonctl.models.common import PhotonModel

CONTAINER_METADATA_PREFIX = "CONTAINER_"


class VM(PhotonModel):
    id: str
    name: str | None = None
    state: str | None = None
    host: str | None = None
    datastore: str | None = None
    flavor: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    def container_ports(self) -> dict[str, str]:
        """Map each ``CONTAINER_<port>`` metadata entry to the job it serves."""

        return {
            key.removeprefix(CONTAINER_METADATA_PREFIX): value
            for key, value in self.metadata.items()
            if key.startswith(CONTAINER_METADATA_PREFIX)
        }


class VmNetworkConnection(PhotonModel):
    network: str | None = None
    macAddress: str | None = None
    ipAddress: str | None = None
    netmask: str | None = None
    isConnected: str | None = None


@dataclass(frozen=True, slots=True)
class NoNetwork:
    """The VM reports no connection carrying an IP address."""

    def __str__(self) -> str:
        return "N/A"


@dataclass(frozen=True, slots=True)
class AttachedNetwork:
    ip: str

    def __str__(self) -> str:
        return self.ip


VmNetworkIp = NoNetwork | AttachedNetwork


def network_connections(resource_properties: Any) -> list[VmNetworkConnection]:
    """Extract ``networkConnections`` from a get-networks task result."""

    if not isinstance(resource_properties, dict):
        return []
    raw = resource_properties.get("networkConnections")
    if not isinstance(raw, list):
        return []
    return [VmNetworkConnection.model_validate(item) for item in raw if isinstance(item, dict)]


def vm_network_ip(connections: list[VmNetworkConnection]) -> VmNetworkIp:
    """First IP address of a connection attached to a named network."""

    for connection in connections:
        if connection.network and connection.ipAddress:
            return AttachedNetwork(connection.ipAddress)
    return NoNetwork()
