from __future__ import annotations

from pydantic import BaseModel

from photonctl.models.common import PhotonModel


class Network(PhotonModel):
    id: str
    name: str | None = None
    kind: str | None = None
    state: str | None = None
    description: str | None = None
    privateIpCidr: str | None = None
    isDefault: bool = False


class NetworkCreateSpec(BaseModel):
    name: str
    private_ip_cidr: str
    description: str | None = None

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {"name": self.name, "privateIpCidr": self.private_ip_cidr}
        if self.description:
            payload["description"] = self.description
        return payload
