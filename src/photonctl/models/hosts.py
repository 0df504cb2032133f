from __future__ import annotations

from pydantic import BaseModel, Field

from photonctl.models.common import PhotonModel


class Host(PhotonModel):
    id: str
    address: str | None = None
    state: str | None = None
    usageTags: list[str] = Field(default_factory=list)
    availabilityZone: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @property
    def tags(self) -> list[str]:
        return self.usageTags


class HostCreateSpec(BaseModel):
    """Request body for registering one physical host."""

    username: str
    password: str
    address: str
    availability_zone: str | None = None
    usage_tags: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "username": self.username,
            "password": self.password,
            "address": self.address,
            "usageTags": self.usage_tags,
            "metadata": self.metadata,
        }
        if self.availability_zone:
            payload["availabilityZone"] = self.availability_zone
        return payload
