from __future__ import annotations

from pydantic import Field

from photonctl.models.common import PhotonModel


class Tenant(PhotonModel):
    id: str
    name: str
    securityGroups: list[dict[str, object]] = Field(default_factory=list)


class Project(PhotonModel):
    id: str
    name: str
    tenantId: str | None = None
