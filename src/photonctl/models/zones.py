from __future__ import annotations

from photonctl.models.common import PhotonModel


class Zone(PhotonModel):
    id: str
    name: str
    kind: str | None = None
    state: str | None = None
