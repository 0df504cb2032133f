"""Client entrypoints."""

from photonctl.client.async_client import AsyncPhotonClient, connect
from photonctl.client.sync_client import PhotonClient

__all__ = ["AsyncPhotonClient", "PhotonClient", "connect"]
