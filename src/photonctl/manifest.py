"""Datacenter manifest: the deployment settings plus the hosts to register."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from photonctl.errors import ManifestError
from photonctl.utils.ipranges import split_comma_list

MANAGEMENT_VM_IPS = "MANAGEMENT_VM_IPS"
MANAGEMENT_NETWORK_IP = "MANAGEMENT_NETWORK_IP"


class ManifestModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class DeploymentManifest(ManifestModel):
    resume_system: bool = False
    image_datastores: list[str] = Field(default_factory=list)
    use_image_datastore_for_vms: bool = False
    syslog_endpoint: str | None = None
    ntp_endpoint: str | None = None
    enable_loadbalancer: bool = True

    stats_enabled: bool = False
    stats_store_endpoint: str | None = None
    stats_port: int | None = None

    auth_enabled: bool = False
    oauth_username: str | None = None
    oauth_password: str | None = None
    oauth_tenant: str | None = None
    oauth_security_groups: list[str] = Field(default_factory=list)

    sdn_enabled: bool = False
    network_manager_address: str | None = None
    network_manager_username: str | None = None
    network_manager_password: str | None = None
    network_zone_id: str | None = None
    network_top_router_id: str | None = None
    network_ip_range: str | None = None
    network_floating_ip_range: str | None = None

    @field_validator("image_datastores", mode="before")
    @classmethod
    def _split_datastores(cls, value: Any) -> Any:
        if isinstance(value, str):
            return split_comma_list(value)
        return value

    @field_validator("syslog_endpoint", "ntp_endpoint", mode="before")
    @classmethod
    def _stringify_endpoint(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class HostManifest(ManifestModel):
    address_ranges: str = ""
    username: str
    password: str
    availability_zone: str | None = None
    usage_tags: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def _stringify_metadata(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(key): "" if item is None else str(item) for key, item in value.items()}
        return value

    @field_validator("usage_tags", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return split_comma_list(value)
        return value


class Installation(ManifestModel):
    deployment: DeploymentManifest = Field(default_factory=DeploymentManifest)
    hosts: list[HostManifest] = Field(default_factory=list)

    def zone_names(self) -> list[str]:
        """Distinct availability zone names, in first-seen order."""

        names: list[str] = []
        for host in self.hosts:
            if host.availability_zone and host.availability_zone not in names:
                names.append(host.availability_zone)
        return names


def parse_installation(raw: str, *, source: str = "<string>") -> Installation:
    try:
        payload = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise ManifestError(f"failed to parse manifest '{source}': {exc}") from exc
    if not isinstance(payload, dict):
        raise ManifestError(f"manifest '{source}' must be a YAML mapping")
    try:
        return Installation.model_validate(payload)
    except ValidationError as exc:
        raise ManifestError(f"invalid manifest '{source}': {exc}") from exc


def load_installation(path: str | Path) -> Installation:
    manifest_path = Path(path).expanduser()
    try:
        raw = manifest_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"failed to read manifest '{manifest_path}': {exc}") from exc
    return parse_installation(raw, source=str(manifest_path))
