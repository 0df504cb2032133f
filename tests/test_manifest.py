from __future__ import annotations

from pathlib import Path

import pytest

from photonctl.errors import ManifestError
from photonctl.manifest import load_installation, parse_installation

MANIFEST = """
deployment:
  resume_system: true
  image_datastores: datastore1, datastore2
  use_image_datastore_for_vms: true
  ntp_endpoint: 10.10.0.1
  syslog_endpoint: 10.10.0.2
  enable_loadbalancer: false
  auth_enabled: true
  oauth_tenant: esxcloud
  oauth_security_groups: [esxcloud\\admins]
hosts:
  - address_ranges: 10.0.0.1-10.0.0.2
    username: root
    password: vmware
    availability_zone: zone-1
    usage_tags: [MGMT, CLOUD]
    metadata:
      MANAGEMENT_VM_IPS: 10.0.1.1-10.0.1.2
      MANAGEMENT_NETWORK_DNS_SERVER: 10.10.0.1
      MANAGEMENT_VM_CPU_COUNT_OVERWRITE: 2
  - address_ranges: 10.0.0.3
    username: root
    password: vmware
    availability_zone: zone-2
    metadata:
  - address_ranges: 10.0.0.4
    username: root
    password: vmware
    availability_zone: zone-1
"""


def test_parse_full_manifest() -> None:
    installation = parse_installation(MANIFEST)

    deployment = installation.deployment
    assert deployment.resume_system is True
    assert deployment.image_datastores == ["datastore1", "datastore2"]
    assert deployment.ntp_endpoint == "10.10.0.1"
    assert deployment.enable_loadbalancer is False
    assert deployment.oauth_security_groups == ["esxcloud\\admins"]

    first = installation.hosts[0]
    assert first.usage_tags == ["MGMT", "CLOUD"]
    assert first.metadata["MANAGEMENT_VM_CPU_COUNT_OVERWRITE"] == "2"
    assert installation.hosts[1].metadata == {}
    assert installation.zone_names() == ["zone-1", "zone-2"]


def test_hosts_only_manifest_uses_deployment_defaults() -> None:
    installation = parse_installation("hosts:\n  - address_ranges: 10.0.0.1\n    username: u\n    password: p\n")
    assert installation.deployment.enable_loadbalancer is True
    assert installation.deployment.image_datastores == []


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ("hosts: [\n", "failed to parse manifest"),
        ("- just\n- a list\n", "must be a YAML mapping"),
        ("hosts:\n  - address_ranges: 10.0.0.1\n", "invalid manifest"),
    ],
)
def test_bad_manifests_raise_manifest_error(raw: str, message: str) -> None:
    with pytest.raises(ManifestError, match=message):
        parse_installation(raw)


def test_load_installation_from_file(tmp_path: Path) -> None:
    path = tmp_path / "dc.yml"
    path.write_text(MANIFEST, encoding="utf-8")
    assert len(load_installation(path).hosts) == 3


def test_load_installation_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="failed to read manifest"):
        load_installation(tmp_path / "missing.yml")
