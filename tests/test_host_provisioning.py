from __future__ import annotations

import logging

import pytest

from photonctl.errors import APIError, ManifestError
from photonctl.manifest import MANAGEMENT_NETWORK_IP, MANAGEMENT_VM_IPS, parse_installation
from photonctl.models import HostCreateSpec, ResourceList, Task, Zone
from photonctl.workflows import HostProvisioner, HostProvisionStatus, TaskPoller, build_host_specs


async def _no_sleep(_seconds: float) -> None:
    return None


class _Backend:
    def __init__(
        self,
        *,
        zones: list[Zone] | None = None,
        rejected: tuple[str, ...] = (),
        failing: tuple[str, ...] = (),
    ) -> None:
        self.existing_zones = list(zones or [])
        self.rejected = rejected
        self.failing = failing
        self.calls: list[tuple[str, str]] = []
        self.tasks: dict[str, Task] = {}

    def new_task(self, operation: str, entity_id: str, *, failed: bool = False) -> Task:
        task_id = f"task-{len(self.tasks) + 1}"
        payload: dict[str, object] = {
            "id": task_id,
            "state": "ERROR" if failed else "COMPLETED",
            "operation": operation,
            "entity": {"id": entity_id, "kind": operation.split("_", 1)[-1].lower()},
        }
        if failed:
            payload["steps"] = [
                {"sequence": 0, "operation": "PROVISION", "state": "ERROR", "errors": [{"message": "agent down"}]}
            ]
        self.tasks[task_id] = Task.model_validate(payload)
        return Task(id=task_id, state="QUEUED", operation=operation)


class _Zones:
    def __init__(self, backend: _Backend) -> None:
        self._backend = backend

    async def list(self) -> ResourceList[Zone]:
        self._backend.calls.append(("list_zones", ""))
        return ResourceList[Zone](items=self._backend.existing_zones)

    async def create(self, name: str) -> Task:
        self._backend.calls.append(("create_zone", name))
        return self._backend.new_task("CREATE_AVAILABILITYZONE", f"zone-{name}")


class _Infrastructure:
    def __init__(self, backend: _Backend) -> None:
        self._backend = backend
        self.specs: list[HostCreateSpec] = []

    async def create_host(self, spec: HostCreateSpec) -> Task:
        self._backend.calls.append(("create_host", spec.address))
        self.specs.append(spec)
        if spec.address in self._backend.rejected:
            raise APIError(status_code=400, message=f"host {spec.address} already exists", code="HostExists")
        failed = spec.address in self._backend.failing
        return self._backend.new_task("CREATE_HOST", f"host-{spec.address}", failed=failed)


class _Tasks:
    def __init__(self, backend: _Backend) -> None:
        self._backend = backend

    async def get(self, task_id: str) -> Task:
        self._backend.calls.append(("get_task", task_id))
        return self._backend.tasks[task_id]


class _FakeClient:
    def __init__(self, backend: _Backend) -> None:
        self.backend = backend
        self.zones = _Zones(backend)
        self.infrastructure = _Infrastructure(backend)
        self.tasks = _Tasks(backend)


def _provisioner(client: _FakeClient, results: list[object] | None = None) -> HostProvisioner:
    poller = TaskPoller(client.tasks, interval=0.0, max_attempts=3, sleep=_no_sleep)
    return HostProvisioner(client, poller, on_result=results.append if results is not None else None)


MANIFEST = """
hosts:
  - address_ranges: 10.0.0.1
    username: root
    password: secret
    usage_tags: [CLOUD]
  - address_ranges: 10.0.0.2
    username: root
    password: secret
    usage_tags: [CLOUD]
  - address_ranges: 10.0.0.3
    username: root
    password: secret
    usage_tags: [CLOUD]
"""


@pytest.mark.asyncio
async def test_second_host_failing_creation_does_not_stop_the_third() -> None:
    backend = _Backend(rejected=("10.0.0.2",))
    client = _FakeClient(backend)
    seen: list[object] = []

    report = await _provisioner(client, seen).provision(parse_installation(MANIFEST))

    assert [call for call in backend.calls if call[0] == "create_host"] == [
        ("create_host", "10.0.0.1"),
        ("create_host", "10.0.0.2"),
        ("create_host", "10.0.0.3"),
    ]
    statuses = {result.address: result.status for result in report.results}
    assert statuses == {
        "10.0.0.1": HostProvisionStatus.CREATED,
        "10.0.0.2": HostProvisionStatus.CREATE_FAILED,
        "10.0.0.3": HostProvisionStatus.CREATED,
    }
    failed = report.failed[0]
    assert "already exists" in (failed.error or "")
    assert [result.host_id for result in report.created] == ["host-10.0.0.1", "host-10.0.0.3"]
    assert len(seen) == 3


@pytest.mark.asyncio
async def test_failed_creation_task_is_recorded_and_batch_continues() -> None:
    backend = _Backend(failing=("10.0.0.1",))
    client = _FakeClient(backend)

    report = await _provisioner(client).provision(parse_installation(MANIFEST))

    first = report.results[0]
    assert first.status is HostProvisionStatus.TASK_FAILED
    assert "agent down" in (first.error or "")
    assert len(report.created) == 2


@pytest.mark.asyncio
async def test_host_failures_are_left_to_the_result_callback(
    caplog: pytest.LogCaptureFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(logging.getLogger("photonctl"), "propagate", True)
    backend = _Backend(rejected=("10.0.0.2",), failing=("10.0.0.3",))
    client = _FakeClient(backend)
    seen: list[object] = []

    with caplog.at_level(logging.DEBUG, logger="photonctl"):
        report = await _provisioner(client, seen).provision(parse_installation(MANIFEST))

    assert [result.status for result in report.results] == [
        HostProvisionStatus.CREATED,
        HostProvisionStatus.CREATE_FAILED,
        HostProvisionStatus.TASK_FAILED,
    ]
    assert report.results[2].task_id == "task-2"
    assert len(seen) == 3
    provisioning = [record for record in caplog.records if record.name == "photonctl.provisioning"]
    assert provisioning
    assert all(record.levelno < logging.WARNING for record in provisioning)


@pytest.mark.asyncio
async def test_creations_are_all_issued_before_polling() -> None:
    backend = _Backend()
    client = _FakeClient(backend)

    await _provisioner(client).provision(parse_installation(MANIFEST))

    kinds = [kind for kind, _ in backend.calls]
    assert kinds == ["create_host"] * 3 + ["get_task"] * 3


@pytest.mark.asyncio
async def test_zones_are_resolved_by_name_and_created_once() -> None:
    manifest = """
hosts:
  - address_ranges: 10.0.0.1-10.0.0.2
    username: root
    password: secret
    availability_zone: zone-a
  - address_ranges: 10.0.0.3
    username: root
    password: secret
    availability_zone: zone-a
  - address_ranges: 10.0.0.4
    username: root
    password: secret
    availability_zone: existing
"""
    backend = _Backend(zones=[Zone(id="zone-id-existing", name="existing")])
    client = _FakeClient(backend)

    report = await _provisioner(client).provision(parse_installation(manifest))

    assert [call for call in backend.calls if call[0] == "create_zone"] == [("create_zone", "zone-a")]
    assert report.zones == {"zone-a": "zone-zone-a", "existing": "zone-id-existing"}
    zones_by_address = {spec.address: spec.availability_zone for spec in client.infrastructure.specs}
    assert zones_by_address == {
        "10.0.0.1": "zone-zone-a",
        "10.0.0.2": "zone-zone-a",
        "10.0.0.3": "zone-zone-a",
        "10.0.0.4": "zone-id-existing",
    }


@pytest.mark.asyncio
async def test_bad_address_fails_before_any_request() -> None:
    manifest = """
hosts:
  - address_ranges: 10.0.0.1
    username: root
    password: secret
    availability_zone: zone-a
  - address_ranges: 10.0.0.9-10.0.0.x
    username: root
    password: secret
"""
    backend = _Backend()
    client = _FakeClient(backend)

    with pytest.raises(ManifestError, match="bad IP address"):
        await _provisioner(client).provision(parse_installation(manifest))

    assert backend.calls == []


@pytest.mark.asyncio
async def test_entry_without_addresses_is_rejected() -> None:
    manifest = """
hosts:
  - username: root
    password: secret
"""
    backend = _Backend()

    with pytest.raises(ManifestError, match="host IP address missing"):
        await _provisioner(_FakeClient(backend)).provision(parse_installation(manifest))

    assert backend.calls == []


def test_management_ips_are_paired_with_host_addresses() -> None:
    manifest = f"""
hosts:
  - address_ranges: 10.0.0.1-10.0.0.3
    username: root
    password: secret
    usage_tags: MGMT, CLOUD
    metadata:
      {MANAGEMENT_VM_IPS}: 192.168.0.10-192.168.0.11
      MANAGEMENT_DATASTORE: datastore1
"""
    specs = build_host_specs(parse_installation(manifest))

    assert [spec.address for spec in specs] == ["10.0.0.1", "10.0.0.2", "10.0.0.3"]
    assert [spec.metadata.get(MANAGEMENT_NETWORK_IP) for spec in specs] == [
        "192.168.0.10",
        "192.168.0.11",
        None,
    ]
    for spec in specs:
        assert MANAGEMENT_VM_IPS not in spec.metadata
        assert spec.metadata["MANAGEMENT_DATASTORE"] == "datastore1"
        assert spec.usage_tags == ["MGMT", "CLOUD"]


def test_host_payload_shape() -> None:
    spec = HostCreateSpec(
        username="root",
        password="secret",
        address="10.0.0.1",
        availability_zone="zone-1",
        usage_tags=["CLOUD"],
        metadata={"K": "V"},
    )
    assert spec.to_payload() == {
        "username": "root",
        "password": "secret",
        "address": "10.0.0.1",
        "usageTags": ["CLOUD"],
        "metadata": {"K": "V"},
        "availabilityZone": "zone-1",
    }
