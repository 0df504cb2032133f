"""Batch registration of the physical hosts listed in a datacenter manifest."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from photonctl.constants import LOGGER_NAME
from photonctl.errors import ManifestError, RequestError, TaskError
from photonctl.manifest import MANAGEMENT_NETWORK_IP, MANAGEMENT_VM_IPS, Installation
from photonctl.models.hosts import HostCreateSpec
from photonctl.models.tasks import Task
from photonctl.utils.ipranges import parse_ip_ranges
from photonctl.workflows.task_poller import TaskPoller

logger = logging.getLogger(f"{LOGGER_NAME}.provisioning")


class HostProvisionStatus(StrEnum):
    SUBMITTED = "submitted"
    CREATED = "created"
    CREATE_FAILED = "create_failed"
    TASK_FAILED = "task_failed"


@dataclass(slots=True)
class HostProvisionResult:
    address: str
    status: HostProvisionStatus
    task_id: str | None = None
    host_id: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is HostProvisionStatus.CREATED


@dataclass(slots=True)
class ProvisioningReport:
    zones: dict[str, str] = field(default_factory=dict)
    results: list[HostProvisionResult] = field(default_factory=list)

    @property
    def created(self) -> list[HostProvisionResult]:
        return [result for result in self.results if result.ok]

    @property
    def failed(self) -> list[HostProvisionResult]:
        return [result for result in self.results if not result.ok]


ResultCallback = Callable[[HostProvisionResult], None]


def build_host_specs(installation: Installation, zone_ids: Mapping[str, str] | None = None) -> list[HostCreateSpec]:
    """Expand every manifest host entry into one create spec per address.

    ``MANAGEMENT_VM_IPS`` is expanded alongside the host addresses: the i-th
    host gets the i-th management IP as ``MANAGEMENT_NETWORK_IP``. All IP
    expressions are validated before anything is returned.
    """

    specs: list[HostCreateSpec] = []
    for index, entry in enumerate(installation.hosts):
        addresses = parse_ip_ranges(entry.address_ranges) if entry.address_ranges.strip() else []
        if not addresses:
            raise ManifestError(f"host IP address missing for host entry {index + 1}")

        metadata = dict(entry.metadata)
        management_expr = metadata.pop(MANAGEMENT_VM_IPS, "")
        management_ips = parse_ip_ranges(management_expr) if management_expr.strip() else []

        zone = entry.availability_zone
        if zone and zone_ids is not None:
            zone = zone_ids.get(zone, zone)

        for position, address in enumerate(addresses):
            host_metadata = dict(metadata)
            if position < len(management_ips):
                host_metadata[MANAGEMENT_NETWORK_IP] = management_ips[position]
            specs.append(
                HostCreateSpec(
                    username=entry.username,
                    password=entry.password,
                    address=address,
                    availability_zone=zone,
                    usage_tags=list(entry.usage_tags),
                    metadata=host_metadata,
                )
            )
    return specs


class HostProvisioner:
    """Create the hosts of a manifest, continuing past per-host failures."""

    def __init__(self, client: Any, poller: TaskPoller, *, on_result: ResultCallback | None = None) -> None:
        self._client = client
        self._poller = poller
        self._on_result = on_result

    async def resolve_zones(self, names: list[str]) -> dict[str, str]:
        """Map zone names to ids, creating each missing zone once."""

        if not names:
            return {}
        existing = await self._client.zones.list()
        by_name = {zone.name: zone.id for zone in existing.items}
        for name in names:
            if name in by_name:
                continue
            task = await self._client.zones.create(name)
            by_name[name] = await self._poller.wait_for_entity(task.id)
            logger.info("created availability zone %s: %s", name, by_name[name])
        return {name: by_name[name] for name in names}

    async def provision(self, installation: Installation) -> ProvisioningReport:
        # Validate every address expression before the first request goes out.
        build_host_specs(installation)
        zone_ids = await self.resolve_zones(installation.zone_names())
        specs = build_host_specs(installation, zone_ids)

        report = ProvisioningReport(zones=zone_ids)
        submitted: list[tuple[HostProvisionResult, Task]] = []
        for spec in specs:
            try:
                task = await self._client.infrastructure.create_host(spec)
            except RequestError as exc:
                logger.info("creation of host document with ip %s failed: %s", spec.address, exc)
                result = HostProvisionResult(spec.address, HostProvisionStatus.CREATE_FAILED, error=str(exc))
                report.results.append(result)
                self._emit(result)
                continue
            result = HostProvisionResult(spec.address, HostProvisionStatus.SUBMITTED, task_id=task.id)
            report.results.append(result)
            submitted.append((result, task))

        for result, task in submitted:
            try:
                result.host_id = await self._poller.wait_for_entity(task.id)
            except (TaskError, RequestError) as exc:
                logger.info("creation of host with ip %s failed: %s", result.address, exc)
                result.status = HostProvisionStatus.TASK_FAILED
                result.error = str(exc)
            else:
                logger.info("host with ip %s created: %s", result.address, result.host_id)
                result.status = HostProvisionStatus.CREATED
            self._emit(result)

        return report

    def _emit(self, result: HostProvisionResult) -> None:
        if self._on_result is not None:
            self._on_result(result)
