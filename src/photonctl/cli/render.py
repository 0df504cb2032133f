"""Human renderings shared by the deployment and system command groups."""

from __future__ import annotations

from collections.abc import Sequence

import typer

from photonctl.models import VM, AuthInfo, Host, MigrationStatus, ServiceConfiguration, StatsInfo
from photonctl.utils.output import print_fields, print_lines, print_table


def print_migration_status(migration: MigrationStatus | None) -> None:
    typer.echo("  Migration status:")
    if migration is None:
        typer.echo("    No migration information available")
        return
    typer.echo(f"    Completed data migration cycles:          {migration.completedDataMigrationCycles}")
    typer.echo(
        "    Current data migration cycles progress:   "
        f"{migration.dataMigrationCycleProgress} / {migration.dataMigrationCycleSize}"
    )
    typer.echo(f"    VIB upload progress:                      {migration.vibsUploaded} / {migration.vibs_total}")


def print_auth(auth: AuthInfo) -> None:
    fields: list[tuple[str, object]] = [("Enabled", auth.enabled)]
    if auth.enabled:
        fields += [
            ("Endpoint", auth.endpoint),
            ("Port", auth.port),
            ("Domain", auth.domain),
            ("Tenant", auth.tenant),
            ("Security Groups", auth.securityGroups),
        ]
    print_fields("  Auth:", fields, indent=4)


def print_stats(stats: StatsInfo | None) -> None:
    if stats is None:
        return
    fields: list[tuple[str, object]] = [("Enabled", stats.enabled)]
    if stats.enabled:
        fields += [
            ("Store Endpoint", stats.storeEndpoint),
            ("Store Port", stats.storePort),
            ("Store Type", stats.storeType),
        ]
    print_fields("  Stats:", fields, indent=4)


def print_service_configurations(configurations: Sequence[ServiceConfiguration]) -> None:
    if not configurations:
        typer.echo("  No service configuration")
        return
    typer.echo("  Service configurations:")
    for configuration in configurations:
        print_fields(None, [("Type", configuration.type), ("ImageID", configuration.imageId)], indent=4)


def print_hosts(hosts: Sequence[Host], *, human: bool) -> None:
    rows = [(host.id, host.state, host.address, host.tags) for host in hosts]
    if not human:
        print_lines(rows)
        return
    print_table(["ID", "State", "IP", "Tags"], rows)


def print_vms(vms: Sequence[VM], *, human: bool) -> None:
    rows = [(vm.id, vm.name, vm.state) for vm in vms]
    if not human:
        print_lines(rows)
        return
    print_table(["ID", "Name", "State"], rows)
