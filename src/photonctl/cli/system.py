from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer

from photonctl.cli import common
from photonctl.cli.options import (
    EdgeClusterIdOpt,
    FloatingRangeEndOpt,
    FloatingRangeStartOpt,
    HostUplinkPnicOpt,
    HostUplinkVlanIdOpt,
    ImageIdOpt,
    NsxAddressOpt,
    NsxPasswordOpt,
    NsxUsernameOpt,
    OverlayZoneIdOpt,
    PrivateIpRootCidrOpt,
    ServiceTypeOpt,
    T0RouterIdOpt,
    TunnelIpPoolIdOpt,
)
from photonctl.cli.render import (
    print_auth,
    print_migration_status,
    print_service_configurations,
    print_stats,
    print_vms,
)
from photonctl.errors import UsageError
from photonctl.manifest import load_installation
from photonctl.models import VM, SystemInfo, SystemStatus, VmNetworkIp, network_connections, vm_network_ip
from photonctl.utils.output import print_fields, print_lines, print_table
from photonctl.workflows import HostProvisioner, HostProvisionResult

app = typer.Typer(no_args_is_help=True, help="System-wide APIs")

READY_STATE = "READY"


async def _vm_summary(client: Any) -> list[tuple[VM, VmNetworkIp]]:
    """Pair every control plane VM with the IP of its attached network."""

    vms = await client.system.vms()
    poller = common.make_poller(client)
    summary: list[tuple[VM, VmNetworkIp]] = []
    for vm in vms.items:
        task = await client.vms.get_networks(vm.id)
        finished = await poller.wait(task.id)
        summary.append((vm, vm_network_ip(network_connections(finished.resourceProperties))))
    return summary


def _job_rows(summary: list[tuple[VM, VmNetworkIp]]) -> list[tuple[str, list[str], list[str]]]:
    jobs: dict[str, tuple[list[str], list[str]]] = {}
    for vm, ip in summary:
        for port, job in sorted(vm.container_ports().items()):
            ips, ports = jobs.setdefault(job, ([], []))
            if str(ip) not in ips:
                ips.append(str(ip))
            if port not in ports:
                ports.append(port)
    return [(job, ips, ports) for job, (ips, ports) in sorted(jobs.items())]


def _print_info(info: SystemInfo, summary: list[tuple[VM, VmNetworkIp]]) -> None:
    print_fields(
        "Instance:",
        [
            ("Version", info.fullVersion),
            ("Base Version", info.baseVersion),
            ("Git Commit", info.gitCommitHash),
            ("Network Type", info.networkType),
            ("State", info.state),
            ("Image Datastores", info.imageDatastores),
            ("Use image datastore for vms", info.useImageDatastoreForVms),
            ("Syslog Endpoint", info.syslogEndpoint),
            ("Ntp Endpoint", info.ntpEndpoint),
            ("LoadBalancer Enabled", info.loadBalancerEnabled),
            ("LoadBalancer Address", info.loadBalancerAddress),
        ],
    )
    print_auth(info.auth)
    print_stats(info.stats)
    print_migration_status(info.migration)
    print_service_configurations(info.serviceConfigurations)
    if not summary:
        return

    typer.echo("")
    print_table(["Job", "VM IP(s)", "Ports"], _job_rows(summary), total=False)
    for vm, ip in summary:
        typer.echo("")
        print_fields(
            None,
            [("VM IP", str(ip)), ("Host IP", vm.host), ("VM ID", vm.id), ("VM Name", vm.name)],
        )


@app.command("status")
def system_status(ctx: typer.Context) -> None:
    state = common.get_state(ctx)

    async def run() -> SystemStatus:
        async with common.make_client(state) as client:
            return await client.system.status()

    status = common.run_async(run())
    if state.needs_formatting:
        common.emit_structured(status, state)
        return
    rows = [(component.component, component.status) for component in status.components]
    if state.non_interactive:
        typer.echo(status.status)
        print_lines(rows)
        return
    typer.echo(f"Overall status: {status.status}")
    typer.echo("")
    print_table(["Component", "Status"], rows, total=False)


@app.command("info")
def system_info(ctx: typer.Context) -> None:
    state = common.get_state(ctx)

    async def run() -> tuple[SystemInfo, list[tuple[VM, VmNetworkIp]]]:
        async with common.make_client(state) as client:
            info = await client.system.info()
            summary = await _vm_summary(client) if info.state == READY_STATE else []
            return info, summary

    info, summary = common.run_async(run())
    if state.needs_formatting:
        payload: dict[str, Any] = {"info": info}
        payload["vms"] = [
            {"id": vm.id, "name": vm.name, "host": vm.host, "ip": str(ip), "ports": vm.container_ports()}
            for vm, ip in summary
        ]
        common.emit_structured(payload, state)
        return
    if state.non_interactive:
        print_lines([(info.fullVersion, info.state, info.networkType, info.imageDatastores, info.loadBalancerAddress)])
        print_lines([(vm.id, vm.name, vm.host, str(ip)) for vm, ip in summary])
        return
    _print_info(info, summary)


@app.command("list-vms")
def system_list_vms(ctx: typer.Context) -> None:
    state = common.get_state(ctx)

    async def run() -> Any:
        async with common.make_client(state) as client:
            return await client.system.vms()

    vms = common.run_async(run()).items
    if state.needs_formatting:
        common.emit_structured(vms, state)
        return
    print_vms(vms, human=state.human)


def _system_action(ctx: typer.Context, action: str, *args: Any) -> None:
    state = common.get_state(ctx)

    async def run() -> None:
        async with common.make_client(state) as client:
            task = await getattr(client.system, action)(*args)
            await common.finish_task(client, state, task)

    common.run_async(run())


@app.command("pause")
def system_pause(ctx: typer.Context) -> None:
    _system_action(ctx, "pause")


@app.command("pause-background-tasks")
def system_pause_background_tasks(ctx: typer.Context) -> None:
    _system_action(ctx, "pause_background_tasks")


@app.command("resume")
def system_resume(ctx: typer.Context) -> None:
    _system_action(ctx, "resume")


@app.command("set-security-groups")
def system_set_security_groups(
    ctx: typer.Context,
    security_groups: Annotated[str, typer.Argument(help="Comma-separated security groups")],
) -> None:
    groups = common.comma_list(security_groups)
    if not groups:
        raise UsageError("Please provide security groups")
    _system_action(ctx, "set_security_groups", groups)


def system_enable_cluster_type(
    ctx: typer.Context,
    service_type: ServiceTypeOpt = None,
    image_id: ImageIdOpt = None,
) -> None:
    state = common.get_state(ctx)
    spec = common.build_service_spec(state, service_type, image_id)
    if not common.confirmed(state):
        typer.echo("OK, canceled")
        return
    _system_action(ctx, "enable_service_type", spec)


def system_disable_cluster_type(ctx: typer.Context, service_type: ServiceTypeOpt = None) -> None:
    state = common.get_state(ctx)
    spec = common.build_service_spec(state, service_type, None)
    if not common.confirmed(state):
        typer.echo("OK, canceled")
        return
    _system_action(ctx, "disable_service_type", spec)


app.command("enable-cluster-type", help="Enable a service type")(system_enable_cluster_type)
app.command("enable-service-type", hidden=True)(system_enable_cluster_type)
app.command("disable-cluster-type", help="Disable a service type")(system_disable_cluster_type)
app.command("disable-service-type", hidden=True)(system_disable_cluster_type)


@app.command("configure-nsx")
def system_configure_nsx(
    ctx: typer.Context,
    nsx_address: NsxAddressOpt = None,
    nsx_username: NsxUsernameOpt = None,
    nsx_password: NsxPasswordOpt = None,
    private_ip_root_cidr: PrivateIpRootCidrOpt = None,
    floating_ip_root_range_start: FloatingRangeStartOpt = None,
    floating_ip_root_range_end: FloatingRangeEndOpt = None,
    t0_router_id: T0RouterIdOpt = None,
    edge_cluster_id: EdgeClusterIdOpt = None,
    overlay_transport_zone_id: OverlayZoneIdOpt = None,
    tunnel_ip_pool_id: TunnelIpPoolIdOpt = None,
    host_uplink_pnic: HostUplinkPnicOpt = None,
    host_uplink_vlan_id: HostUplinkVlanIdOpt = None,
    dns_server_addresses: Annotated[
        str | None,
        typer.Option("--dns-server-addresses", help="Comma-separated DNS servers"),
    ] = None,
) -> None:
    state = common.get_state(ctx)
    spec = common.build_nsx_spec(
        state,
        nsx_address=nsx_address,
        nsx_username=nsx_username,
        nsx_password=nsx_password,
        private_ip_root_cidr=private_ip_root_cidr,
        floating_ip_root_range_start=floating_ip_root_range_start,
        floating_ip_root_range_end=floating_ip_root_range_end,
        t0_router_id=t0_router_id,
        edge_cluster_id=edge_cluster_id,
        overlay_transport_zone_id=overlay_transport_zone_id,
        tunnel_ip_pool_id=tunnel_ip_pool_id,
        host_uplink_pnic=host_uplink_pnic,
        host_uplink_vlan_id=host_uplink_vlan_id,
        dns_server_addresses=dns_server_addresses,
    )
    _system_action(ctx, "configure_nsx", spec)


def _print_result(result: HostProvisionResult) -> None:
    if result.ok:
        typer.echo(f"Host with ip '{result.address}' created: ID = {result.host_id}")
    else:
        typer.echo(f"Creation of Host with ip '{result.address}' failed: {result.error}", err=True)


def system_add_hosts(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="Datacenter manifest (YAML) listing the hosts")],
) -> None:
    state = common.get_state(ctx)
    installation = load_installation(file)

    async def run() -> Any:
        async with common.make_client(state) as client:
            provisioner = HostProvisioner(
                client,
                common.make_poller(client),
                on_result=_print_result if state.human else None,
            )
            return await provisioner.provision(installation)

    report = common.run_async(run())
    if state.needs_formatting:
        common.emit_structured(report, state)
        return
    if state.non_interactive:
        print_lines([(result.address, result.status, result.host_id, result.error) for result in report.results])
        return
    typer.echo(f"\nHosts created: {len(report.created)}, failed: {len(report.failed)}")


app.command("add-hosts", help="Register every host listed in a manifest")(system_add_hosts)
app.command("addHosts", hidden=True)(system_add_hosts)
