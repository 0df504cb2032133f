from __future__ import annotations

from typing import Annotated, Any

import typer

from photonctl.cli import common
from photonctl.cli.options import (
    DeploymentIdArg,
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
    print_hosts,
    print_migration_status,
    print_service_configurations,
    print_stats,
    print_vms,
)
from photonctl.errors import UsageError
from photonctl.models import Deployment, DeploymentCreateSpec
from photonctl.utils.output import print_fields, print_lines, print_table

app = typer.Typer(no_args_is_help=True, help="Deployment APIs")
migration_app = typer.Typer(no_args_is_help=True, help="Migrate from an older control plane")
app.add_typer(migration_app, name="migration")


def _cancelled() -> None:
    typer.echo("OK, canceled")


def _show(deployment: Deployment, state: common.CLIState) -> None:
    if state.needs_formatting:
        common.emit_structured(deployment, state)
        return
    if state.non_interactive:
        print_lines(
            [
                (
                    deployment.id,
                    deployment.state,
                    deployment.imageDatastores,
                    deployment.useImageDatastoreForVms,
                    deployment.syslogEndpoint,
                    deployment.ntpEndpoint,
                    deployment.loadBalancerEnabled,
                    deployment.loadBalancerAddress,
                )
            ]
        )
        return

    print_fields(
        f"Deployment ID: {deployment.id}",
        [
            ("State", deployment.state),
            ("Image Datastores", deployment.imageDatastores),
            ("Use image datastore for vms", deployment.useImageDatastoreForVms),
            ("Syslog Endpoint", deployment.syslogEndpoint),
            ("Ntp Endpoint", deployment.ntpEndpoint),
            ("LoadBalancer Enabled", deployment.loadBalancerEnabled),
            ("LoadBalancer Address", deployment.loadBalancerAddress),
        ],
    )
    print_auth(deployment.auth)
    print_stats(deployment.stats)
    print_migration_status(deployment.migrationStatus)
    print_service_configurations(deployment.serviceConfigurations)


@app.command("list")
def deployment_list(ctx: typer.Context) -> None:
    state = common.get_state(ctx)

    async def run() -> Any:
        async with common.make_client(state) as client:
            return await client.deployments.list()

    deployments = common.run_async(run()).items
    if state.needs_formatting:
        common.emit_structured(deployments, state)
        return
    rows = [(deployment.id, deployment.state) for deployment in deployments]
    if state.non_interactive:
        print_lines(rows)
        return
    print_table(["ID", "State"], rows)


@app.command("show")
def deployment_show(ctx: typer.Context, deployment_id: DeploymentIdArg = None) -> None:
    state = common.get_state(ctx)

    async def run() -> Deployment:
        async with common.make_client(state) as client:
            resolved = await common.resolve_deployment_id(client, deployment_id)
            return await client.deployments.get(resolved)

    _show(common.run_async(run()), state)


@app.command("create")
def deployment_create(
    ctx: typer.Context,
    image_datastores: Annotated[
        str | None,
        typer.Option("--image-datastores", "-i", help="Comma-separated image datastore names"),
    ] = None,
    use_image_datastore_for_vms: Annotated[
        bool,
        typer.Option("--use-image-datastore-for-vms", help="Allow VMs on the image datastores"),
    ] = False,
    syslog_endpoint: Annotated[str | None, typer.Option("--syslog-endpoint", help="Syslog endpoint")] = None,
    ntp_endpoint: Annotated[str | None, typer.Option("--ntp-endpoint", help="NTP endpoint")] = None,
    enable_loadbalancer: Annotated[
        bool,
        typer.Option("--enable-loadbalancer/--disable-loadbalancer", help="Front the control plane with a LB"),
    ] = True,
    enable_auth: Annotated[bool, typer.Option("--enable-auth", help="Enable authentication")] = False,
    oauth_endpoint: Annotated[str | None, typer.Option("--oauth-endpoint", help="OAuth server address")] = None,
    oauth_port: Annotated[int | None, typer.Option("--oauth-port", help="OAuth server port")] = None,
    oauth_tenant: Annotated[str | None, typer.Option("--oauth-tenant", help="OAuth tenant")] = None,
    oauth_username: Annotated[str | None, typer.Option("--oauth-username", help="OAuth username")] = None,
    oauth_password: Annotated[str | None, typer.Option("--oauth-password", help="OAuth password")] = None,
    oauth_security_groups: Annotated[
        str | None,
        typer.Option("--oauth-security-groups", help="Comma-separated security groups"),
    ] = None,
    enable_stats: Annotated[bool, typer.Option("--enable-stats", help="Enable stats collection")] = False,
    stats_store_endpoint: Annotated[str | None, typer.Option("--stats-store-endpoint")] = None,
    stats_store_port: Annotated[int | None, typer.Option("--stats-store-port")] = None,
    stats_store_type: Annotated[str | None, typer.Option("--stats-store-type")] = None,
) -> None:
    state = common.get_state(ctx)
    datastores = common.comma_list(common.ask_for_input(state, "Image datastore names: ", image_datastores))
    if not datastores:
        raise UsageError("Please provide image datastores using --image-datastores flag")
    if enable_auth:
        common.require(oauth_endpoint, "Please provide the OAuth endpoint using --oauth-endpoint flag")
    if enable_stats:
        common.require(stats_store_endpoint, "Please provide the stats store endpoint using --stats-store-endpoint flag")

    spec = DeploymentCreateSpec(
        image_datastores=datastores,
        use_image_datastore_for_vms=use_image_datastore_for_vms,
        syslog_endpoint=syslog_endpoint,
        ntp_endpoint=ntp_endpoint,
        enable_loadbalancer=enable_loadbalancer,
        enable_auth=enable_auth,
        oauth_endpoint=oauth_endpoint,
        oauth_port=oauth_port,
        oauth_tenant=oauth_tenant,
        oauth_username=oauth_username,
        oauth_password=oauth_password,
        oauth_security_groups=common.comma_list(oauth_security_groups),
        enable_stats=enable_stats,
        stats_store_endpoint=stats_store_endpoint,
        stats_store_port=stats_store_port,
        stats_store_type=stats_store_type,
    )
    if state.human:
        typer.echo(f"Creating deployment with image datastores: {', '.join(datastores)}")
    if not common.confirmed(state):
        _cancelled()
        return

    async def run() -> None:
        async with common.make_client(state) as client:
            task = await client.deployments.create(spec)
            await common.finish_task(client, state, task, refresh=client.deployments.get)

    common.run_async(run())


@app.command("delete")
def deployment_delete(ctx: typer.Context, deployment_id: Annotated[str, typer.Argument(help="Deployment id")]) -> None:
    state = common.get_state(ctx)
    if not common.confirmed(state):
        _cancelled()
        return

    async def run() -> None:
        async with common.make_client(state) as client:
            task = await client.deployments.delete(deployment_id)
            await common.finish_task(client, state, task)

    common.run_async(run())


@app.command("list-hosts")
def deployment_list_hosts(ctx: typer.Context, deployment_id: DeploymentIdArg = None) -> None:
    state = common.get_state(ctx)

    async def run() -> Any:
        async with common.make_client(state) as client:
            resolved = await common.resolve_deployment_id(client, deployment_id)
            return await client.deployments.hosts(resolved)

    hosts = common.run_async(run()).items
    if state.needs_formatting:
        common.emit_structured(hosts, state)
        return
    print_hosts(hosts, human=state.human)


@app.command("list-vms")
def deployment_list_vms(ctx: typer.Context, deployment_id: DeploymentIdArg = None) -> None:
    state = common.get_state(ctx)

    async def run() -> Any:
        async with common.make_client(state) as client:
            resolved = await common.resolve_deployment_id(client, deployment_id)
            return await client.deployments.vms(resolved)

    vms = common.run_async(run()).items
    if state.needs_formatting:
        common.emit_structured(vms, state)
        return
    print_vms(vms, human=state.human)


@app.command("update-image-datastores")
def deployment_update_image_datastores(
    ctx: typer.Context,
    deployment_id: DeploymentIdArg = None,
    datastores: Annotated[
        str | None,
        typer.Option("--datastores", "-d", help="Comma-separated image datastore names"),
    ] = None,
) -> None:
    state = common.get_state(ctx)
    names = common.comma_list(common.ask_for_input(state, "Datastores: ", datastores))
    if not names:
        raise UsageError("Please provide datastores using --datastores flag")

    async def run() -> None:
        async with common.make_client(state) as client:
            resolved = await common.resolve_deployment_id(client, deployment_id)
            task = await client.deployments.set_image_datastores(resolved, names)
            await common.finish_task(client, state, task, refresh=client.deployments.get)

    common.run_async(run())


def _deployment_action(ctx: typer.Context, deployment_id: str | None, action: str) -> None:
    state = common.get_state(ctx)

    async def run() -> None:
        async with common.make_client(state) as client:
            resolved = await common.resolve_deployment_id(client, deployment_id)
            task = await getattr(client.deployments, action)(resolved)
            await common.finish_task(client, state, task, refresh=client.deployments.get)

    common.run_async(run())


@app.command("sync-hosts-config")
def deployment_sync_hosts_config(ctx: typer.Context, deployment_id: DeploymentIdArg = None) -> None:
    _deployment_action(ctx, deployment_id, "sync_hosts_config")


@app.command("pause")
def deployment_pause(ctx: typer.Context, deployment_id: DeploymentIdArg = None) -> None:
    _deployment_action(ctx, deployment_id, "pause_system")


@app.command("pause-background-tasks")
def deployment_pause_background_tasks(ctx: typer.Context, deployment_id: DeploymentIdArg = None) -> None:
    _deployment_action(ctx, deployment_id, "pause_background_tasks")


@app.command("resume")
def deployment_resume(ctx: typer.Context, deployment_id: DeploymentIdArg = None) -> None:
    _deployment_action(ctx, deployment_id, "resume_system")


@app.command("set-security-groups")
def deployment_set_security_groups(
    ctx: typer.Context,
    arguments: Annotated[list[str], typer.Argument(metavar="[ID] GROUPS", help="Comma-separated security groups")],
) -> None:
    state = common.get_state(ctx)
    if len(arguments) > 2:
        raise UsageError("Usage: deployment set-security-groups [<id>] <security_groups>")
    deployment_id = arguments[0] if len(arguments) == 2 else None
    groups = common.comma_list(arguments[-1])
    if not groups:
        raise UsageError("Please provide security groups")

    async def run() -> None:
        async with common.make_client(state) as client:
            resolved = await common.resolve_deployment_id(client, deployment_id)
            task = await client.deployments.set_security_groups(resolved, groups)
            await common.finish_task(client, state, task, refresh=client.deployments.get)

    common.run_async(run())


def deployment_enable_cluster_type(
    ctx: typer.Context,
    deployment_id: DeploymentIdArg = None,
    service_type: ServiceTypeOpt = None,
    image_id: ImageIdOpt = None,
) -> None:
    state = common.get_state(ctx)
    spec = common.build_service_spec(state, service_type, image_id)
    if state.human:
        typer.echo(f"Enabling service type '{spec.type}' (image: {spec.image_id or '-'})")
    if not common.confirmed(state):
        _cancelled()
        return

    async def run() -> None:
        async with common.make_client(state) as client:
            resolved = await common.resolve_deployment_id(client, deployment_id)
            task = await client.deployments.enable_cluster_type(resolved, spec)
            await common.finish_task(client, state, task, refresh=client.deployments.get)

    common.run_async(run())


def deployment_disable_cluster_type(
    ctx: typer.Context,
    deployment_id: DeploymentIdArg = None,
    service_type: ServiceTypeOpt = None,
) -> None:
    state = common.get_state(ctx)
    spec = common.build_service_spec(state, service_type, None)
    if state.human:
        typer.echo(f"Disabling service type '{spec.type}'")
    if not common.confirmed(state):
        _cancelled()
        return

    async def run() -> None:
        async with common.make_client(state) as client:
            resolved = await common.resolve_deployment_id(client, deployment_id)
            task = await client.deployments.disable_cluster_type(resolved, spec)
            await common.finish_task(client, state, task, refresh=client.deployments.get)

    common.run_async(run())


app.command("enable-cluster-type", help="Enable a service type on the deployment")(deployment_enable_cluster_type)
app.command("enable-service-type", hidden=True)(deployment_enable_cluster_type)
app.command("disable-cluster-type", help="Disable a service type on the deployment")(deployment_disable_cluster_type)
app.command("disable-service-type", hidden=True)(deployment_disable_cluster_type)


@app.command("configure-nsx")
def deployment_configure_nsx(
    ctx: typer.Context,
    deployment_id: DeploymentIdArg = None,
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
    )

    async def run() -> None:
        async with common.make_client(state) as client:
            resolved = await common.resolve_deployment_id(client, deployment_id)
            task = await client.deployments.configure_nsx(resolved, spec)
            await common.finish_task(client, state, task, refresh=client.deployments.get)

    common.run_async(run())


EndpointOpt = Annotated[
    str | None,
    typer.Option("--endpoint", "-e", help="API endpoint of the old control plane"),
]


def _migrate(ctx: typer.Context, deployment_id: str | None, endpoint: str | None, action: str) -> None:
    state = common.get_state(ctx)
    source = common.ask_for_input(state, "Old control plane endpoint: ", endpoint)
    common.require(source, "Please provide the API endpoint of the old control plane")

    async def run() -> None:
        async with common.make_client(state) as client:
            resolved = await common.resolve_deployment_id(client, deployment_id)
            task = await getattr(client.deployments, action)(resolved, source)
            if state.human:
                typer.echo(f"Deployment '{resolved}' migration started [source management endpoint: '{source}'].")
            await common.finish_task(client, state, task, refresh=client.deployments.get)

    common.run_async(run())


@migration_app.command("prepare")
def migration_prepare(ctx: typer.Context, deployment_id: DeploymentIdArg = None, endpoint: EndpointOpt = None) -> None:
    _migrate(ctx, deployment_id, endpoint, "initialize_migration")


@migration_app.command("finalize")
def migration_finalize(
    ctx: typer.Context,
    deployment_id: DeploymentIdArg = None,
    endpoint: EndpointOpt = None,
) -> None:
    _migrate(ctx, deployment_id, endpoint, "finalize_migration")


@migration_app.command("status")
def migration_status(ctx: typer.Context, deployment_id: DeploymentIdArg = None) -> None:
    state = common.get_state(ctx)

    async def run() -> Deployment:
        async with common.make_client(state) as client:
            resolved = await common.resolve_deployment_id(client, deployment_id)
            return await client.deployments.get(resolved)

    deployment = common.run_async(run())
    migration = deployment.migrationStatus
    if state.needs_formatting:
        common.emit_structured(migration, state)
        return
    if state.non_interactive:
        if migration is None:
            return
        print_lines(
            [
                (
                    migration.completedDataMigrationCycles,
                    migration.dataMigrationCycleProgress,
                    migration.dataMigrationCycleSize,
                    migration.vibsUploaded,
                    migration.vibs_total,
                )
            ]
        )
        return
    print_migration_status(migration)
