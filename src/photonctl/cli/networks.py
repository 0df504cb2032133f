from __future__ import annotations

from typing import Annotated, Any

import typer

from photonctl.cli import common
from photonctl.models import Network, NetworkCreateSpec
from photonctl.utils.output import print_fields, print_lines, print_table

app = typer.Typer(no_args_is_help=True, help="Network APIs")

TenantOpt = Annotated[str | None, typer.Option("--tenant", "-t", help="Tenant name")]
ProjectOpt = Annotated[str | None, typer.Option("--project", "-p", help="Project name")]
NetworkIdArg = Annotated[str, typer.Argument(help="Network id")]


def _show(network: Network, state: common.CLIState) -> None:
    if state.needs_formatting:
        common.emit_structured(network, state)
        return
    if state.non_interactive:
        print_lines([(network.id, network.name, network.state, network.privateIpCidr, network.isDefault)])
        return
    print_fields(
        f"Network ID: {network.id}",
        [
            ("Name", network.name),
            ("State", network.state),
            ("Description", network.description),
            ("Private IP CIDR", network.privateIpCidr),
            ("Is Default", network.isDefault),
        ],
    )


@app.command("create")
def network_create(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Network name")] = None,
    private_ip_cidr: Annotated[
        str | None,
        typer.Option("--private-ip-cidr", "-c", help="CIDR of the network's private addresses"),
    ] = None,
    description: Annotated[str | None, typer.Option("--description", "-d", help="Description")] = None,
    tenant: TenantOpt = None,
    project: ProjectOpt = None,
) -> None:
    state = common.get_state(ctx)
    name = common.require(common.ask_for_input(state, "Network name: ", name), "Please provide network name")
    private_ip_cidr = common.require(
        common.ask_for_input(state, "Network privateIpCidr: ", private_ip_cidr),
        "Please provide privateIpCidr",
    )
    spec = NetworkCreateSpec(name=name, private_ip_cidr=private_ip_cidr, description=description)

    async def run() -> Network | None:
        async with common.make_client(state) as client:
            project_id = await client.resolve_project_id(project, tenant=tenant)
            if state.human:
                typer.echo(f"Creating Network: {name}({private_ip_cidr})")
            if not common.confirmed(state):
                typer.echo("OK, canceled")
                return None
            task = await client.networks.create(project_id, spec)
            network_id = await common.finish_task(client, state, task, refresh=client.networks.get)
            if not state.human:
                return None
            return await client.networks.get(network_id)

    network = common.run_async(run())
    if network is not None:
        _show(network, state)


@app.command("delete")
def network_delete(ctx: typer.Context, network_id: NetworkIdArg) -> None:
    state = common.get_state(ctx)
    if not common.confirmed(state):
        typer.echo("OK, canceled")
        return

    async def run() -> None:
        async with common.make_client(state) as client:
            task = await client.networks.delete(network_id)
            await common.finish_task(client, state, task)

    common.run_async(run())


@app.command("list")
def network_list(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Only networks with this name")] = None,
    tenant: TenantOpt = None,
    project: ProjectOpt = None,
) -> None:
    state = common.get_state(ctx)

    async def run() -> Any:
        async with common.make_client(state) as client:
            project_id = await client.resolve_project_id(project, tenant=tenant)
            return await client.networks.list(project_id, name=name)

    networks = common.run_async(run()).items
    if state.needs_formatting:
        common.emit_structured(networks, state)
        return
    rows = [
        (network.id, network.name, network.kind, network.privateIpCidr, network.isDefault) for network in networks
    ]
    if state.non_interactive:
        print_lines(rows)
        return
    print_table(["ID", "Name", "Kind", "PrivateIpCidr", "IsDefault"], rows)


@app.command("show")
def network_show(ctx: typer.Context, network_id: NetworkIdArg) -> None:
    state = common.get_state(ctx)

    async def run() -> Network:
        async with common.make_client(state) as client:
            return await client.networks.get(network_id)

    _show(common.run_async(run()), state)


@app.command("update")
def network_update(
    ctx: typer.Context,
    network_id: NetworkIdArg,
    name: Annotated[str | None, typer.Option("--name", "-n", help="New network name")] = None,
) -> None:
    state = common.get_state(ctx)
    new_name = common.require(
        common.ask_for_input(state, "New network name: ", name),
        "Please provide a new name using --name flag",
    )

    async def run() -> None:
        async with common.make_client(state) as client:
            task = await client.networks.update(network_id, name=new_name)
            await common.finish_task(client, state, task, refresh=client.networks.get)

    common.run_async(run())
