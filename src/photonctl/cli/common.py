"""State and helpers shared by every command group."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Coroutine
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TypeVar

import typer
from rich.console import Console

from photonctl.client import AsyncPhotonClient
from photonctl.config import TaskPollConfig
from photonctl.errors import UsageError
from photonctl.models import IpRange, NsxConfigurationSpec, ServiceConfigurationSpec
from photonctl.models.tasks import Task
from photonctl.utils.ipranges import split_comma_list
from photonctl.utils.output import OutputFormat, emit
from photonctl.utils.serialization import to_plain_data
from photonctl.workflows.task_poller import TaskPoller


class CLIState:
    def __init__(
        self,
        *,
        profile: str | None,
        config_file: Path | None,
        output: OutputFormat,
        output_explicit: bool,
        non_interactive: bool,
        log_file: Path | None = None,
    ) -> None:
        self.profile = profile
        self.config_file = config_file
        self.output = output
        self.output_explicit = output_explicit
        self.non_interactive = non_interactive
        self.log_file = log_file

    @property
    def needs_formatting(self) -> bool:
        """True when the user asked for a structured (json/yaml) document."""

        return self.output_explicit and self.output in ("json", "yaml")

    @property
    def human(self) -> bool:
        return not self.non_interactive and not self.needs_formatting


T = TypeVar("T")


def run_async(awaitable: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(awaitable)


def get_state(ctx: typer.Context) -> CLIState:
    obj = ctx.obj
    if not isinstance(obj, CLIState):
        raise typer.BadParameter("CLI context was not initialized")
    return obj


def make_client(state: CLIState) -> AsyncPhotonClient:
    return AsyncPhotonClient(profile=state.profile, config_path=state.config_file)


def emit_structured(value: Any, state: CLIState) -> None:
    emit(to_plain_data(value), output=state.output)


def confirmed(state: CLIState, message: str = "Are you sure") -> bool:
    if state.non_interactive:
        return True
    return typer.confirm(message, default=False)


def ask_for_input(state: CLIState, message: str, value: str | None) -> str:
    """Prompt for a missing value in interactive mode; never prompts otherwise."""

    if value:
        return value
    if not state.human:
        return ""
    return str(typer.prompt(message, default="", show_default=False)).strip()


def require(value: str | None, message: str) -> str:
    if not value:
        raise UsageError(message)
    return value


def comma_list(value: str | None) -> list[str]:
    return split_comma_list(value)


def timestamp_to_string(millis: int | None) -> str:
    if not millis or millis <= 0:
        return "-"
    return datetime.fromtimestamp(millis / 1000, tz=UTC).strftime("%Y-%m-%d %H:%M:%S")


def _progress_text(task: Task) -> str:
    operation = task.operation or "task"
    step = task.current_step
    if step is None or not task.steps:
        return f"{operation}: {task.state}"
    return f"{operation}: {step.operation} ({step.sequence + 1}/{len(task.steps)})"


def make_poller(client: Any, *, on_update: Any = None) -> TaskPoller:
    config = getattr(client, "task_poll", None) or TaskPollConfig()
    return TaskPoller.from_config(client.tasks, config, on_update=on_update)


async def wait_on_task(client: Any, state: CLIState, task: Task) -> Task:
    """Wait for ``task`` and report it the way the current output mode expects."""

    console = Console(stderr=True)
    if state.human and console.is_terminal:
        with console.status(_progress_text(task)) as status:
            poller = make_poller(client, on_update=lambda current: status.update(_progress_text(current)))
            finished = await poller.wait(task.id)
    else:
        finished = await make_poller(client).wait(task.id)

    entity_id = finished.entity.id or ""
    if state.human:
        typer.echo(f"{finished.operation} completed for '{finished.entity.kind}' entity {entity_id}")
    elif state.non_interactive:
        typer.echo(entity_id)
    return finished


async def finish_task(
    client: Any,
    state: CLIState,
    task: Task,
    refresh: Callable[[str], Awaitable[Any]] | None = None,
) -> str:
    """Wait for ``task``; with ``--output`` emit the refreshed entity, or the task itself."""

    finished = await wait_on_task(client, state, task)
    entity_id = finished.entity.id or ""
    if state.needs_formatting:
        emit_structured(await refresh(entity_id) if refresh is not None else finished, state)
    return entity_id


async def resolve_deployment_id(client: Any, deployment_id: str | None) -> str:
    """Use the given id, or the only deployment when exactly one exists."""

    if deployment_id:
        return deployment_id
    deployments = await client.deployments.list()
    if len(deployments.items) != 1:
        raise UsageError(
            "We were unable to determine the deployment 'id'. "
            "Please make sure a deployment exists and provide the deployment 'id' argument."
        )
    return deployments.items[0].id


def build_service_spec(state: CLIState, service_type: str | None, image_id: str | None) -> ServiceConfigurationSpec:
    service_type = ask_for_input(state, "Service type: ", service_type)
    require(service_type, "Please provide service type using --type flag")
    return ServiceConfigurationSpec(type=service_type.upper(), image_id=image_id or None)


def build_nsx_spec(
    state: CLIState,
    *,
    nsx_address: str | None,
    nsx_username: str | None,
    nsx_password: str | None,
    private_ip_root_cidr: str | None,
    floating_ip_root_range_start: str | None,
    floating_ip_root_range_end: str | None,
    t0_router_id: str | None,
    edge_cluster_id: str | None,
    overlay_transport_zone_id: str | None,
    tunnel_ip_pool_id: str | None,
    host_uplink_pnic: str | None,
    host_uplink_vlan_id: int | None,
    dns_server_addresses: str | None = None,
) -> NsxConfigurationSpec:
    """Collect NSX settings, prompting for whatever is missing in interactive mode."""

    def field(prompt: str, value: str | None, flag: str, label: str) -> str:
        return require(ask_for_input(state, prompt, value), f"Please provide {label} using --{flag} flag")

    return NsxConfigurationSpec(
        nsx_address=field("NSX Manager Public IP Address: ", nsx_address, "nsx-address", "NSX address"),
        nsx_username=field("NSX Username: ", nsx_username, "nsx-username", "NSX username"),
        nsx_password=field("NSX Password: ", nsx_password, "nsx-password", "NSX password"),
        private_ip_root_cidr=field(
            "Private IP Root CIDR: ", private_ip_root_cidr, "private-ip-root-cidr", "private IP root CIDR"
        ),
        floating_ip_root_range=IpRange(
            start=field(
                "Floating IP Root Range Start: ",
                floating_ip_root_range_start,
                "floating-ip-root-range-start",
                "floating IP root range start",
            ),
            end=field(
                "Floating IP Root Range End: ",
                floating_ip_root_range_end,
                "floating-ip-root-range-end",
                "floating IP root range end",
            ),
        ),
        t0_router_id=field("T0 Router ID: ", t0_router_id, "t0-router-id", "T0 router ID"),
        edge_cluster_id=field("Edge Cluster ID: ", edge_cluster_id, "edge-cluster-id", "edge cluster ID"),
        overlay_transport_zone_id=field(
            "Overlay Transport Zone ID: ",
            overlay_transport_zone_id,
            "overlay-transport-zone-id",
            "overlay transport zone ID",
        ),
        tunnel_ip_pool_id=field("Tunnel IP Pool ID: ", tunnel_ip_pool_id, "tunnel-ip-pool-id", "tunnel IP pool ID"),
        host_uplink_pnic=field("Host Uplink Pnic: ", host_uplink_pnic, "host-uplink-pnic", "host uplink pnic"),
        host_uplink_vlan_id=host_uplink_vlan_id or 0,
        dns_server_addresses=comma_list(dns_server_addresses),
    )
