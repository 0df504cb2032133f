"""Option declarations reused by more than one command group."""

from __future__ import annotations

from typing import Annotated

import typer

DeploymentIdArg = Annotated[str | None, typer.Argument(help="Deployment id (defaults to the only deployment)")]

ServiceTypeOpt = Annotated[str | None, typer.Option("--type", "-k", help="Service type, e.g. KUBERNETES")]
ImageIdOpt = Annotated[str | None, typer.Option("--image-id", "-i", help="Image used by the service")]

NsxAddressOpt = Annotated[str | None, typer.Option("--nsx-address", help="NSX manager address")]
NsxUsernameOpt = Annotated[str | None, typer.Option("--nsx-username", help="NSX username")]
NsxPasswordOpt = Annotated[str | None, typer.Option("--nsx-password", help="NSX password")]
PrivateIpRootCidrOpt = Annotated[str | None, typer.Option("--private-ip-root-cidr", help="Root CIDR of private IPs")]
FloatingRangeStartOpt = Annotated[
    str | None,
    typer.Option("--floating-ip-root-range-start", help="First address of the floating IP range"),
]
FloatingRangeEndOpt = Annotated[
    str | None,
    typer.Option("--floating-ip-root-range-end", help="Last address of the floating IP range"),
]
T0RouterIdOpt = Annotated[str | None, typer.Option("--t0-router-id", help="ID of the T0 router")]
EdgeClusterIdOpt = Annotated[str | None, typer.Option("--edge-cluster-id", help="ID of the edge cluster")]
OverlayZoneIdOpt = Annotated[
    str | None,
    typer.Option("--overlay-transport-zone-id", help="ID of the overlay transport zone"),
]
TunnelIpPoolIdOpt = Annotated[str | None, typer.Option("--tunnel-ip-pool-id", help="ID of the tunnel IP pool")]
HostUplinkPnicOpt = Annotated[str | None, typer.Option("--host-uplink-pnic", help="Host uplink pnic name")]
HostUplinkVlanIdOpt = Annotated[int | None, typer.Option("--host-uplink-vlan-id", help="VLAN id of the host uplink")]
