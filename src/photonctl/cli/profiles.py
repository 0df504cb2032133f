from __future__ import annotations

from typing import Annotated, Any

import typer
from pydantic import SecretStr

from photonctl.cli import common
from photonctl.config import ProfileConfig, ProfileManager, load_config
from photonctl.constants import DEFAULT_TARGET

profiles_app = typer.Typer(no_args_is_help=True, help="Manage local control plane profiles")
config_app = typer.Typer(no_args_is_help=True, help="Config and preference commands")

_CONFIG_REDACTED = "<redacted>"
_SENSITIVE_CONFIG_KEY_MARKERS = ("token", "secret", "password", "authorization", "cookie")


def _is_sensitive_config_key(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in _SENSITIVE_CONFIG_KEY_MARKERS)


def _redact_sensitive_config(value: Any) -> Any:
    if isinstance(value, dict):
        redacted: dict[str, Any] = {}
        for key, item in value.items():
            if _is_sensitive_config_key(str(key)) and item is not None:
                redacted[str(key)] = _CONFIG_REDACTED
            else:
                redacted[str(key)] = _redact_sensitive_config(item)
        return redacted

    if isinstance(value, list):
        return [_redact_sensitive_config(item) for item in value]

    return value


def configure(
    ctx: typer.Context,
    profile: Annotated[str, typer.Option(help="Profile name to write")] = "default",
    target: Annotated[str, typer.Option(help="Control plane endpoint URL")] = DEFAULT_TARGET,
    auth_url: Annotated[str | None, typer.Option(help="Lightwave/OIDC server used to refresh tokens")] = None,
    access_token: Annotated[str | None, typer.Option(help="Bearer token")] = None,
    refresh_token: Annotated[str | None, typer.Option(help="Refresh token")] = None,
    tenant: Annotated[str | None, typer.Option(help="Default tenant name")] = None,
    project: Annotated[str | None, typer.Option(help="Default project name")] = None,
    verify_ssl: Annotated[bool, typer.Option("--verify-ssl/--insecure", help="Verify TLS certificates")] = True,
    activate: Annotated[bool, typer.Option("--activate/--no-activate")] = True,
) -> None:
    state = common.get_state(ctx)
    manager = ProfileManager(state.config_file)
    model = ProfileConfig(
        target=target,
        auth_url=auth_url,
        access_token=SecretStr(access_token) if access_token else None,
        refresh_token=SecretStr(refresh_token) if refresh_token else None,
        tenant=tenant,
        project=project,
        verify_ssl=verify_ssl,
    )
    cfg = manager.upsert_profile(profile, model, activate=activate)
    common.emit_structured(cfg, state)


@profiles_app.command("list")
def profiles_list(ctx: typer.Context) -> None:
    state = common.get_state(ctx)
    manager = ProfileManager(state.config_file)
    names = manager.list_profiles()
    common.emit_structured({"active_profile": manager.load().active_profile, "profiles": names}, state)


@profiles_app.command("show")
def profiles_show(
    ctx: typer.Context,
    name: Annotated[str | None, typer.Argument(help="Profile name")] = None,
) -> None:
    state = common.get_state(ctx)
    manager = ProfileManager(state.config_file)
    common.emit_structured(manager.get_profile(name), state)


@profiles_app.command("use")
def profiles_use(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Profile name")],
) -> None:
    state = common.get_state(ctx)
    manager = ProfileManager(state.config_file)
    common.emit_structured(manager.set_active_profile(name), state)


@profiles_app.command("delete")
def profiles_delete(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Profile name")],
) -> None:
    state = common.get_state(ctx)
    manager = ProfileManager(state.config_file)
    common.emit_structured(manager.delete_profile(name), state)


@config_app.command("info")
def config_info(ctx: typer.Context) -> None:
    state = common.get_state(ctx)
    cfg = load_config(config_path=state.config_file)
    payload = _redact_sensitive_config(cfg.data.model_dump(mode="json"))
    payload["_source"] = cfg.source
    payload["_path"] = str(cfg.path) if cfg.path else None
    common.emit_structured(payload, state)


@config_app.command("set-tenant")
def config_set_tenant(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Tenant name")],
) -> None:
    """Set the profile's default tenant; its default project is cleared."""

    state = common.get_state(ctx)
    manager = ProfileManager(state.config_file)
    manager.set_tenant(name, profile=state.profile)
    typer.echo(f"default tenant set to {name}")


@config_app.command("set-project")
def config_set_project(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Project name")],
) -> None:
    state = common.get_state(ctx)
    manager = ProfileManager(state.config_file)
    manager.set_project(name, profile=state.profile)
    typer.echo(f"default project set to {name}")
