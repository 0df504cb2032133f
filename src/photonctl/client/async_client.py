from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx

from photonctl.auth import is_token_expired
from photonctl.config import ConfigInput, ProfileConfig, RetryConfig, SDKConfig, TaskPollConfig, load_config
from photonctl.constants import LOGGER_NAME, TOKEN_PATH
from photonctl.errors import APIError, AuthError, ConfigError, RequestError
from photonctl.http import PhotonTransport
from photonctl.services import (
    DeploymentsService,
    InfrastructureService,
    NetworksService,
    ProjectsService,
    SystemService,
    TasksService,
    TenantsService,
    VmsService,
    ZonesService,
)
from photonctl.settings import RuntimeSettings

JsonObject = dict[str, Any]
RequestParams = Mapping[str, str | int | float | bool]

logger = logging.getLogger(LOGGER_NAME)


def _secret_to_str(value: object) -> str | None:
    if value is None:
        return None
    getter = getattr(value, "get_secret_value", None)
    if callable(getter):
        secret = getter()
        return str(secret) if secret else None
    raw = str(value)
    return raw if raw else None


class AsyncPhotonClient:
    """Async client for one control plane target.

    Every command builds its own instance and closes it when done; nothing is
    shared between invocations.
    """

    def __init__(
        self,
        config: ConfigInput | None = None,
        *,
        config_path: str | Path | None = None,
        profile: str | None = None,
        target: str | None = None,
        auth_url: str | None = None,
        access_token: str | None = None,
        refresh_token: str | None = None,
        tenant: str | None = None,
        project: str | None = None,
        request_timeout_seconds: float | None = None,
        verify_ssl: bool | None = None,
        retries: RetryConfig | None = None,
        task_poll: TaskPollConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._runtime = RuntimeSettings()
        resolved = load_config(config, config_path=config_path)
        self._resolved_config = resolved
        self.config: SDKConfig = resolved.data

        self._profile_name, resolved_profile = self._resolve_profile(profile=profile)

        self.target = target or self._runtime.target or resolved_profile.target
        self.auth_url = auth_url or self._runtime.auth_url or resolved_profile.auth_url
        self._access_token = (
            access_token
            or _secret_to_str(self._runtime.access_token)
            or _secret_to_str(resolved_profile.access_token)
        )
        self.refresh_token = (
            refresh_token
            or _secret_to_str(self._runtime.refresh_token)
            or _secret_to_str(resolved_profile.refresh_token)
        )
        self.tenant = tenant or self._runtime.tenant or resolved_profile.tenant
        self.project = project or self._runtime.project or resolved_profile.project

        self.request_timeout_seconds = (
            request_timeout_seconds
            if request_timeout_seconds is not None
            else (
                self._runtime.request_timeout_seconds
                if self._runtime.request_timeout_seconds is not None
                else resolved_profile.request_timeout_seconds
            )
        )
        self.verify_ssl = (
            verify_ssl
            if verify_ssl is not None
            else (self._runtime.verify_ssl if self._runtime.verify_ssl is not None else resolved_profile.verify_ssl)
        )

        effective_retry = retries or resolved_profile.retry or self.config.retry
        if retries is None and self._runtime.max_retries is not None:
            effective_retry = effective_retry.model_copy(update={"max_attempts": self._runtime.max_retries + 1})

        poll = task_poll or resolved_profile.task_poll or self.config.task_poll
        overrides: dict[str, float] = {}
        if task_poll is None and self._runtime.poll_interval is not None:
            overrides["interval"] = self._runtime.poll_interval
        if task_poll is None and self._runtime.poll_timeout is not None:
            overrides["timeout"] = self._runtime.poll_timeout
        self.task_poll: TaskPollConfig = poll.model_copy(update=overrides) if overrides else poll

        self._token_lock = asyncio.Lock()
        self._transport = PhotonTransport(
            base_url=self.target,
            timeout=self.request_timeout_seconds,
            verify_tls=self.verify_ssl,
            retry_config=effective_retry,
            token_provider=self.authenticate,
            http_client=http_client,
        )

        self._tenant_ids: dict[str, str] = {}
        self._project_ids: dict[tuple[str, str], str] = {}

        self._deployments: DeploymentsService | None = None
        self._system: SystemService | None = None
        self._networks: NetworksService | None = None
        self._tasks: TasksService | None = None
        self._zones: ZonesService | None = None
        self._infrastructure: InfrastructureService | None = None
        self._vms: VmsService | None = None
        self._tenants: TenantsService | None = None
        self._projects: ProjectsService | None = None

    def _resolve_profile(self, *, profile: str | None) -> tuple[str, ProfileConfig]:
        selected = (
            profile
            or self._runtime.profile
            or self.config.active_profile
            or self.config.default_profile
            or "default"
        )

        profile_config = self.config.profiles.get(selected)
        if profile_config is None:
            if selected != "default" and (profile is not None or self._runtime.profile is not None):
                raise ConfigError(f"profile '{selected}' not found")
            profile_config = ProfileConfig()

        return selected, profile_config

    @property
    def profile_name(self) -> str:
        return self._profile_name

    @property
    def access_token(self) -> str | None:
        return self._access_token

    @property
    def deployments(self) -> DeploymentsService:
        if self._deployments is None:
            self._deployments = DeploymentsService(self)
        return self._deployments

    @property
    def system(self) -> SystemService:
        if self._system is None:
            self._system = SystemService(self)
        return self._system

    @property
    def networks(self) -> NetworksService:
        if self._networks is None:
            self._networks = NetworksService(self)
        return self._networks

    @property
    def tasks(self) -> TasksService:
        if self._tasks is None:
            self._tasks = TasksService(self)
        return self._tasks

    @property
    def zones(self) -> ZonesService:
        if self._zones is None:
            self._zones = ZonesService(self)
        return self._zones

    @property
    def infrastructure(self) -> InfrastructureService:
        if self._infrastructure is None:
            self._infrastructure = InfrastructureService(self)
        return self._infrastructure

    @property
    def vms(self) -> VmsService:
        if self._vms is None:
            self._vms = VmsService(self)
        return self._vms

    @property
    def tenants(self) -> TenantsService:
        if self._tenants is None:
            self._tenants = TenantsService(self)
        return self._tenants

    @property
    def projects(self) -> ProjectsService:
        if self._projects is None:
            self._projects = ProjectsService(self)
        return self._projects

    async def __aenter__(self) -> AsyncPhotonClient:
        return self

    async def __aexit__(self, exc_type: object, exc: object, tb: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    async def authenticate(self, force_refresh: bool = False) -> str | None:
        """Return the bearer token to send, refreshing it when it has expired.

        Targets without auth have no token at all; requests then go out
        without an Authorization header.
        """

        async with self._token_lock:
            if not self.refresh_token or not self.auth_url:
                if force_refresh and self._access_token:
                    raise AuthError("access token was rejected and no refresh token is configured")
                return self._access_token

            if not force_refresh and self._access_token and not is_token_expired(self._access_token):
                return self._access_token

            token_url = f"{self.auth_url.rstrip('/')}{TOKEN_PATH}"
            payload = {
                "grant_type": "refresh_token",
                "refresh_token": self.refresh_token,
                "scope": "openid offline_access rs_esxcloud at_groups",
            }
            logger.debug("refreshing access token via %s", token_url)
            try:
                decoded = await self._transport.request_json(
                    "POST",
                    token_url,
                    form_data=payload,
                    content_type="application/x-www-form-urlencoded",
                    authenticated=False,
                    idempotent=True,
                )
            except (APIError, RequestError) as exc:
                raise AuthError(f"authentication request failed: {exc}") from exc

            token = decoded.get("access_token")
            if not isinstance(token, str) or not token:
                raise AuthError("authentication response missing access_token")

            self._access_token = token
            return token

    async def _request_json(
        self,
        method: str,
        path: str,
        *,
        params: RequestParams | None = None,
        json_data: Mapping[str, Any] | None = None,
        content_type: str = "application/json",
        authenticated: bool = True,
    ) -> JsonObject:
        return await self._transport.request_json(
            method,
            path,
            params=params,
            json_data=json_data,
            content_type=content_type,
            authenticated=authenticated,
        )

    async def resolve_tenant_id(self, tenant: str | None = None) -> str:
        """Resolve a tenant name (or the profile default) to its id."""

        name = tenant or self.tenant
        if not name:
            raise ConfigError("tenant is required; pass --tenant or set one in the profile")
        cached = self._tenant_ids.get(name)
        if cached:
            return cached
        found = await self.tenants.find(name)
        self._tenant_ids[name] = found.id
        return found.id

    async def resolve_project_id(self, project: str | None = None, *, tenant: str | None = None) -> str:
        name = project or self.project
        if not name:
            raise ConfigError("project is required; pass --project or set one in the profile")
        tenant_id = await self.resolve_tenant_id(tenant)
        key = (tenant_id, name)
        cached = self._project_ids.get(key)
        if cached:
            return cached
        found = await self.projects.find(tenant_id, name)
        self._project_ids[key] = found.id
        return found.id


@asynccontextmanager
async def connect(*args: Any, **kwargs: Any):
    client = AsyncPhotonClient(*args, **kwargs)
    try:
        yield client
    finally:
        await client.aclose()
