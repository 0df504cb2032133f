from __future__ import annotations

import math
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, SecretStr, model_validator

from photonctl.constants import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_POLL_MAX_CONSECUTIVE_ERRORS,
    DEFAULT_POLL_TIMEOUT,
    DEFAULT_TARGET,
)


class RetryConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_attempts: int = 4
    base_delay: float = 0.2
    max_delay: float = 2.5
    jitter: float = 0.2
    retry_statuses: list[int] = Field(default_factory=lambda: [429, 500, 502, 503, 504])


class TaskPollConfig(BaseModel):
    """Bounds for waiting on asynchronous tasks."""

    model_config = ConfigDict(extra="forbid")

    interval: float = Field(default=DEFAULT_POLL_INTERVAL, ge=0)
    timeout: float = Field(default=DEFAULT_POLL_TIMEOUT, gt=0)
    max_attempts: int | None = Field(default=None, ge=1)
    max_consecutive_errors: int = Field(default=DEFAULT_POLL_MAX_CONSECUTIVE_ERRORS, ge=0)

    @property
    def attempt_budget(self) -> int:
        if self.max_attempts is not None:
            return self.max_attempts
        # A zero interval still gets the budget of the default cadence.
        step = self.interval if self.interval > 0 else DEFAULT_POLL_INTERVAL
        return max(1, math.ceil(self.timeout / step))


class ProfileConfig(BaseModel):
    """Connection settings for one control plane."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    target: str = Field(
        default=DEFAULT_TARGET,
        validation_alias=AliasChoices("target", "endpoint", "base_url", "baseUrl"),
    )
    auth_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("auth_url", "authUrl", "lightwave_url"),
    )
    access_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("access_token", "accessToken", "token"),
    )
    refresh_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("refresh_token", "refreshToken"),
    )
    tenant: str | None = Field(default=None, validation_alias=AliasChoices("tenant", "tenant_name"))
    project: str | None = Field(default=None, validation_alias=AliasChoices("project", "project_name"))
    request_timeout_seconds: float = Field(
        default=30.0,
        validation_alias=AliasChoices("request_timeout_seconds", "requestTimeoutSeconds"),
    )
    verify_ssl: bool = Field(default=True, validation_alias=AliasChoices("verify_ssl", "verifySsl"))

    retry: RetryConfig | None = None
    task_poll: TaskPollConfig | None = None


class SDKConfig(BaseModel):
    """Root configuration model with profile-aware and legacy-compatible shape."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    version: str = "2"
    default_profile: str | None = None
    active_profile: str | None = Field(
        default=None,
        validation_alias=AliasChoices("active_profile", "activeProfile"),
    )
    profiles: dict[str, ProfileConfig] = Field(default_factory=dict)

    retry: RetryConfig = Field(default_factory=RetryConfig)
    task_poll: TaskPollConfig = Field(default_factory=TaskPollConfig)

    @model_validator(mode="before")
    @classmethod
    def normalize_legacy_schema(cls, data: object) -> object:
        # .photon-config holds one flat target: CloudTarget, Token, IgnoreCertificate, Tenant{Name,ID}, Project{Name,ID}
        if not isinstance(data, Mapping):
            return data

        data_dict = dict(data)
        if isinstance(data_dict.get("profiles"), Mapping):
            if "active_profile" not in data_dict and "activeProfile" in data_dict:
                data_dict["active_profile"] = data_dict.get("activeProfile")
            return data_dict

        legacy_map = {
            "cloudtarget": "target",
            "target": "target",
            "endpoint": "target",
            "token": "access_token",
            "access_token": "access_token",
            "refresh_token": "refresh_token",
            "auth_url": "auth_url",
            "tenant": "tenant",
            "project": "project",
            "verify_ssl": "verify_ssl",
        }
        lowered = {str(key).lower(): value for key, value in data_dict.items()}
        if not any(key in lowered for key in (*legacy_map, "ignorecertificate")):
            return data_dict

        profile: dict[str, Any] = {}
        for key, value in lowered.items():
            mapped = legacy_map.get(key)
            if mapped is None or value in (None, ""):
                continue
            if isinstance(value, Mapping):
                value = value.get("Name") or value.get("name")
                if not value:
                    continue
            profile[mapped] = value
        if "ignorecertificate" in lowered:
            profile["verify_ssl"] = not bool(lowered["ignorecertificate"])

        return {
            "version": "1",
            "active_profile": "default",
            "default_profile": "default",
            "profiles": {"default": profile},
        }


class ResolvedConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    source: str
    path: Path | None = None
    data: SDKConfig


ConfigInput = SDKConfig | dict[str, Any]
