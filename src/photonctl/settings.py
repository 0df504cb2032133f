from __future__ import annotations

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class RuntimeSettings(BaseSettings):
    """Environment-driven runtime overrides for client/profile resolution."""

    model_config = SettingsConfigDict(
        env_prefix="PHOTON_",
        extra="ignore",
        populate_by_name=True,
        case_sensitive=False,
    )

    profile: str | None = Field(default=None, validation_alias=AliasChoices("PHOTON_PROFILE"))

    target: str | None = Field(
        default=None,
        validation_alias=AliasChoices("PHOTON_TARGET", "PHOTON_ENDPOINT", "PHOTON_BASE_URL"),
    )
    auth_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("PHOTON_AUTH_URL", "PHOTON_LIGHTWAVE_URL"),
    )
    access_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("PHOTON_ACCESS_TOKEN", "PHOTON_TOKEN"),
    )
    refresh_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("PHOTON_REFRESH_TOKEN"),
    )

    tenant: str | None = Field(default=None, validation_alias=AliasChoices("PHOTON_TENANT"))
    project: str | None = Field(default=None, validation_alias=AliasChoices("PHOTON_PROJECT"))

    request_timeout_seconds: float | None = Field(
        default=None,
        validation_alias=AliasChoices("PHOTON_REQUEST_TIMEOUT_SECONDS", "PHOTON_REQUEST_TIMEOUT"),
    )
    max_retries: int | None = Field(default=None, validation_alias=AliasChoices("PHOTON_MAX_RETRIES"))
    verify_ssl: bool | None = Field(default=None, validation_alias=AliasChoices("PHOTON_VERIFY_SSL"))

    poll_interval: float | None = Field(default=None, validation_alias=AliasChoices("PHOTON_POLL_INTERVAL"))
    poll_timeout: float | None = Field(default=None, validation_alias=AliasChoices("PHOTON_POLL_TIMEOUT"))

