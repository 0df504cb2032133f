from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import tomli_w
import yaml

from photonctl.config.models import ConfigInput, ResolvedConfig, SDKConfig
from photonctl.constants import DEFAULT_CONFIG_DIR, DEFAULT_LEGACY_CONFIG_FILE
from photonctl.errors import ConfigError

CONFIG_PATH_ENVS = ("PHOTON_CONFIG", "PHOTON_CONFIG_FILE")

_DECODERS: dict[str, Callable[[str], Any]] = {
    ".yml": yaml.safe_load,
    ".yaml": yaml.safe_load,
    ".json": json.loads,
    ".toml": tomllib.loads,
}

# The legacy .photon-config is JSON; hand-written extensionless files are usually YAML.
_EXTENSIONLESS_ORDER = (json.loads, yaml.safe_load, tomllib.loads)


def default_config_candidates() -> list[Path]:
    base = Path(DEFAULT_CONFIG_DIR).expanduser()
    return [base / f"config{suffix}" for suffix in (".yml", ".yaml", ".toml", ".json")]


def legacy_config_path() -> Path:
    return Path(DEFAULT_LEGACY_CONFIG_FILE).expanduser()


def _decode(raw: str, suffix: str) -> dict[str, Any]:
    decoder = _DECODERS.get(suffix)
    if decoder is not None:
        parsed = decoder(raw)
    else:
        for candidate in _EXTENSIONLESS_ORDER:
            try:
                parsed = candidate(raw)
                break
            except (ValueError, yaml.YAMLError):
                continue
        else:
            raise ConfigError("failed to auto-detect config format (expected yaml/json/toml)")

    parsed = parsed or {}
    if not isinstance(parsed, dict):
        raise ConfigError("config must decode to an object/map")
    return parsed


def _read(path: Path, *, source: str) -> ResolvedConfig:
    try:
        payload = _decode(path.read_text(encoding="utf-8"), path.suffix.lower())
    except (OSError, ValueError, yaml.YAMLError) as exc:
        raise ConfigError(f"failed to parse config file '{path}': {exc}") from exc

    try:
        data = SDKConfig.model_validate(payload)
    except ValueError as exc:
        raise ConfigError(f"invalid config structure for '{path}': {exc}") from exc
    return ResolvedConfig(source=source, path=path, data=data)


def _read_or_empty(path: Path, *, source: str) -> ResolvedConfig:
    path = path.expanduser().resolve()
    if not path.exists():
        return ResolvedConfig(source=f"{source}-missing", path=path, data=SDKConfig())
    return _read(path, source=source)


def load_config(config: ConfigInput | None = None, *, config_path: str | Path | None = None) -> ResolvedConfig:
    """Load and validate configuration.

    Precedence: runtime object/dict, explicit path, ``PHOTON_CONFIG``, the
    default candidates under ``~/.config/photonctl``, then the legacy
    ``~/.photon-cli/.photon-config`` which is migrated on first read.
    """

    if isinstance(config, SDKConfig):
        return ResolvedConfig(source="runtime-model", data=config)
    if config is not None:
        try:
            return ResolvedConfig(source="runtime-dict", data=SDKConfig.model_validate(config))
        except ValueError as exc:
            raise ConfigError(f"invalid runtime config: {exc}") from exc

    if config_path is not None:
        return _read_or_empty(Path(config_path), source="explicit-path")

    for env_name in CONFIG_PATH_ENVS:
        env_path = os.getenv(env_name)
        if env_path:
            return _read_or_empty(Path(env_path), source=f"env:{env_name}")

    for candidate in default_config_candidates():
        if candidate.exists():
            return _read(candidate.resolve(), source="default-path")

    legacy = legacy_config_path()
    if legacy.exists():
        migrated = _read(legacy.resolve(), source="legacy-path").data
        return ResolvedConfig(source="legacy-migrated", path=save_config(migrated), data=migrated)

    return ResolvedConfig(source="default-empty", path=default_config_candidates()[0], data=SDKConfig())


def save_config(config: SDKConfig, *, path: Path | None = None) -> Path:
    """Write ``config`` (owner-only) in the format its extension names; YAML when it has none."""

    target = (path or default_config_candidates()[0]).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    suffix = target.suffix.lower()

    payload = config.model_dump(mode="json", by_alias=True, exclude_none=True)
    # SecretStr dumps as a mask in json mode; persist the real token values.
    for name, profile in config.profiles.items():
        for key in ("access_token", "refresh_token"):
            secret = getattr(profile, key)
            if secret is not None:
                payload["profiles"][name][key] = secret.get_secret_value()

    if suffix in {"", ".yaml", ".yml"}:
        rendered = yaml.safe_dump(payload, sort_keys=False)
    elif suffix == ".json":
        rendered = json.dumps(payload, indent=2) + "\n"
    elif suffix == ".toml":
        rendered = tomli_w.dumps(payload)
    else:
        raise ConfigError(f"unsupported config extension: {suffix}")

    target.write_text(rendered, encoding="utf-8")
    target.chmod(0o600)
    return target.resolve()
