from __future__ import annotations

import json
import stat
from pathlib import Path

import pytest
import yaml
from pydantic import SecretStr

from photonctl.config import ProfileConfig, ProfileManager, SDKConfig, save_config
from photonctl.config.loader import default_config_candidates, legacy_config_path, load_config
from photonctl.errors import ConfigError


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("PHOTON_CONFIG", raising=False)
    monkeypatch.delenv("PHOTON_CONFIG_FILE", raising=False)
    return home


def test_runtime_dict_precedence_over_paths(tmp_path: Path) -> None:
    path = tmp_path / "config.yml"
    path.write_text(
        yaml.safe_dump({"default_profile": "file", "profiles": {"file": {"target": "https://file.example"}}}),
        encoding="utf-8",
    )

    cfg = load_config(
        {"default_profile": "runtime", "profiles": {"runtime": {"target": "https://runtime.example"}}},
        config_path=path,
    )

    assert cfg.source == "runtime-dict"
    assert cfg.data.default_profile == "runtime"


def test_explicit_path_precedence_over_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_path = tmp_path / "env.json"
    env_path.write_text(
        json.dumps({"default_profile": "env", "profiles": {"env": {"target": "https://env.example"}}}),
        encoding="utf-8",
    )

    explicit_path = tmp_path / "explicit.toml"
    explicit_path.write_text(
        'default_profile = "explicit"\n[profiles.explicit]\ntarget = "https://explicit.example"\n',
        encoding="utf-8",
    )

    monkeypatch.setenv("PHOTON_CONFIG", str(env_path))
    cfg = load_config(config_path=explicit_path)

    assert cfg.source == "explicit-path"
    assert cfg.data.profiles["explicit"].target == "https://explicit.example"


def test_env_fallback(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_path = tmp_path / "env.yml"
    env_path.write_text(
        yaml.safe_dump({"default_profile": "env", "profiles": {"env": {"endpoint": "https://env.example"}}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("PHOTON_CONFIG", str(env_path))

    cfg = load_config()
    assert cfg.source.startswith("env:")
    assert cfg.data.profiles["env"].target == "https://env.example"


def test_missing_explicit_path_yields_empty_config(tmp_path: Path) -> None:
    cfg = load_config(config_path=tmp_path / "nope.yml")
    assert cfg.source == "explicit-path-missing"
    assert cfg.data.profiles == {}


def test_unparsable_file_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="failed to parse config file"):
        load_config(config_path=path)


def test_legacy_flat_schema_normalized_to_default_profile() -> None:
    cfg = SDKConfig.model_validate(
        {
            "CloudTarget": "https://legacy.example:9000",
            "Token": "legacy-token",
            "IgnoreCertificate": True,
            "Tenant": {"Name": "acme", "ID": "tenant-1"},
            "Project": {"Name": "web", "ID": "project-1"},
        }
    )
    profile = cfg.profiles["default"]
    assert cfg.default_profile == "default"
    assert profile.target == "https://legacy.example:9000"
    assert profile.access_token is not None
    assert profile.access_token.get_secret_value() == "legacy-token"
    assert profile.verify_ssl is False
    assert profile.tenant == "acme"
    assert profile.project == "web"


def test_save_extensionless_defaults_to_yaml_and_keeps_secrets(tmp_path: Path) -> None:
    config_path = tmp_path / ".photonctl"
    cfg = SDKConfig(
        default_profile="prod",
        profiles={"prod": ProfileConfig(target="https://prod.example", refresh_token=SecretStr("token-123"))},
    )
    save_config(cfg, path=config_path)

    rendered = config_path.read_text(encoding="utf-8")
    assert "default_profile: prod" in rendered
    assert "token-123" in rendered
    assert stat.S_IMODE(config_path.stat().st_mode) == 0o600

    loaded = load_config(config_path=config_path)
    assert loaded.data.default_profile == "prod"
    refresh = loaded.data.profiles["prod"].refresh_token
    assert refresh is not None and refresh.get_secret_value() == "token-123"


def test_legacy_path_is_migrated_to_new_default() -> None:
    legacy = legacy_config_path()
    legacy.parent.mkdir(parents=True, exist_ok=True)
    legacy.write_text(
        json.dumps({"CloudTarget": "https://legacy.example", "Tenant": {"Name": "acme", "ID": "t-1"}}),
        encoding="utf-8",
    )

    resolved = load_config()
    assert resolved.source == "legacy-migrated"
    assert resolved.data.profiles["default"].target == "https://legacy.example"
    assert resolved.data.profiles["default"].tenant == "acme"
    assert default_config_candidates()[0].exists()

    again = load_config()
    assert again.source == "default-path"


def test_profile_manager_round_trip(tmp_path: Path) -> None:
    manager = ProfileManager(tmp_path / "config.yml")
    manager.upsert_profile("lab", ProfileConfig(target="https://lab.example", tenant="acme", project="web"))
    manager.upsert_profile("prod", ProfileConfig(target="https://prod.example"))

    assert manager.list_profiles() == ["lab", "prod"]
    assert manager.load().active_profile == "lab"

    manager.set_active_profile("prod")
    assert manager.get_profile().target == "https://prod.example"

    updated = manager.set_tenant("other", profile="lab")
    assert updated.tenant == "other"
    assert updated.project is None
    assert manager.set_project("db", profile="lab").project == "db"

    manager.delete_profile("prod")
    assert manager.list_profiles() == ["lab"]
    assert manager.load().active_profile == "lab"

    with pytest.raises(ConfigError, match="not found"):
        manager.get_profile("prod")


def test_runtime_model_is_used_as_is() -> None:
    model = SDKConfig(default_profile="lab", profiles={"lab": ProfileConfig(target="https://lab.example")})
    cfg = load_config(model)
    assert cfg.source == "runtime-model"
    assert cfg.data is model


def test_missing_env_path_yields_empty_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PHOTON_CONFIG", str(tmp_path / "absent.yml"))
    cfg = load_config()
    assert cfg.source == "env:PHOTON_CONFIG-missing"
    assert cfg.data.profiles == {}


def test_legacy_config_is_left_alone_when_a_default_exists() -> None:
    default = default_config_candidates()[0]
    save_config(SDKConfig(default_profile="new", profiles={"new": ProfileConfig()}), path=default)
    legacy = legacy_config_path()
    legacy.parent.mkdir(parents=True, exist_ok=True)
    legacy.write_text(json.dumps({"CloudTarget": "https://legacy.example"}), encoding="utf-8")

    resolved = load_config()
    assert resolved.source == "default-path"
    assert resolved.data.default_profile == "new"
