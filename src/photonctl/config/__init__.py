from photonctl.config.loader import (
    CONFIG_PATH_ENVS,
    default_config_candidates,
    legacy_config_path,
    load_config,
    save_config,
)
from photonctl.config.manager import ProfileManager
from photonctl.config.models import (
    ConfigInput,
    ProfileConfig,
    ResolvedConfig,
    RetryConfig,
    SDKConfig,
    TaskPollConfig,
)

__all__ = [
    "CONFIG_PATH_ENVS",
    "ConfigInput",
    "ProfileConfig",
    "ProfileManager",
    "ResolvedConfig",
    "RetryConfig",
    "SDKConfig",
    "TaskPollConfig",
    "default_config_candidates",
    "legacy_config_path",
    "load_config",
    "save_config",
]
