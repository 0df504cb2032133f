from __future__ import annotations

VERSION = "0.4.0"

DEFAULT_TARGET = "http://localhost:9000"
DEFAULT_CONFIG_DIR = "~/.config/photonctl"
DEFAULT_LEGACY_CONFIG_FILE = "~/.photon-cli/.photon-config"

API_ROOT = "/v1"
TOKEN_PATH = "/openidconnect/token"

LOGGER_NAME = "photonctl"

# Task polling defaults: 500ms between fetches, 30 minute overall budget.
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_POLL_TIMEOUT = 1800.0
DEFAULT_POLL_MAX_CONSECUTIVE_ERRORS = 3
