"""
Client settings — JSON file at ~/.trustly/config.json, overridable via TRUSTLY_* env vars.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ValidationError

from trustly_client.errors import ConfigurationError

API_URL = "https://api.trustly.com/1"
TEST_API_URL = "https://test.trustly.com/api/1"

CONFIG_DIR = Path.home() / ".trustly"
CONFIG_FILE = CONFIG_DIR / "config.json"

ENV_OVERRIDES = {
    "TRUSTLY_URL": "url",
    "TRUSTLY_USERNAME": "username",
    "TRUSTLY_PASSWORD": "password",
    "TRUSTLY_PRIVATE_KEY": "private_key",
    "TRUSTLY_PUBLIC_KEY": "public_key",
    "TRUSTLY_KEY_DIR": "key_dir",
    "TRUSTLY_DATABASE": "database",
}


class Settings(BaseModel):
    url: str = API_URL
    username: str = ""
    password: str = ""
    private_key: str = "merchant_private.pem"
    public_key: str = "trustly_public.pem"
    key_dir: str = str(CONFIG_DIR)
    connect_timeout: float = 5.0
    timeout: float = 30.0
    database: str = str(CONFIG_DIR / "notifications.db")


def load_settings(path: Optional[Union[str, Path]] = None, environ: Optional[dict[str, str]] = None) -> Settings:
    config_file = Path(path).expanduser() if path is not None else CONFIG_FILE
    environ = os.environ if environ is None else environ

    values: dict[str, Any] = {}
    try:
        values = json.loads(config_file.read_text())
    except FileNotFoundError:
        if path is not None:
            raise ConfigurationError(f"Config file not found: {config_file}", {"path": str(config_file)})
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read config file {config_file}: {e}", {"path": str(config_file)}) from e
    if not isinstance(values, dict):
        raise ConfigurationError(f"Config file {config_file} must hold a JSON object")

    for env_name, field in ENV_OVERRIDES.items():
        if environ.get(env_name):
            values[field] = environ[env_name]

    try:
        return Settings.model_validate(values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
