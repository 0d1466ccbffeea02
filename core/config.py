"""Configuration models and loading."""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.crawlers import CRAWLER_USER_AGENTS, EXTENSIONS_TO_IGNORE, PRERENDER_SERVICE_URL
from core.exceptions import ConfigurationError

CONFIG_DIR = Path.home() / ".config" / "prerender-proxy"
CONFIG_FILE = CONFIG_DIR / "config.json"

ENV_SERVICE_URL = "PRERENDER_SERVICE_URL"
ENV_TOKEN = "PRERENDER_TOKEN"
ENV_USERNAME = "PRERENDER_USERNAME"
ENV_PASSWORD = "PRERENDER_PASSWORD"


class ProxySettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "127.0.0.1"
    port: int = 3000


class PrerenderSettings(BaseModel):
    """Everything the middleware reads per request. Shared, never mutated."""

    model_config = ConfigDict(frozen=True)

    crawler_user_agents: tuple[str, ...] = CRAWLER_USER_AGENTS
    extensions_to_ignore: tuple[str, ...] = EXTENSIONS_TO_IGNORE
    service_url: str = Field(default=PRERENDER_SERVICE_URL, min_length=1)
    token: str = ""
    username: str = ""
    password: str = ""
    timeout: float = Field(default=60.0, gt=0)

    @field_validator("crawler_user_agents", "extensions_to_ignore")
    @classmethod
    def _lowercase(cls, values: tuple[str, ...]) -> tuple[str, ...]:
        # An empty entry would match every request
        return tuple(value.lower() for value in values if value)

    @property
    def has_basic_auth(self) -> bool:
        return bool(self.username or self.password)


class Config(BaseModel):
    model_config = ConfigDict(frozen=True)

    proxy: ProxySettings = Field(default_factory=ProxySettings)
    prerender: PrerenderSettings = Field(default_factory=PrerenderSettings)


def environment_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Collect PRERENDER_* variables. Empty values are ignored."""
    prerender: dict[str, Any] = {}
    if environ.get(ENV_SERVICE_URL):
        prerender["service_url"] = environ[ENV_SERVICE_URL]
    if environ.get(ENV_TOKEN):
        prerender["token"] = environ[ENV_TOKEN]

    # Username and password travel together, as with ServiceAuth
    username, password = environ.get(ENV_USERNAME, ""), environ.get(ENV_PASSWORD, "")
    if username or password:
        prerender["username"] = username
        prerender["password"] = password

    return {"prerender": prerender} if prerender else {}


def load_config_file(path: Path = CONFIG_FILE) -> dict[str, Any]:
    """Read the optional JSON config file. A missing file is not an error."""
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    return data


def build_config(
    overrides: Mapping[str, Any] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    config_file: Path | None = None,
) -> Config:
    """Build the configuration: defaults, file, environment, then overrides.

    Later layers win key by key, so an explicit override replaces a value
    that came from the environment.
    """
    if environ is None:
        environ = os.environ

    merged: dict[str, Any] = {}
    if config_file is not None:
        _deep_merge(merged, load_config_file(config_file))
    _deep_merge(merged, environment_overrides(environ))
    if overrides:
        _deep_merge(merged, overrides)

    try:
        return Config.model_validate(merged)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e


def load_config() -> Config:
    """Load CLI configuration from the default file location and environment."""
    return build_config(config_file=CONFIG_FILE)


def _deep_merge(target: dict[str, Any], layer: Mapping[str, Any]) -> None:
    for key, value in layer.items():
        if isinstance(value, Mapping) and isinstance(target.get(key), dict):
            _deep_merge(target[key], value)
        elif isinstance(value, Mapping):
            target[key] = {}
            _deep_merge(target[key], value)
        else:
            target[key] = value
