"""
Configuration management for the Consul health client.

Uses dynaconf for layered configuration: bundled YAML defaults, optional local
YAML overrides and CONSUL_HEALTH_* environment variables.
"""

import logging
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlsplit

from dynaconf import Dynaconf, ValidationError as SettingsValidationError, Validator
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).parent
DEFAULT_ADDRESS = "http://127.0.0.1:8500"

settings = Dynaconf(
    envvar_prefix="CONSUL_HEALTH",
    settings_files=[
        str(CONFIG_DIR / "settings.yaml"),  # Bundled defaults
        "settings.local.yaml",  # Local overrides (git-ignored)
        ".secrets.yaml",  # Token (git-ignored)
    ],
    environments=False,
    load_dotenv=True,
    merge_enabled=True,
    validators=[
        Validator("address", must_exist=True, is_type_of=str),
        Validator("timeout", gt=0),
    ],
)


class ClientConfig(BaseModel):
    """Immutable client configuration, safe to share across threads and tasks."""

    model_config = ConfigDict(frozen=True)

    address: str = DEFAULT_ADDRESS
    datacenter: str | None = None
    token: str | None = None
    timeout: float = Field(default=10.0, gt=0)
    verify: bool = True

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Require an http(s) URL with a host."""
        address = v.strip().rstrip("/")
        parts = urlsplit(address)
        if parts.scheme not in ("http", "https"):
            raise ValueError(f"address must start with http:// or https://, got {v!r}")
        if not parts.hostname:
            raise ValueError(f"address has no host: {v!r}")
        # Raises ValueError for a non-numeric or out-of-range port
        parts.port
        return address

    @classmethod
    def create(cls, **values: Any) -> "ClientConfig":
        """Build a configuration, reporting problems as ConfigError."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid client configuration: {e}") from e


class ClientSettings:
    """Wrapper exposing the dynaconf settings as a ClientConfig."""

    def __init__(self):
        self.settings = settings
        self._validate_config()

    def _validate_config(self):
        """Validate the loaded settings."""
        try:
            self.settings.validators.validate()
        except SettingsValidationError as e:
            raise ConfigError(f"Invalid settings: {e}") from e

    @property
    def address(self) -> str:
        return self.settings.get("address", DEFAULT_ADDRESS)

    @property
    def datacenter(self) -> Optional[str]:
        return self.settings.get("datacenter")

    @property
    def token(self) -> Optional[str]:
        return self.settings.get("token")

    @property
    def timeout(self) -> float:
        return float(self.settings.get("timeout", 10))

    @property
    def verify(self) -> bool:
        return bool(self.settings.get("verify", True))

    def client_config(self) -> ClientConfig:
        """Build the ClientConfig for the current settings."""
        return ClientConfig.create(
            address=self.address,
            datacenter=self.datacenter,
            token=self.token,
            timeout=self.timeout,
            verify=self.verify,
        )

    def override_from_cli(self, cli_args: dict[str, Any]):
        """Override settings with CLI arguments."""
        for key in ("address", "datacenter", "token", "timeout"):
            if cli_args.get(key) is not None:
                self.settings.set(key, cli_args[key])

        self._validate_config()


_config: ClientSettings | None = None


def get_config() -> ClientSettings:
    """Get the global settings instance."""
    global _config
    if _config is None:
        _config = ClientSettings()
    return _config


def reload_config() -> ClientSettings:
    """Reload settings from files and environment."""
    global _config
    try:
        settings.reload()
    except SettingsValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e
    _config = ClientSettings()
    logger.debug("Configuration reloaded")
    return _config
