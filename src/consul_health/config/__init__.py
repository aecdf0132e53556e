"""Client configuration."""

from .settings import ClientConfig, ClientSettings, get_config, reload_config
