"""
Consul Health Client

Query the health and catalog endpoints of a Consul agent, including blocking
(long-poll) queries driven by the X-Consul-Index consistency index.
"""

__version__ = "1.0.0"
__author__ = "Consul Health Team"

from .exceptions import (
    APIError,
    ConfigError,
    ConsulHealthError,
    DecodeError,
    MissingIndexError,
    TransportError,
)
from .registry import (
    AsyncClient,
    BlockingOptions,
    BlockingResponse,
    Client,
    ServiceOptions,
)
