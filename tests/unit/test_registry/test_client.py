"""
Tests for client construction and configuration handling.
"""

import pytest

from consul_health.config.settings import ClientConfig
from consul_health.exceptions import ConfigError
from consul_health.registry import AsyncClient, Client
from consul_health.utils.http_client import AsyncHTTPClient, HTTPClient


class TestClientConstruction:
    """Test cases for building clients."""

    def test_defaults(self):
        client = Client()

        assert client.config.address == "http://127.0.0.1:8500"
        assert client.config.datacenter is None
        assert isinstance(client.transport, HTTPClient)
        assert client.transport.base_url == "http://127.0.0.1:8500"
        client.close()

    def test_keyword_overrides(self):
        client = Client(address="https://consul.example.com:8501/", datacenter="dc1", timeout=3)

        assert client.config.address == "https://consul.example.com:8501"
        assert client.config.datacenter == "dc1"
        assert client.transport.timeout == 3
        client.close()

    def test_config_object(self):
        config = ClientConfig(address="http://10.0.0.5:8500", token="secret")  # pragma: allowlist secret

        client = Client(config)

        assert client.config is config
        assert client.transport.session.headers["X-Consul-Token"] == "secret"
        client.close()

    def test_config_object_with_overrides(self):
        config = ClientConfig(address="http://10.0.0.5:8500", datacenter="dc1")

        client = Client(config, datacenter="dc2")

        assert client.config.address == "http://10.0.0.5:8500"
        assert client.config.datacenter == "dc2"
        assert config.datacenter == "dc1"
        client.close()

    @pytest.mark.parametrize(
        "address",
        ["consul:8500", "ftp://consul:8500", "http://", "http://consul:notaport", ""],
    )
    def test_bad_address_raises_config_error(self, address):
        """Test that an unusable base address fails at construction time."""
        with pytest.raises(ConfigError):
            Client(address=address)

    def test_bad_timeout_raises_config_error(self):
        with pytest.raises(ConfigError):
            Client(timeout=0)

    def test_wrong_config_type(self):
        with pytest.raises(ConfigError):
            Client({"address": "http://consul:8500"})

    def test_context_manager_closes_transport(self, transport):
        with Client(transport=transport) as client:
            assert client.transport is transport

        assert transport.closed is True

    def test_config_is_immutable(self):
        config = ClientConfig()

        with pytest.raises(Exception):
            config.datacenter = "dc9"

    @pytest.mark.asyncio
    async def test_async_client_defaults(self):
        client = AsyncClient(address="http://consul.test:8500")

        assert isinstance(client.transport, AsyncHTTPClient)
        assert client.transport.base_url == "http://consul.test:8500"
        await client.close()
