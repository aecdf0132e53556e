"""
Pytest configuration and shared fixtures for consul-health tests.

Provides agent response fixtures and an in-memory transport that records the
requests made through it.
"""

import json
import os
from collections.abc import Generator
from typing import Any

import pytest
from requests.structures import CaseInsensitiveDict

from consul_health.registry import Client
from consul_health.utils.http_client import TransportResponse


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def make_response(
    body: Any = b"[]", index: int | str | None = None, status_code: int = 200
) -> TransportResponse:
    """Build a transport response; non-bytes bodies are JSON encoded."""
    if not isinstance(body, bytes):
        body = json.dumps(body).encode()
    headers = CaseInsensitiveDict({"Content-Type": "application/json"})
    if index is not None:
        headers["X-Consul-Index"] = str(index)
    return TransportResponse(status_code=status_code, headers=headers, body=body)


class FakeTransport:
    """Blocking transport returning queued responses and recording calls."""

    def __init__(self, *responses: TransportResponse):
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def queue(self, response: TransportResponse):
        self.responses.append(response)

    def get(self, path, params=None, timeout=None):
        self.calls.append({"path": path, "params": params, "timeout": timeout})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        self.closed = True

    @property
    def last_call(self) -> dict[str, Any]:
        return self.calls[-1]


class FakeAsyncTransport(FakeTransport):
    """asyncio flavour of FakeTransport."""

    async def get(self, path, params=None, timeout=None):
        return FakeTransport.get(self, path, params=params, timeout=timeout)

    async def close(self):
        self.closed = True


# Environment fixture
@pytest.fixture
def clean_env() -> Generator[dict[str, str], None, None]:
    """Provide an environment without CONSUL_HEALTH_* overrides."""
    original_env = os.environ.copy()
    for var in list(os.environ):
        if var.startswith("CONSUL_HEALTH_"):
            os.environ.pop(var, None)

    yield os.environ

    os.environ.clear()
    os.environ.update(original_env)


# Agent payload fixtures
@pytest.fixture
def health_check_data() -> dict[str, Any]:
    """A single health check as the agent returns it."""
    return {
        "Node": "foobar",
        "CheckID": "service:redis",
        "Name": "Service 'redis' check",
        "Status": "passing",
        "Notes": "",
        "Output": "TCP connect 10.1.10.12:6379: Success",
        "ServiceID": "redis",
        "ServiceName": "redis",
        "ServiceTags": ["primary"],
        "Definition": {
            "TCP": "10.1.10.12:6379",
            "Interval": "10s",
            "Timeout": "1s",
            "DeregisterCriticalServiceAfter": "30m",
        },
        "CreateIndex": 10,
        "ModifyIndex": 12,
    }


@pytest.fixture
def service_entries_data() -> list[dict[str, Any]]:
    """Two instances of the ``web`` service."""
    return [
        {
            "Node": {
                "ID": "40e4a748-2192-161a-0510-9bf59fe950b5",
                "Node": "node-1",
                "Address": "10.1.10.12",
                "Datacenter": "dc1",
                "TaggedAddresses": {"lan": "10.1.10.12", "wan": "10.1.10.12"},
                "Meta": {"instance_type": "t2.medium"},
                "CreateIndex": 5,
                "ModifyIndex": 5,
            },
            "Service": {
                "ID": "web-1",
                "Service": "web",
                "Tags": ["primary", "v1"],
                "Address": "10.1.10.12",
                "Port": 8000,
                "Meta": {"version": "1.0"},
                "EnableTagOverride": False,
                "CreateIndex": 7,
                "ModifyIndex": 7,
            },
            "Checks": [
                {
                    "Node": "node-1",
                    "CheckID": "service:web-1",
                    "Name": "Service 'web' check",
                    "Status": "passing",
                    "Notes": "",
                    "Output": "HTTP GET http://10.1.10.12:8000/health: 200 OK",
                    "ServiceID": "web-1",
                    "ServiceName": "web",
                    "ServiceTags": ["primary", "v1"],
                    "Definition": {
                        "HTTP": "http://10.1.10.12:8000/health",
                        "Header": {"X-Probe": ["consul"]},
                        "Method": "GET",
                        "TLSSkipVerify": False,
                        "Interval": "10s",
                        "Timeout": "2s",
                    },
                    "CreateIndex": 8,
                    "ModifyIndex": 9,
                },
                {
                    "Node": "node-1",
                    "CheckID": "serfHealth",
                    "Name": "Serf Health Status",
                    "Status": "passing",
                    "Notes": "",
                    "Output": "Agent alive and reachable",
                    "ServiceID": "",
                    "ServiceName": "",
                    "ServiceTags": None,
                    "CreateIndex": 5,
                    "ModifyIndex": 5,
                },
            ],
        },
        {
            "Node": {
                "Node": "node-2",
                "Address": "10.1.10.13",
            },
            "Service": {
                "ID": "web-2",
                "Service": "web",
                "Tags": None,
                "Address": "",
                "Port": 8000,
            },
            "Checks": [
                {
                    "Node": "node-2",
                    "CheckID": "service:web-2",
                    "Name": "Service 'web' check",
                    "Status": "critical",
                    "Output": "HTTP GET http://10.1.10.13:8000/health: 503",
                    "ServiceID": "web-2",
                    "ServiceName": "web",
                    "ServiceTags": [],
                    "CreateIndex": 11,
                    "ModifyIndex": 14,
                },
            ],
        },
    ]


@pytest.fixture
def catalog_service_data() -> list[dict[str, Any]]:
    """Catalog rows for the ``web`` service."""
    return [
        {
            "ID": "40e4a748-2192-161a-0510-9bf59fe950b5",
            "Node": "node-1",
            "Address": "10.1.10.12",
            "Datacenter": "dc1",
            "ServiceID": "web-1",
            "ServiceName": "web",
            "ServiceAddress": "",
            "ServicePort": 8000,
            "ServiceTags": ["primary"],
            "ServiceMeta": {"version": "1.0"},
            "CreateIndex": 7,
            "ModifyIndex": 7,
        }
    ]


# Client fixtures
@pytest.fixture
def transport() -> FakeTransport:
    """An empty fake transport; queue responses in the test."""
    return FakeTransport()


@pytest.fixture
def client(transport) -> Client:
    """Client wired to the fake transport, no default datacenter."""
    return Client(address="http://consul.test:8500", transport=transport)


@pytest.fixture
def dc_client(transport) -> Client:
    """Client wired to the fake transport with a default datacenter."""
    return Client(address="http://consul.test:8500", datacenter="dc-default", transport=transport)


@pytest.fixture
def response_factory():
    """The make_response helper, for building agent responses in tests."""
    return make_response


@pytest.fixture
def async_transport() -> FakeAsyncTransport:
    """An empty fake asyncio transport."""
    return FakeAsyncTransport()
