"""Transport utilities shared by the sync and async clients."""

from .http_client import AsyncHTTPClient, HTTPClient, TransportResponse
