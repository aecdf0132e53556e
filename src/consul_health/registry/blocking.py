"""
Blocking (long-poll) query execution.

A blocking query asks the agent to hold the request open until the state
behind an endpoint moves past the supplied index, or until the wait duration
runs out. One BlockingQuery performs exactly one such request: it does not
loop, retry or remember anything between calls. Callers feed the returned
index into the next query to keep watching.
"""

import logging
import re
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from ..exceptions import DecodeError, MissingIndexError
from ..utils.http_client import TransportResponse
from .base import MAX_QUERY_INDEX, BlockingResponse
from .decoder import decode
from .params import blocking_params, effective_wait

logger = logging.getLogger(__name__)

INDEX_HEADER = "X-Consul-Index"

# Agent-side default when no wait is requested.
DEFAULT_WAIT = timedelta(minutes=5)

_DECIMAL = re.compile(r"[0-9]+")


def parse_index(headers: Mapping[str, str]) -> int:
    """
    Extract the consistency index from response headers.

    Args:
        headers: Case-insensitive response headers

    Returns:
        The index as a non-negative integer

    Raises:
        MissingIndexError: If the header is absent
        DecodeError: If the header is not an unsigned 64-bit decimal integer
    """
    value = headers.get(INDEX_HEADER)
    if value is None:
        raise MissingIndexError()

    text = value.strip()
    if not _DECIMAL.fullmatch(text):
        raise DecodeError(f"{INDEX_HEADER} is not a decimal integer: {value!r}", raw=value)
    index = int(text)
    if index > MAX_QUERY_INDEX:
        raise DecodeError(f"{INDEX_HEADER} exceeds the unsigned 64-bit range: {value!r}", raw=value)
    return index


def blocking_timeout(wait: timedelta | None, base_timeout: float) -> float:
    """Transport timeout for a blocking call.

    The agent adds up to wait/16 of jitter to the wait, so the request must be
    allowed to outlive the wait by that much plus the ordinary timeout. The
    wait is measured as sent, so sub-second and zero waits size the timeout
    the same way the agent interprets them.
    """
    wait = effective_wait(wait)
    seconds = (wait if wait is not None else DEFAULT_WAIT).total_seconds()
    return seconds + seconds / 16 + base_timeout


class BlockingQuery:
    """One request/response cycle of a blocking query."""

    def __init__(
        self,
        path: str,
        params: dict[str, str],
        shape: Any,
        index: int,
        wait: timedelta | None = None,
        base_timeout: float = 10.0,
    ):
        self.path = path
        self.shape = shape
        self.index = index
        self.wait = effective_wait(wait)
        self.params = blocking_params(params, index, wait)
        self.timeout = blocking_timeout(wait, base_timeout)

    def run(self, transport) -> BlockingResponse:
        """Perform the query on a blocking transport."""
        response = transport.get(self.path, params=self.params, timeout=self.timeout)
        return self.complete(response)

    async def run_async(self, transport) -> BlockingResponse:
        """Perform the query on an asyncio transport."""
        response = await transport.get(self.path, params=self.params, timeout=self.timeout)
        return self.complete(response)

    def complete(self, response: TransportResponse) -> BlockingResponse:
        """Interpret the index header, then decode the body."""
        index = parse_index(response.headers)

        if index < self.index:
            # Agents may lower the index after a snapshot restore or leader change.
            logger.debug(f"{self.path}: index went backwards from {self.index} to {index}")
        elif index == self.index:
            logger.debug(f"{self.path}: wait elapsed at index {index} with no change")
        else:
            logger.debug(f"{self.path}: index advanced from {self.index} to {index}")

        try:
            body = decode(response.body, self.shape)
        except DecodeError as e:
            e.index = index
            raise
        return BlockingResponse(index=index, body=body)
