"""
Exception hierarchy for the Consul health client.

Every error raised by the library derives from ConsulHealthError so callers can
catch the whole family at once. Nothing here is retried internally.
"""

RAW_PREVIEW_LIMIT = 1024


class ConsulHealthError(Exception):
    """Base exception for Consul health client errors."""

    pass


class ConfigError(ConsulHealthError):
    """Malformed client configuration, raised when the client is constructed."""

    pass


class TransportError(ConsulHealthError):
    """Connection, timeout or protocol-level failure while talking to the agent."""

    def __init__(self, message: str, method: str | None = None, url: str | None = None):
        super().__init__(message)
        self.method = method
        self.url = url


class APIError(TransportError):
    """The agent answered with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: int,
        body: bytes = b"",
        method: str | None = None,
        url: str | None = None,
    ):
        super().__init__(message, method=method, url=url)
        self.status_code = status_code
        self.body = body[:RAW_PREVIEW_LIMIT]


class MissingIndexError(ConsulHealthError):
    """A blocking query response did not carry the X-Consul-Index header."""

    def __init__(self, message: str = "response is missing the X-Consul-Index header"):
        super().__init__(message)


class DecodeError(ConsulHealthError):
    """A response body or header could not be parsed into the expected shape.

    ``raw`` holds the offending bytes (truncated to RAW_PREVIEW_LIMIT). When the
    failure happens after a blocking query already extracted the new index,
    ``index`` holds it so a watch loop can still advance.
    """

    def __init__(self, message: str, raw: bytes | str = b"", index: int | None = None):
        super().__init__(message)
        if isinstance(raw, str):
            raw = raw.encode("utf-8", errors="replace")
        self.truncated = len(raw) > RAW_PREVIEW_LIMIT
        self.raw = raw[:RAW_PREVIEW_LIMIT]
        self.index = index

    def __str__(self) -> str:
        message = super().__str__()
        if self.index is not None:
            return f"{message} (index {self.index})"
        return message
