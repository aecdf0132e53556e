"""
Response body decoding.

Bodies are validated against the expected shape in strict mode: a number sent
as a string, or a missing required field, is an error rather than a coercion.
"""

import logging
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter, ValidationError

from ..exceptions import DecodeError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def decode(raw: bytes, shape: Any) -> Any:
    """
    Decode a JSON body into ``shape``.

    Args:
        raw: Response body bytes
        shape: Target type, e.g. ``list[ServiceEntry]``

    Returns:
        The validated value

    Raises:
        DecodeError: If the body is not valid JSON or does not match the shape
    """
    try:
        return _adapter(shape).validate_json(raw, strict=True)
    except ValidationError as e:
        logger.debug(f"Failed to decode {len(raw)} bytes as {shape}: {e.error_count()} errors")
        raise DecodeError(f"could not decode response as {shape}: {e}", raw=raw) from e
