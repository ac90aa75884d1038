"""aiohttp session management and response decoding."""

import json
from typing import Any, Optional, Union

import aiohttp

from ..exceptions import DecodeError


async def create_session(
    timeout: int = 30, connector: Optional[aiohttp.TCPConnector] = None
) -> aiohttp.ClientSession:
    """Create an aiohttp session with the client's default timeout.

    Args:
        timeout: Total request timeout in seconds
        connector: Optional aiohttp connector for connection pooling

    Returns:
        A new ClientSession; the caller owns it and must close it
    """
    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=timeout),
    )


def parse_json_response(body: Union[str, bytes]) -> Any:
    """Decode a response body as JSON.

    Registries answer with vendor media types (for example
    ``application/vnd.docker.distribution.manifest.v2+json``), so the body is
    decoded regardless of Content-Type. Raw bytes are decoded by ``json``
    itself (UTF-8/16/32).

    Raises:
        DecodeError: If the body is not valid JSON or not valid text
    """
    try:
        return json.loads(body)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError
        raise DecodeError(f"Invalid JSON response: {e}") from e


async def read_json(resp: aiohttp.ClientResponse) -> Any:
    """Read the full body of ``resp`` and decode it as JSON."""
    return parse_json_response(await resp.read())


def decode_text(body: bytes) -> str:
    """Decode a diagnostic body, replacing bytes that are not UTF-8."""
    return body.decode("utf-8", errors="replace")


async def read_text(resp: aiohttp.ClientResponse) -> str:
    """Read the full body of ``resp`` as text for error reporting."""
    return await resp.text(errors="replace")
