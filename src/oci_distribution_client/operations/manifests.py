"""Manifest retrieval."""

import asyncio
import logging
from typing import Optional

import aiohttp

from ..core.session import decode_text, parse_json_response
from ..exceptions import (
    ManifestClientError,
    ManifestServerError,
    RegistryConnectionError,
    UnexpectedStatusError,
)
from ..models import ACCEPTED_MANIFEST_TYPES, ErrorEnvelope, Manifest
from ..reference import Reference

logger = logging.getLogger(__name__)


def build_manifest_headers(authorization: Optional[str] = None) -> dict[str, str]:
    """Request headers for a manifest pull.

    Both the single-image and the list media type are advertised; the
    registry picks one. ``Authorization`` is only set when a value is given.
    """
    headers = {"Accept": ",".join(ACCEPTED_MANIFEST_TYPES)}
    if authorization is not None:
        headers["Authorization"] = authorization
    return headers


def classify_manifest_response(status: int, body: bytes, url: str) -> Manifest:
    """Turn a manifest response into a Manifest or the matching error.

    Raises:
        ManifestClientError: 4xx with a registry error envelope
        ManifestServerError: 5xx, body ignored
        UnexpectedStatusError: any other non-200 status
        DecodeError: 200 or 4xx body that does not decode
    """
    if status == 200:
        return Manifest.from_dict(parse_json_response(body))

    if 400 <= status < 500:
        envelope = ErrorEnvelope.from_dict(parse_json_response(body))
        raise ManifestClientError(envelope.errors[0], url)

    if 500 <= status < 600:
        raise ManifestServerError(url)

    raise UnexpectedStatusError(status, url, decode_text(body))


async def fetch_manifest(
    session: aiohttp.ClientSession,
    reference: Reference,
    authorization: Optional[str] = None,
    scheme: str = "https",
) -> Manifest:
    """Pull the manifest for ``reference``.

    Args:
        session: Open aiohttp session
        reference: Image reference to resolve
        authorization: ``Authorization`` value from the token store; None
            pulls anonymously
        scheme: URL scheme of the registry

    Returns:
        The decoded manifest

    Raises:
        RegistryConnectionError: If the registry cannot be reached
        ManifestError: For any non-200 classification
        DecodeError: If a body does not decode
    """
    url = reference.to_v2_manifest_url(scheme)
    headers = build_manifest_headers(authorization)

    logger.debug("GET %s (authenticated=%s)", url, authorization is not None)
    try:
        async with session.get(url, headers=headers) as resp:
            status = resp.status
            # 5xx bodies are not guaranteed to be envelopes and are not read
            body = b"" if 500 <= status < 600 else await resp.read()
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise RegistryConnectionError(f"Failed to fetch manifest {url}: {e}") from e

    logger.debug("GET %s -> %s", url, status)
    return classify_manifest_response(status, body, url)
