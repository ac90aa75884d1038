"""Registry API version check."""

import asyncio
import logging
from typing import Mapping, Optional

import aiohttp

from ..exceptions import MissingVersionHeaderError, RegistryConnectionError
from .types import RegistryConfig

logger = logging.getLogger(__name__)

API_VERSION_HEADER = "Docker-Distribution-Api-Version"


def check_api_version_header(headers: Mapping[str, str]) -> Optional[str]:
    """Return the distribution API version advertised in ``headers``."""
    return headers.get(API_VERSION_HEADER)


async def fetch_api_version(
    session: aiohttp.ClientSession, config: RegistryConfig
) -> str:
    """Ask a registry which distribution API version it speaks.

    Registries must send the header on both 200 and 401 answers, so the
    status code is not inspected. The request is always anonymous.

    Returns:
        The header value, e.g. ``registry/2.0``

    Raises:
        MissingVersionHeaderError: If the header is absent
        RegistryConnectionError: If the registry cannot be reached
    """
    url = config.api_url
    try:
        async with session.get(url) as resp:
            version = check_api_version_header(resp.headers)
            status = resp.status
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise RegistryConnectionError(f"Failed to reach {url}: {e}") from e

    logger.debug("Version check %s -> %s (%s)", url, status, version)
    if version is None:
        raise MissingVersionHeaderError(
            f"Registry at {config.base_url} does not advertise "
            "a distribution API version"
        )
    return version
