"""Bearer token handshake against an OCI registry.

Flow (https://distribution.github.io/distribution/spec/auth/token/):

1. Anonymous ``GET /v2/`` to discover the registry's challenge.
2. No challenge, or no Bearer challenge: the registry allows anonymous pulls.
3. Otherwise request a pull-scoped token from the challenge's realm and
   keep it in the token store.
"""

import asyncio
import logging
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import aiohttp

from ..exceptions import (
    AuthenticationError,
    MalformedChallengeError,
    RegistryConnectionError,
)
from .challenge import BearerChallenge, find_challenge, parse_challenges
from .session import read_json, read_text
from .token_store import TokenStore
from .types import AccessToken, RegistryConfig

logger = logging.getLogger(__name__)


def pull_scope(repository: str) -> str:
    """Read-only scope for ``repository``. Push scopes are never requested."""
    return f"repository:{repository}:pull"


def build_token_url(realm: str, service: str, scope: str) -> str:
    """Append ``service`` and ``scope`` to the realm, keeping its own query."""
    parts = urlsplit(realm)
    query = parse_qsl(parts.query, keep_blank_values=True)
    query = [(key, value) for key, value in query if key not in ("service", "scope")]
    query.extend([("service", service), ("scope", scope)])
    return urlunsplit(parts._replace(query=urlencode(query)))


async def discover_challenge(
    session: aiohttp.ClientSession, config: RegistryConfig
) -> BearerChallenge | None:
    """Query the v2 endpoint and return its Bearer challenge, if any.

    Raises:
        RegistryConnectionError: If the registry cannot be reached
        MalformedChallengeError: If the WWW-Authenticate header is unparseable
    """
    url = config.api_url
    logger.debug("Checking %s for an authentication challenge", url)
    try:
        async with session.get(url) as resp:
            header = resp.headers.get("WWW-Authenticate")
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise RegistryConnectionError(f"Failed to reach {url}: {e}") from e

    if header is None:
        return None
    return find_challenge(parse_challenges(header), BearerChallenge)


async def request_token(
    session: aiohttp.ClientSession, challenge: BearerChallenge, repository: str
) -> AccessToken:
    """Exchange a Bearer challenge for a pull token.

    Raises:
        MalformedChallengeError: If the challenge lacks realm or service
        AuthenticationError: If the token endpoint answers with a non-200 status
        RegistryConnectionError: If the token endpoint cannot be reached
        DecodeError: If the token response is not a token object
    """
    if not challenge.realm:
        raise MalformedChallengeError("Bearer challenge has no realm")
    if not challenge.service:
        raise MalformedChallengeError("Bearer challenge has no service")

    url = build_token_url(challenge.realm, challenge.service, pull_scope(repository))
    logger.debug("Requesting pull token from %s", challenge.realm)
    try:
        async with session.get(url) as resp:
            if resp.status != 200:
                reason = await read_text(resp)
                raise AuthenticationError(reason, status=resp.status)
            data = await read_json(resp)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise RegistryConnectionError(
            f"Failed to reach token endpoint {challenge.realm}: {e}"
        ) from e

    return AccessToken.from_dict(data)


async def authenticate(
    session: aiohttp.ClientSession,
    config: RegistryConfig,
    token_store: TokenStore,
    repository: str,
) -> None:
    """Run the token handshake for ``repository`` on ``config.host``.

    On success any previously stored token is replaced. When the registry
    needs no bearer token the store is left untouched.
    """
    challenge = await discover_challenge(session, config)
    if challenge is None:
        logger.debug(
            "No bearer challenge from %s, continuing anonymously", config.host
        )
        return

    token = await request_token(session, challenge, repository)
    token_store.replace(token)
    logger.debug("Stored pull token for %s", repository)
