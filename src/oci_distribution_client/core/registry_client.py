"""OCI Distribution async client implementation."""

from typing import Optional

import aiohttp

from ..exceptions import RegistryError
from ..models import Manifest
from ..operations.manifests import fetch_manifest
from ..reference import Reference
from .auth import authenticate
from .connectivity import fetch_api_version
from .session import create_session
from .token_store import TokenStore
from .types import AccessToken, RegistryConfig


class RegistryClient:
    """OCI Distribution async client with read-only bearer token auth.

    Most registries require at least an OAuth2-style handshake before pulls.
    Create a client, call :meth:`auth` for the image's repository, then
    :meth:`pull_manifest`. Skipping :meth:`auth` pulls anonymously.

    A client holds one token at a time; use one client per concurrent flow.
    """

    def __init__(
        self,
        scheme: str = "https",
        timeout: int = 30,
        connector: Optional[aiohttp.TCPConnector] = None,
    ) -> None:
        """Initialize the registry client.

        Args:
            scheme: URL scheme for registry requests ("http" for plain registries)
            timeout: Request timeout in seconds
            connector: aiohttp connector for connection pooling
        """
        self.scheme = scheme
        self.timeout = timeout
        self.connector = connector
        self.session: Optional[aiohttp.ClientSession] = None
        self.token_store = TokenStore()

    async def __aenter__(self) -> "RegistryClient":
        """Enter async context manager."""
        if not self.session:
            self.session = await create_session(self.timeout, self.connector)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        await self.close()

    async def close(self) -> None:
        """Close the client session."""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    @property
    def token(self) -> Optional[AccessToken]:
        """Token from the last successful :meth:`auth`, if any."""
        return self.token_store.token

    def _require_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            raise RegistryError(
                "RegistryClient must be used as an async context manager"
            )
        return self.session

    def _config(self, host: str) -> RegistryConfig:
        return RegistryConfig(host=host, scheme=self.scheme, timeout=self.timeout)

    async def version(self, host: str) -> str:
        """Return the distribution API version a registry advertises.

        Args:
            host: Registry host, optionally with port

        Returns:
            Version string such as "registry/2.0"

        Raises:
            MissingVersionHeaderError: If the registry sends no version header
            RegistryConnectionError: If the registry cannot be reached
        """
        return await fetch_api_version(self._require_session(), self._config(host))

    async def auth(self, image: Reference) -> None:
        """Obtain a pull token for ``image`` if the registry asks for one.

        The token replaces any previously stored one and is sent with later
        :meth:`pull_manifest` calls.

        Args:
            image: Reference whose registry and repository scope the token

        Raises:
            MalformedChallengeError: If the registry's challenge is unusable
            AuthenticationError: If the token endpoint rejects the request
            RegistryConnectionError: If the registry cannot be reached
            DecodeError: If the token response cannot be decoded
        """
        await authenticate(
            self._require_session(),
            self._config(image.registry_host()),
            self.token_store,
            image.repository_path(),
        )

    async def pull_manifest(self, image: Reference) -> Manifest:
        """Pull the manifest for ``image``.

        Uses the stored bearer token when there is one, otherwise pulls
        anonymously.

        Args:
            image: Reference to pull

        Returns:
            Manifest or manifest list

        Raises:
            ManifestClientError: On a 4xx with a registry error envelope
            ManifestServerError: On a 5xx
            UnexpectedStatusError: On any other non-200 status
            DecodeError: If a response body cannot be decoded
            RegistryConnectionError: If the registry cannot be reached
        """
        return await fetch_manifest(
            self._require_session(),
            image,
            authorization=self.token_store.authorization_header(),
            scheme=self.scheme,
        )
