"""Core data types for the OCI Distribution client."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any

import dateutil.parser

from ..exceptions import DecodeError


@dataclass(frozen=True)
class RegistryConfig:
    """Connection settings for a single registry host."""

    host: str
    scheme: str = "https"
    timeout: int = 30

    @property
    def base_url(self) -> str:
        """Registry base URL without trailing slash."""
        return f"{self.scheme}://{self.host}"

    @property
    def api_url(self) -> str:
        """Registry v2 API root, used for version and challenge requests."""
        return f"{self.base_url}/v2/"


def parse_issued_at(value: str) -> datetime:
    """Parse an RFC 3339 timestamp as sent by token endpoints.

    Nanosecond precision is truncated to microseconds by ``isoparse``.
    """
    try:
        return dateutil.parser.isoparse(value)
    except (ValueError, OverflowError) as e:
        raise DecodeError(f"Invalid issued_at timestamp: {value!r}") from e


@dataclass(frozen=True)
class AccessToken:
    """Bearer credential granted by a registry token endpoint.

    ``expires_in`` and ``issued_at`` are kept for callers; the client never
    refreshes or validates expiry on its own.
    """

    access_token: str
    expires_in: int | None = None
    issued_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "AccessToken":
        """Build a token from a token endpoint JSON body.

        Docker token servers name the field ``token``; OAuth2 servers use
        ``access_token``. Both are accepted, ``access_token`` first.
        """
        if not isinstance(data, dict):
            raise DecodeError("Token response must be a JSON object")

        token = data.get("access_token") or data.get("token")
        if not isinstance(token, str) or not token:
            raise DecodeError("Token response has no access_token")

        expires_in = data.get("expires_in")
        if expires_in is not None and (
            isinstance(expires_in, bool) or not isinstance(expires_in, int)
        ):
            raise DecodeError(f"Invalid expires_in value: {expires_in!r}")

        issued_at = data.get("issued_at")
        if issued_at is not None:
            if not isinstance(issued_at, str):
                raise DecodeError(f"Invalid issued_at value: {issued_at!r}")
            issued_at = parse_issued_at(issued_at)

        return cls(access_token=token, expires_in=expires_in, issued_at=issued_at)

    def bearer_token(self) -> str:
        """Authorization header value for this token."""
        return f"Bearer {self.access_token}"

    def __repr__(self) -> str:
        return (
            f"AccessToken(access_token='***', expires_in={self.expires_in!r}, "
            f"issued_at={self.issued_at!r})"
        )
