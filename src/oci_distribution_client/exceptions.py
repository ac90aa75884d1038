"""Custom exceptions for the OCI Distribution client."""

from typing import Any


class RegistryError(Exception):
    """Base exception for all registry-related errors."""

    pass


class RegistryConnectionError(RegistryError):
    """Raised when unable to reach the registry (DNS, connection, TLS, timeout)."""

    pass


class ValidationError(RegistryError):
    """Raised when an image reference cannot be parsed."""

    pass


class DecodeError(RegistryError):
    """Raised when a response body does not have the expected JSON shape."""

    pass


class MissingVersionHeaderError(RegistryError):
    """Raised when a registry does not advertise its distribution API version."""

    pass


class MalformedChallengeError(RegistryError):
    """Raised when a WWW-Authenticate header cannot be used for the token handshake."""

    pass


class AuthenticationError(RegistryError):
    """Raised when the token endpoint rejects the token request."""

    def __init__(self, reason: str, status: int | None = None) -> None:
        self.reason = reason
        self.status = status
        super().__init__(f"failed to authenticate: {reason}")


class ManifestError(RegistryError):
    """Raised when manifest operations fail."""

    pass


class ManifestClientError(ManifestError):
    """Raised on a 4xx manifest response carrying a registry error envelope."""

    def __init__(self, error: Any, url: str) -> None:
        self.error = error
        self.url = url
        super().__init__(f"{error} on {url}")


class ManifestServerError(ManifestError):
    """Raised on a 5xx manifest response."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Server error at {url}")


class UnexpectedStatusError(ManifestError):
    """Raised when a manifest response is neither 200, 4xx nor 5xx."""

    def __init__(self, status: int, url: str, body: str) -> None:
        self.status = status
        self.url = url
        self.body = body
        super().__init__(
            f"An unexpected error occurred: code={status}, url={url}, message='{body}'"
        )
