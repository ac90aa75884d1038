"""Single-slot storage for the client's bearer credential."""

from typing import Optional

from .types import AccessToken


class TokenStore:
    """Holds at most one access token.

    Not synchronised: a store belongs to one client driven by one caller.
    """

    def __init__(self) -> None:
        self._token: Optional[AccessToken] = None

    @property
    def token(self) -> Optional[AccessToken]:
        return self._token

    def replace(self, token: AccessToken) -> None:
        """Store ``token``, dropping any previous one."""
        self._token = token

    def authorization_header(self) -> Optional[str]:
        """``Authorization`` value for the held token, or None."""
        if self._token is None:
            return None
        return self._token.bearer_token()
