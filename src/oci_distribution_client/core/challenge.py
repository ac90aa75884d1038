"""WWW-Authenticate challenge parsing.

A single ``WWW-Authenticate`` value may carry several challenges of
different schemes (RFC 7235). Tokenising is left to ``www_authenticate``;
this module turns each raw entry into a typed challenge through a registry
of decoders keyed by scheme. Only ``Bearer`` is decoded, other schemes are
dropped.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar, Union

import www_authenticate

from ..exceptions import MalformedChallengeError

# Raw challenge parameters: a field mapping, a token68 string, or None when
# the scheme carried nothing at all.
RawChallenge = Union[dict[str, str], str, None]

ChallengeDecoder = Callable[[RawChallenge], Optional["AuthChallenge"]]

CHALLENGE_DECODERS: dict[str, ChallengeDecoder] = {}

T = TypeVar("T", bound="AuthChallenge")


class AuthChallenge:
    """Base class for decoded authentication challenges."""

    scheme: str = ""


def register_challenge(scheme: str) -> Callable[[type[T]], type[T]]:
    """Register ``cls.from_raw`` as the decoder for ``scheme``.

    Scheme names are case-insensitive.
    """

    def decorator(cls: type[T]) -> type[T]:
        cls.scheme = scheme
        CHALLENGE_DECODERS[scheme.casefold()] = cls.from_raw
        return cls

    return decorator


@register_challenge("Bearer")
@dataclass(frozen=True)
class BearerChallenge(AuthChallenge):
    """Bearer challenge pointing at a registry token endpoint."""

    realm: Optional[str] = None
    service: Optional[str] = None
    scope: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: RawChallenge) -> Optional["BearerChallenge"]:
        # token68 or bare "Bearer" is not usable for the token handshake
        if not isinstance(raw, dict) or not raw:
            return None

        fields = {str(key).casefold(): value for key, value in raw.items()}
        return cls(
            realm=fields.get("realm"),
            service=fields.get("service"),
            scope=fields.get("scope"),
        )


def _tokenize(header: str) -> list[tuple[str, Any]]:
    try:
        parsed = www_authenticate.parse(header)
    except (ValueError, KeyError, IndexError, TypeError) as e:
        raise MalformedChallengeError(
            f"Cannot parse WWW-Authenticate header {header!r}: {e}"
        ) from e
    return list(parsed.items())


def parse_challenges(header: Optional[str]) -> list[AuthChallenge]:
    """Decode every recognised challenge in a WWW-Authenticate value.

    Args:
        header: Raw header value, or None when the header was absent

    Returns:
        Challenges in header order; empty when nothing is recognised

    Raises:
        MalformedChallengeError: If the header does not follow the
            challenge grammar
    """
    if header is None or not header.strip():
        return []

    challenges: list[AuthChallenge] = []
    for scheme, raw in _tokenize(header):
        decoder = CHALLENGE_DECODERS.get(str(scheme).casefold())
        if decoder is None:
            continue
        challenge = decoder(raw)
        if challenge is not None:
            challenges.append(challenge)
    return challenges


def find_challenge(
    challenges: list[AuthChallenge], challenge_type: type[T]
) -> Optional[T]:
    """Return the first challenge of ``challenge_type``, if any."""
    for challenge in challenges:
        if isinstance(challenge, challenge_type):
            return challenge
    return None
