"""OCI Distribution Client - Async Python client for pulling from OCI registries."""

__version__ = "0.1.0"
__author__ = "Your Name"
__email__ = "your.email@example.com"

from .core.challenge import BearerChallenge, parse_challenges
from .core.registry_client import RegistryClient
from .core.types import AccessToken, RegistryConfig
from .exceptions import (
    AuthenticationError,
    DecodeError,
    MalformedChallengeError,
    ManifestClientError,
    ManifestError,
    ManifestServerError,
    MissingVersionHeaderError,
    RegistryConnectionError,
    RegistryError,
    UnexpectedStatusError,
    ValidationError,
)
from .models import Descriptor, ErrorEnvelope, Manifest, RegistryErrorEntry
from .reference import Reference
from .registry import get_api_version, pull_manifest

__all__ = [
    "RegistryClient",
    "RegistryConfig",
    "AccessToken",
    "BearerChallenge",
    "parse_challenges",
    "Reference",
    "Manifest",
    "Descriptor",
    "ErrorEnvelope",
    "RegistryErrorEntry",
    "get_api_version",
    "pull_manifest",
    "RegistryError",
    "RegistryConnectionError",
    "ValidationError",
    "DecodeError",
    "MissingVersionHeaderError",
    "MalformedChallengeError",
    "AuthenticationError",
    "ManifestError",
    "ManifestClientError",
    "ManifestServerError",
    "UnexpectedStatusError",
]
