"""Data models for manifests and registry error bodies."""

from dataclasses import dataclass, field
from typing import Any, Optional

from .exceptions import DecodeError

MANIFEST_V2 = "application/vnd.docker.distribution.manifest.v2+json"
MANIFEST_LIST_V2 = "application/vnd.docker.distribution.manifest.list.v2+json"

# Preference order sent in the Accept header of manifest pulls.
ACCEPTED_MANIFEST_TYPES = (MANIFEST_V2, MANIFEST_LIST_V2)


def _require_dict(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise DecodeError(f"{what} must be a JSON object")
    return data


def _optional_str(data: dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise DecodeError(f"{key} must be a string")
    return value


@dataclass
class Descriptor:
    """Content descriptor for a config blob, layer or child manifest."""

    media_type: str
    size: int
    digest: str
    urls: list[str] = field(default_factory=list)
    annotations: dict[str, str] = field(default_factory=dict)
    platform: Optional[dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: Any) -> "Descriptor":
        data = _require_dict(data, "Descriptor")
        try:
            media_type = data.get("mediaType", "")
            size = data["size"]
            digest = data["digest"]
        except KeyError as e:
            raise DecodeError(f"Descriptor is missing {e.args[0]}") from e

        if not isinstance(size, int) or isinstance(size, bool):
            raise DecodeError(f"Descriptor size must be an integer: {size!r}")
        if not isinstance(digest, str):
            raise DecodeError(f"Descriptor digest must be a string: {digest!r}")

        return cls(
            media_type=media_type,
            size=size,
            digest=digest,
            urls=list(data.get("urls") or []),
            annotations=dict(data.get("annotations") or {}),
            platform=data.get("platform"),
        )


@dataclass
class Manifest:
    """Image manifest or manifest list as served by a registry.

    Single-image manifests populate ``config`` and ``layers``; manifest
    lists populate ``manifests``.
    """

    schema_version: int
    media_type: Optional[str] = None
    config: Optional[Descriptor] = None
    layers: list[Descriptor] = field(default_factory=list)
    manifests: list[Descriptor] = field(default_factory=list)
    annotations: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Manifest":
        """Build a manifest from registry JSON.

        Raises:
            DecodeError: If required fields are missing or mistyped
        """
        data = _require_dict(data, "Manifest")
        schema_version = data.get("schemaVersion")
        if not isinstance(schema_version, int) or isinstance(schema_version, bool):
            raise DecodeError(f"Invalid schemaVersion: {schema_version!r}")

        layers = data.get("layers", [])
        manifests = data.get("manifests", [])
        if not isinstance(layers, list) or not isinstance(manifests, list):
            raise DecodeError("layers and manifests must be lists")

        config = data.get("config")
        return cls(
            schema_version=schema_version,
            media_type=_optional_str(data, "mediaType"),
            config=Descriptor.from_dict(config) if config is not None else None,
            layers=[Descriptor.from_dict(layer) for layer in layers],
            manifests=[Descriptor.from_dict(entry) for entry in manifests],
            annotations=dict(data.get("annotations") or {}),
        )

    @property
    def is_manifest_list(self) -> bool:
        return self.media_type == MANIFEST_LIST_V2 or bool(self.manifests)


@dataclass
class RegistryErrorEntry:
    """One machine-readable entry of a registry error envelope."""

    code: str
    message: str = ""
    detail: Any = None

    def __str__(self) -> str:
        if self.message:
            return f"{self.code}: {self.message}"
        return self.code


@dataclass
class ErrorEnvelope:
    """Body of a 4xx registry response: ``{"errors": [...]}``."""

    errors: list[RegistryErrorEntry]

    @classmethod
    def from_dict(cls, data: Any) -> "ErrorEnvelope":
        """Build an envelope from registry JSON.

        Raises:
            DecodeError: If there is no non-empty ``errors`` list
        """
        data = _require_dict(data, "Error envelope")
        entries = data.get("errors")
        if not isinstance(entries, list) or not entries:
            raise DecodeError("Error envelope has no errors")

        errors = []
        for entry in entries:
            entry = _require_dict(entry, "Error entry")
            code = entry.get("code")
            if not isinstance(code, str):
                raise DecodeError(f"Error entry has no code: {entry!r}")
            errors.append(
                RegistryErrorEntry(
                    code=code,
                    message=_optional_str(entry, "message") or "",
                    detail=entry.get("detail"),
                )
            )
        return cls(errors=errors)
