"""Registry operations."""

from .manifests import fetch_manifest

__all__ = ["fetch_manifest"]
