"""Utility functions for the OCI Distribution client."""

from .digest import validate_digest

__all__ = ["validate_digest"]
