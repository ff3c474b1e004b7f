"""Miscellaneous helpers for the phaseboot runtime."""
from __future__ import annotations

from importlib import metadata

__all__ = ["package_version"]


def package_version() -> str:
    """Return the installed phaseboot package version or a sensible default."""

    try:
        return metadata.version("phaseboot")
    except metadata.PackageNotFoundError:  # pragma: no cover - fallback path
        return "0.0.0"
