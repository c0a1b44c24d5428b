"""Kubernetes operator for Plex Media Server."""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]

__version__: str
"""The version string of the Plex operator (PEP 440 / SemVer compatible)."""

try:
    __version__ = version("plex-operator")
except PackageNotFoundError:
    # package is not installed
    __version__ = "0.0.0"
