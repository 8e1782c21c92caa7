from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class RegistryError(Exception):
    """Base class for every error raised by the registry."""


class RegistryIOError(RegistryError):
    """A path could not be read or written."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"IO error on {self.path}: {reason}")


class ParseError(RegistryError):
    """Content is not valid JSON or does not match the expected shape."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to parse {source}: {reason}")


class SerializationError(RegistryError):
    """A value could not be encoded as JSON."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to serialize: {reason}")


class NetworkError(RegistryError):
    """A fetch failed: connection, timeout or non-success status."""

    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Network error fetching {url}: {reason}")


class PackageNotFoundError(RegistryError, KeyError):
    """The named package is not in the registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Package not found: {self.name}"
