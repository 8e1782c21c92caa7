"""
Pydantic models for the package registry.

This module defines the records that are moved to and from JSON:
- Dependency declarations
- Full package descriptions (PackageInfo)
- The registry's per-package record (PackageBasicInfo)
- Repository-level configuration

Field names are the wire contract for persisted registry files and must not
be renamed.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer


# ---------------------------------------------------------------------------
# Package Models
# ---------------------------------------------------------------------------


class Dependency(BaseModel):
    """
    A declared dependency: another package's name and a version string.

    No constraint semantics are attached to ``version``; it is stored as given.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str

    @classmethod
    def new(cls, name: str, version: str) -> Dependency:
        return cls(name=name, version=version)


class PackageInfo(BaseModel):
    """
    Standalone description of one package, independent of any registry.

    Published next to the artifact (``src/<name>/packageInfo.json``). Instances
    are immutable; build a replacement with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)

    package_name: str
    file_name: str
    version: str
    description: str
    hash: str
    dependencies: Optional[List[Dependency]] = None

    @classmethod
    def new(
        cls,
        package_name: str,
        file_name: str,
        version: str,
        description: str,
        hash: str,
        dependencies: Optional[List[Dependency]] = None,
    ) -> PackageInfo:
        """
        Build a fully populated record.

        Contents are not checked (version format, hash length, ...); that is
        left to whoever produces the values.
        """
        return cls(
            package_name=package_name,
            file_name=file_name,
            version=version,
            description=description,
            hash=hash,
            dependencies=dependencies,
        )


class PackageBasicInfo(BaseModel):
    """
    The registry's record for one package.

    The package name is not part of the record; it is the key under which the
    registry stores it. Immutable, so a registry never shares a record it can
    be changed through; build a replacement with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True)

    url: str = Field(description="Where the artifact can be downloaded from.")
    file_name: str = Field(description="File name of the artifact.")
    version: str
    hash: str = Field(description="Integrity hash of the artifact, as published.")
    dependencies: Optional[List[Dependency]] = None

    # Client-side annotations. Omitted from the document when unset so that
    # registries written without them stay byte-compatible.
    entry: Optional[str] = Field(
        default=None,
        description="Entry point inside the artifact, if the publisher declares one.",
    )
    description: Optional[str] = None

    @model_serializer(mode="wrap")
    def _omit_unset_annotations(self, handler):
        data = handler(self)
        for key in ("entry", "description"):
            if data.get(key) is None:
                data.pop(key, None)
        return data


# ---------------------------------------------------------------------------
# Repository Configuration Models
# ---------------------------------------------------------------------------


class RegistryConfig(BaseModel):
    """
    Top-level configuration for a registry data directory.
    Persisted at: <DATA_DIR>/config.json
    """

    display_name: str = Field(
        default="dpm package registry",
        description="Human-friendly name for this registry.",
    )
    registry_file: str = Field(
        default="registry.json",
        description="File name of the registry document inside the data directory.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout applied to HTTP clients built by the application.",
    )
    download_dir: Optional[str] = Field(
        default=None,
        description="Where downloaded artifacts are written. Defaults to the system temp dir.",
    )
    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Timestamp when this configuration was first created.",
    )
