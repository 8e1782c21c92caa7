"""
The package registry: a mapping from package name to its basic record.

The mapping key is the authoritative package name; records never carry their
own name, so a key and its value cannot drift apart. ``add_*`` operations are
upserts, ``update_package`` and ``patch_package`` require the package to
exist. Nothing here locks: callers sharing a registry across tasks or threads
must serialize access themselves.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from .errors import PackageNotFoundError
from .models import Dependency, PackageBasicInfo

logger = logging.getLogger(__name__)


class RepoInfo(BaseModel):
    """
    In-memory registry, persisted as ``{"packages": {<name>: {...}}}``.
    """

    packages: Dict[str, PackageBasicInfo] = Field(default_factory=dict)

    @classmethod
    def new(cls) -> RepoInfo:
        return cls()

    def __len__(self) -> int:
        return len(self.packages)

    def __contains__(self, name: object) -> bool:
        return name in self.packages

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_package(self, name: str) -> bool:
        return name in self.packages

    def get_package(self, name: str) -> Optional[PackageBasicInfo]:
        """Return the record stored under ``name``, or None if there is none."""
        return self.packages.get(name)

    def require_package(self, name: str) -> PackageBasicInfo:
        package = self.packages.get(name)
        if package is None:
            raise PackageNotFoundError(name)
        return package

    def package_names(self) -> List[str]:
        return sorted(self.packages)

    def get_package_handler(self) -> Mapping[str, PackageBasicInfo]:
        """Read-only view of the underlying mapping."""
        return MappingProxyType(self.packages)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_package(
        self,
        name: str,
        url: str,
        file_name: str,
        version: str,
        hash: str,
        dependencies: Optional[List[Dependency]] = None,
        entry: Optional[str] = None,
        description: Optional[str] = None,
    ) -> None:
        """
        Insert or overwrite the entry for ``name``.

        Calling this twice with the same arguments leaves the registry as if
        it had been called once.
        """
        package = PackageBasicInfo(
            url=url,
            file_name=file_name,
            version=version,
            hash=hash,
            dependencies=dependencies,
            entry=entry,
            description=description,
        )
        self.add_package_with_info(name, package)

    def add_package_with_info(self, name: str, info: PackageBasicInfo) -> None:
        if name in self.packages:
            logger.debug(f"Overwriting package {name}")
        self.packages[name] = info

    def remove_package(self, name: str) -> Optional[PackageBasicInfo]:
        """
        Remove ``name`` and return its record.

        Returns None when the package was not present; that is not an error.
        """
        return self.packages.pop(name, None)

    def update_package(self, name: str, info: PackageBasicInfo) -> None:
        """Replace the record of an existing package."""
        if name not in self.packages:
            raise PackageNotFoundError(name)
        self.packages[name] = info

    def patch_package(
        self,
        name: str,
        *,
        url: Optional[str] = None,
        file_name: Optional[str] = None,
        version: Optional[str] = None,
        hash: Optional[str] = None,
        dependencies: Optional[List[Dependency]] = None,
        entry: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PackageBasicInfo:
        """
        Replace only the given fields of an existing package.

        Arguments left as None keep their current value, so a patch cannot
        clear a field. To clear one, replace the whole record::

            current = repo.require_package(name)
            repo.update_package(name, current.model_copy(update={"entry": None}))

        Returns the new record.
        """
        current = self.require_package(name)
        changes = {
            "url": url,
            "file_name": file_name,
            "version": version,
            "hash": hash,
            "dependencies": dependencies,
            "entry": entry,
            "description": description,
        }
        updated = current.model_copy(
            update={k: v for k, v in changes.items() if v is not None}
        )
        self.packages[name] = updated
        return updated
