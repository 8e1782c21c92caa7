from __future__ import annotations

from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from dpm_registry.core.dependencies import get_registry_store
from dpm_registry.domain.models import PackageBasicInfo
from dpm_registry.domain.registry import RepoInfo
from dpm_registry.storage.json_storage import JsonStorage
from dpm_registry.storage.registry_store import RegistryStore

logger = logging.getLogger(__name__)
router = APIRouter()

_registry_json: JsonStorage[RepoInfo] = JsonStorage(RepoInfo)


# ---------------------------------------------------------------------------
# Published registry document
# ---------------------------------------------------------------------------

@router.get("/repo.json")
async def get_repo_document(store: RegistryStore = Depends(get_registry_store)) -> Response:
    """
    The registry document, byte-for-byte what is written to disk.

    Clients load it with ``JsonStorage(RepoInfo).from_url`` or
    ``PackageFetcher.refresh``.
    """
    return Response(
        content=_registry_json.to_str(store.get_registry()),
        media_type="application/json",
    )


# ---------------------------------------------------------------------------
# Package CRUD
# ---------------------------------------------------------------------------

@router.get("/packages")
async def list_packages(store: RegistryStore = Depends(get_registry_store)) -> List[str]:
    return store.get_registry().package_names()


@router.get("/packages/{name}", response_model=PackageBasicInfo, response_model_exclude_none=True)
async def get_package(name: str, store: RegistryStore = Depends(get_registry_store)) -> PackageBasicInfo:
    package = store.get_registry().get_package(name)
    if package is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Package not found: {name}")
    return package


@router.put("/packages/{name}", response_model=PackageBasicInfo, response_model_exclude_none=True)
async def put_package(
    name: str,
    body: PackageBasicInfo,
    store: RegistryStore = Depends(get_registry_store),
) -> PackageBasicInfo:
    """
    Insert or overwrite ``name`` and persist the registry.
    """
    store.get_registry().add_package_with_info(name, body)
    store.save()
    logger.info(f"Stored package {name} ({body.version})")
    return body


@router.delete("/packages/{name}", response_model=PackageBasicInfo, response_model_exclude_none=True)
async def delete_package(name: str, store: RegistryStore = Depends(get_registry_store)) -> PackageBasicInfo:
    removed = store.get_registry().remove_package(name)
    if removed is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Package not found: {name}")
    store.save()
    logger.info(f"Removed package {name}")
    return removed
