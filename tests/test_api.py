"""Tests for the registry HTTP surface."""

import httpx
import pytest
from fastapi.testclient import TestClient

from dpm_registry.core.dependencies import get_registry_store
from dpm_registry.domain.registry import RepoInfo
from dpm_registry.main import app
from dpm_registry.services.package_fetcher import PackageFetcher
from dpm_registry.storage.json_storage import JsonStorage


@pytest.fixture
def client(registry_store):
    app.dependency_overrides[get_registry_store] = lambda: registry_store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_put_then_get_package(client, registry_store, sample_basic_info):
    body = sample_basic_info.model_dump(mode="json", exclude_none=True)

    response = client.put("/packages/left-pad", json=body)
    assert response.status_code == 200
    assert response.json() == body

    response = client.get("/packages/left-pad")
    assert response.status_code == 200
    assert response.json() == body

    # persisted
    saved = JsonStorage(RepoInfo).from_json(registry_store.registry_path)
    assert saved.get_package("left-pad") == sample_basic_info


def test_put_rejects_incomplete_record(client):
    response = client.put("/packages/left-pad", json={"url": "https://x"})
    assert response.status_code == 422


def test_get_missing_package(client):
    response = client.get("/packages/ghost")
    assert response.status_code == 404


def test_list_packages(client, registry_store, sample_repo):
    for name, info in sample_repo.packages.items():
        registry_store.get_registry().add_package_with_info(name, info)

    response = client.get("/packages")
    assert response.json() == ["left-pad", "string-utils"]


def test_delete_package(client, registry_store, sample_basic_info):
    registry_store.get_registry().add_package_with_info("left-pad", sample_basic_info)

    response = client.delete("/packages/left-pad")
    assert response.status_code == 200
    assert response.json()["version"] == "1.0.0"
    assert not registry_store.get_registry().has_package("left-pad")
    assert JsonStorage(RepoInfo).from_json(registry_store.registry_path).package_names() == []

    assert client.delete("/packages/left-pad").status_code == 404


def test_repo_document_round_trips(client, registry_store, sample_repo):
    for name, info in sample_repo.packages.items():
        registry_store.get_registry().add_package_with_info(name, info)

    response = client.get("/repo.json")
    assert response.headers["content-type"].startswith("application/json")
    assert JsonStorage(RepoInfo).from_str_to(response.text) == sample_repo


@pytest.mark.asyncio
async def test_fetcher_refreshes_from_served_registry(registry_store, sample_repo):
    for name, info in sample_repo.packages.items():
        registry_store.get_registry().add_package_with_info(name, info)
    app.dependency_overrides[get_registry_store] = lambda: registry_store

    try:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://registry") as http:
            local = RepoInfo.new()
            await PackageFetcher(http).refresh(local, "http://registry/repo.json")
    finally:
        app.dependency_overrides.clear()

    assert local == sample_repo
