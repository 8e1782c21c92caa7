"""Shared test fixtures."""

import pytest

from dpm_registry.domain.models import Dependency, PackageBasicInfo, PackageInfo
from dpm_registry.domain.registry import RepoInfo
from dpm_registry.storage.registry_store import RegistryStore


@pytest.fixture
def sample_basic_info():
    """A registry record with one dependency."""
    return PackageBasicInfo(
        url="https://pkgs.example.com/left-pad/left-pad.tar",
        file_name="left-pad.tar",
        version="1.0.0",
        hash="deadbeef",
        dependencies=[Dependency.new("string-utils", "2.1.0")],
    )


@pytest.fixture
def sample_package_info():
    """A standalone PackageInfo."""
    return PackageInfo.new(
        "test_package",
        "test_file.zip",
        "1.0.0",
        "A test package",
        "hash123",
        None,
    )


@pytest.fixture
def sample_repo(sample_basic_info):
    """A registry with two packages."""
    repo = RepoInfo.new()
    repo.add_package_with_info("left-pad", sample_basic_info)
    repo.add_package(
        "string-utils",
        "https://pkgs.example.com/string-utils/string-utils.zip",
        "string-utils.zip",
        "2.1.0",
        "cafebabe",
        None,
        entry="bin/string-utils",
    )
    return repo


@pytest.fixture
def registry_store(tmp_path):
    """An initialized store rooted in a temporary data directory."""
    store = RegistryStore(tmp_path / "data")
    store.initialize()
    return store
