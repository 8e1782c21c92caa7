from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dpm_registry.domain.errors import ParseError, RegistryIOError
from dpm_registry.domain.models import RegistryConfig
from dpm_registry.domain.registry import RepoInfo
from dpm_registry.storage.json_storage import JsonStorage

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


class RegistryStore:
    """
    Data-directory backed registry.

    Layout:
    * <DATA_DIR>/config.json      registry configuration
    * <DATA_DIR>/<registry_file>  the registry document
    """

    def __init__(self, data_dir: Path):
        self._data_dir = Path(data_dir)
        self._config: Optional[RegistryConfig] = None
        self._registry = RepoInfo()
        self._config_storage: JsonStorage[RegistryConfig] = JsonStorage(RegistryConfig)
        self._registry_storage: JsonStorage[RepoInfo] = JsonStorage(RepoInfo)

        if not self._data_dir.exists():
            self._data_dir.mkdir(parents=True, exist_ok=True)

    def initialize(self) -> None:
        self._load_config()
        self._load_registry()

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def registry_path(self) -> Path:
        return self._data_dir / self.get_config().registry_file

    def get_config(self) -> RegistryConfig:
        if self._config is None:
            return self._load_config()
        return self._config

    def save_config(self, config: RegistryConfig) -> None:
        self._config = config
        self._config_storage.to_json(config, self._data_dir / CONFIG_FILE_NAME)

    def get_registry(self) -> RepoInfo:
        return self._registry

    def save(self) -> None:
        """Persist the in-memory registry to the registry document."""
        self._registry_storage.to_json(self._registry, self.registry_path)
        logger.info(f"Saved {len(self._registry)} packages to {self.registry_path}")

    def _load_config(self) -> RegistryConfig:
        """
        Load config.json, falling back to defaults when it is missing or
        unreadable, and write it back so new fields are persisted.
        """
        path = self._data_dir / CONFIG_FILE_NAME
        if path.exists():
            try:
                config = self._config_storage.from_json(path)
            except (ParseError, RegistryIOError) as e:
                logger.warning(f"Ignoring unreadable config, using defaults: {e}")
                config = RegistryConfig()
        else:
            config = RegistryConfig()

        self.save_config(config)
        return config

    def _load_registry(self) -> None:
        # A corrupt registry is an error, never reset to empty.
        path = self.registry_path
        if path.exists():
            self._registry = self._registry_storage.from_json(path)
        else:
            self._registry = RepoInfo()
        logger.info(f"Loaded {len(self._registry)} packages from {path}")
