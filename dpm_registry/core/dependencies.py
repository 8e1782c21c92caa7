from pathlib import Path
from typing import Optional
import os

from dpm_registry.storage.registry_store import RegistryStore

DATA_ROOT_ENV_VAR = "DPM_REGISTRY_DATA_DIR"
_REPO_ROOT = Path(__file__).resolve().parents[2]
_DEFAULT_DATA_DIR = _REPO_ROOT / "data"

_registry_store: Optional[RegistryStore] = None


def get_data_dir() -> Path:
    """
    Determine the data directory path.

    Priority:
    1. Environment variable DPM_REGISTRY_DATA_DIR
    2. '<project root>/data'
    """
    env_path = os.environ.get(DATA_ROOT_ENV_VAR)
    if env_path:
        d = Path(env_path).expanduser()
    else:
        d = _DEFAULT_DATA_DIR
    d.mkdir(parents=True, exist_ok=True)
    return d


def get_registry_store() -> RegistryStore:
    global _registry_store
    if _registry_store is None:
        _registry_store = RegistryStore(get_data_dir())
        _registry_store.initialize()
    return _registry_store
