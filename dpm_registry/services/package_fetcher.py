"""
Client-side access to a published registry.

A registry host serves the registry document plus, for every package, the
artifact (at the entry's ``url``) and a ``PackageInfo`` document at
``src/<name>/packageInfo.json`` next to it. This service:
- refreshes a local ``RepoInfo`` from the remote document
- fetches single ``PackageInfo`` documents
- downloads artifacts to a local directory

Hashes are not verified against the downloaded bytes.
"""
from __future__ import annotations

import logging
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional, Union

import aiofiles
import httpx

from dpm_registry.domain.errors import NetworkError, RegistryIOError
from dpm_registry.domain.models import PackageInfo, RegistryConfig
from dpm_registry.domain.registry import RepoInfo
from dpm_registry.storage.json_storage import JsonStorage

logger = logging.getLogger(__name__)

PACKAGE_INFO_PATH = "src/{name}/packageInfo.json"


class PackageFetcher:
    """
    Remote operations against a registry host.

    The HTTP client is owned by the caller, who opens and closes it.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        download_dir: Optional[Union[str, Path]] = None,
    ):
        self.client = client
        self.download_dir = Path(download_dir) if download_dir else Path(tempfile.gettempdir())

    async def fetch_repo_info(self, url: str) -> RepoInfo:
        return await JsonStorage(RepoInfo, self.client).from_url(url)

    async def refresh(self, repo: RepoInfo, url: str) -> None:
        """
        Replace the packages of ``repo`` with those published at ``url``.

        ``repo`` is only touched once the remote document has been fetched and
        parsed.
        """
        remote = await self.fetch_repo_info(url)
        repo.packages.clear()
        repo.packages.update(remote.packages)
        logger.info(f"Refreshed registry from {url}: {len(repo)} packages")

    def package_info_url(self, repo: RepoInfo, name: str) -> str:
        """
        URL of the ``PackageInfo`` document for ``name``.

        The last occurrence of the artifact's file name in its URL is replaced
        by ``src/<name>/packageInfo.json``; a URL without the file name is
        treated as a directory.
        """
        package = repo.require_package(name)
        info_path = PACKAGE_INFO_PATH.format(name=name)
        head, sep, tail = package.url.rpartition(package.file_name)
        if not sep:
            return f"{package.url.rstrip('/')}/{info_path}"
        return f"{head}{info_path}{tail}"

    async def get_single_package_info(self, repo: RepoInfo, name: str) -> PackageInfo:
        url = self.package_info_url(repo, name)
        return await JsonStorage(PackageInfo, self.client).from_url(url)

    async def download_package(self, repo: RepoInfo, name: str) -> Path:
        """
        Download the artifact of ``name`` and return the written path.

        The file is streamed to ``<download_dir>/<file_name>.tmp`` and moved into
        place once complete, so a failed or cancelled download leaves nothing
        behind. Only the last component of ``file_name`` is used; a name with no
        usable last component is rejected before anything is fetched.
        """
        package = repo.require_package(name)
        file_name = Path(package.file_name).name
        if file_name in ("", ".", ".."):
            raise RegistryIOError(
                self.download_dir / package.file_name,
                "artifact file name does not name a file",
            )

        self.download_dir.mkdir(parents=True, exist_ok=True)
        target = self.download_dir / file_name
        tmp_path = target.with_name(f"{file_name}.tmp")

        logger.info(f"Downloading {name} from {package.url}")
        completed = False
        try:
            await self._stream_to_file(package.url, tmp_path)
            try:
                tmp_path.replace(target)
            except OSError as e:
                raise RegistryIOError(target, e.strerror or str(e)) from e
            completed = True
        finally:
            if not completed:
                tmp_path.unlink(missing_ok=True)

        logger.info(f"Downloaded {name} to {target}")
        return target

    async def _stream_to_file(self, url: str, path: Path) -> None:
        try:
            async with self.client.stream("GET", url) as response:
                response.raise_for_status()
                async with aiofiles.open(path, "wb") as f:
                    async for chunk in response.aiter_bytes():
                        await f.write(chunk)
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"Download of {url} failed with status {status_code}")
            raise NetworkError(url, f"HTTP {status_code}", status_code=status_code) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Download of {url} failed: {e!r}")
            raise NetworkError(url, str(e) or type(e).__name__) from e
        except OSError as e:
            raise RegistryIOError(path, e.strerror or str(e)) from e


@asynccontextmanager
async def open_package_fetcher(config: RegistryConfig) -> AsyncIterator[PackageFetcher]:
    """
    Yield a ``PackageFetcher`` backed by a client built from ``config``.

    The client is closed when the context exits.
    """
    async with httpx.AsyncClient(
        follow_redirects=True, timeout=config.http_timeout_seconds
    ) as client:
        yield PackageFetcher(client, download_dir=config.download_dir)
