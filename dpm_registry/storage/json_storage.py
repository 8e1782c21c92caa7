"""
Generic JSON persistence for any pydantic-describable record type.

A ``JsonStorage`` is bound to one target type (a model such as ``RepoInfo`` or
``PackageInfo``, a ``Dict[str, PackageBasicInfo]``, or plain ``dict``) and
moves values of that type between JSON text and three origins:

* a file on disk (``from_json`` / ``to_json``)
* an in-memory string (``from_str_to`` / ``to_str``)
* a remote URL (``from_url``, the only coroutine)

All readers share the same parse step, so every origin validates against the
same schema and reports the same ``ParseError``.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Generic, Optional, TypeVar, Union

import httpx
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from dpm_registry.domain.errors import (
    NetworkError,
    ParseError,
    RegistryIOError,
    SerializationError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JsonStorage(Generic[T]):
    """
    Stateless converter between ``T`` and JSON documents.

    ``client`` is used by ``from_url`` when given; the caller owns its
    lifecycle. Without one, each fetch opens and closes its own client.
    """

    def __init__(self, model: Any, client: Optional[httpx.AsyncClient] = None):
        self.model = model
        self.client = client
        self._adapter: TypeAdapter[T] = TypeAdapter(model)

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def from_str_to(self, contents: Union[str, bytes], source: str = "<string>") -> T:
        try:
            return self._adapter.validate_json(contents)
        except ValidationError as e:
            raise ParseError(source, str(e)) from e

    def from_json(self, path: Union[str, Path]) -> T:
        path = Path(path)
        logger.debug(f"Loading {path}")
        try:
            contents = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(str(path), f"not UTF-8 text: {e}") from e
        except OSError as e:
            raise RegistryIOError(path, e.strerror or str(e)) from e
        return self.from_str_to(contents, source=str(path))

    async def from_url(self, url: str) -> T:
        logger.debug(f"Fetching {url}")
        try:
            if self.client is not None:
                body = await self._fetch(self.client, url)
            else:
                async with httpx.AsyncClient(follow_redirects=True) as client:
                    body = await self._fetch(client, url)
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"Fetching {url} failed with status {status_code}")
            raise NetworkError(url, f"HTTP {status_code}", status_code=status_code) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Fetching {url} failed: {e!r}")
            raise NetworkError(url, str(e) or type(e).__name__) from e
        return self.from_str_to(body, source=url)

    @staticmethod
    async def _fetch(client: httpx.AsyncClient, url: str) -> str:
        response = await client.get(url)
        response.raise_for_status()
        return response.text

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_str(self, data: T) -> str:
        try:
            return self._adapter.dump_json(data, indent=2).decode("utf-8")
        except (PydanticSerializationError, TypeError) as e:
            raise SerializationError(str(e)) from e

    def to_json(self, data: T, path: Union[str, Path]) -> None:
        """Write ``data`` to ``path``, replacing whatever is there."""
        path = Path(path)
        text = self.to_str(data)
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise RegistryIOError(path, e.strerror or str(e)) from e
        logger.debug(f"Wrote {path}")
