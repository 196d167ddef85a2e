"""Data fetch service: HTTP (aiohttp) and local-directory transports."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Protocol

import aiohttp

from vmtbrowser.config import BrowserConfig
from vmtbrowser.exceptions import FetchError

_logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Structural fetch interface used by the loaders.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementations (`HttpFetcher`, `LocalFetcher`) concrete.
    """

    async def fetch_text(self, url: str) -> str: ...

    async def fetch_json(self, url: str) -> Any: ...


def _decode_json(text: str, url: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise FetchError(f"Invalid JSON from {url}: {text[:64]!r}", url=url) from exc


class HttpFetcher:
    """Fetch static data files over HTTP.

    Any transport problem (connection error, non-200 status, timeout or an
    undecodable body) is reported uniformly as :class:`FetchError` carrying
    the URL and status.
    """

    def __init__(self, config: BrowserConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.fetch_timeout)

    async def fetch_text(self, url: str) -> str:
        _logger.debug("GET %s", url)
        try:
            async with self._http.get(url, timeout=self._timeout) as resp:
                try:
                    text = await resp.text()
                except UnicodeDecodeError as exc:
                    raise FetchError(
                        f"Response from {url} is not valid text: {exc}",
                        url=url,
                        status=resp.status,
                    ) from exc
                if resp.status != 200:
                    raise FetchError(
                        f"HTTP {resp.status} from {url}: {text[:200]}",
                        url=url,
                        status=resp.status,
                    )
        except FetchError:
            raise
        except TimeoutError as exc:
            raise FetchError(
                f"Request to {url} timed out after {self._config.fetch_timeout}s",
                url=url,
            ) from exc
        except aiohttp.ClientError as exc:
            raise FetchError(f"Request to {url} failed: {exc}", url=url) from exc
        return text

    async def fetch_json(self, url: str) -> Any:
        return _decode_json(await self.fetch_text(url), url)


class LocalFetcher:
    """Read data files from a directory (for offline use and scripts).

    URLs are treated as paths relative to *root*; reads run in a worker
    thread so the event loop is never blocked.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def _resolve(self, url: str) -> Path:
        return self._root / url.lstrip("/")

    async def fetch_text(self, url: str) -> str:
        path = self._resolve(url)
        _logger.debug("READ %s", path)
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError as exc:
            raise FetchError(f"File not found: {path}", url=url, status=404) from exc
        except UnicodeDecodeError as exc:
            raise FetchError(f"{path} is not valid UTF-8: {exc}", url=url) from exc
        except OSError as exc:
            raise FetchError(f"Cannot read {path}: {exc}", url=url) from exc

    async def fetch_json(self, url: str) -> Any:
        return _decode_json(await self.fetch_text(url), url)
