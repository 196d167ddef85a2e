"""High-level async data browser.

Usage::

    async with DataBrowser(BrowserConfig.from_env()) as browser:
        await browser.start()
        browser.select_theme("THEME_VMT")
        browser.select_municipality(35)
        await browser.change_year(2040)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any

import aiohttp
from shapely.geometry.base import BaseGeometry

from vmtbrowser._transport import Fetcher, HttpFetcher
from vmtbrowser.aggregate import NumberFormatter
from vmtbrowser.config import BrowserConfig
from vmtbrowser.dataset import FeatureCollection
from vmtbrowser.exceptions import DataNotReady, DatasetLoadError, InvalidSelection, VmtError
from vmtbrowser.ingestion.geometry import fetch_geometry, fetch_outline
from vmtbrowser.ingestion.tabular import fetch_tabular
from vmtbrowser.models.feature import JoinWarning
from vmtbrowser.models.record import TabularRecord
from vmtbrowser.municipalities import MunicipalityRegistry
from vmtbrowser.state.events import LoadState, RenderUpdate
from vmtbrowser.state.selection import SelectionManager, Subscriber
from vmtbrowser.themes import THEMES

_logger = logging.getLogger(__name__)


class DataBrowser:
    """Loads the region's data and drives the selection manager.

    Load states move ``uninitialized -> loading -> ready`` (or ``error``
    when startup fails). A year change moves ``ready -> loading -> ready``;
    selections keep working on the bound dataset while it loads, and a
    failed year load leaves the previous data in place.
    """

    def __init__(
        self,
        config: BrowserConfig,
        *,
        fetcher: Fetcher | None = None,
        session: aiohttp.ClientSession | None = None,
        registry: MunicipalityRegistry | None = None,
        on_update: Subscriber | None = None,
        on_error: Callable[[str], None] | None = None,
    ) -> None:
        self._config = config
        self._fetcher = fetcher
        self._external_session = session is not None
        self._http_session = session
        self._registry = registry or MunicipalityRegistry.for_region(config.region)
        self._on_error = on_error
        self._manager = SelectionManager(
            self._registry,
            THEMES,
            config.default_year,
            NumberFormatter(config.grouping_separator),
            years=config.years,
            total_tolerance=config.total_tolerance,
        )
        if on_update is not None:
            self._manager.subscribe(on_update)
        self._load_state = LoadState.UNINITIALIZED
        self._outline: list[BaseGeometry] = []
        self._warnings: list[JoinWarning] = []
        self._generation = 0
        self._year_task: asyncio.Task[dict[int, TabularRecord]] | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> DataBrowser:
        if self._fetcher is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._fetcher = HttpFetcher(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._year_task is not None and not self._year_task.done():
            self._year_task.cancel()
        self._year_task = None
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def config(self) -> BrowserConfig:
        return self._config

    @property
    def manager(self) -> SelectionManager:
        return self._manager

    @property
    def registry(self) -> MunicipalityRegistry:
        return self._registry

    @property
    def load_state(self) -> LoadState:
        return self._load_state

    @property
    def outline(self) -> list[BaseGeometry]:
        """Background shapes of municipalities outside the region."""
        return list(self._outline)

    @property
    def warnings(self) -> list[JoinWarning]:
        """Join-completeness warnings from every load so far."""
        return list(self._warnings)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        return self._manager.subscribe(callback)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _require_fetcher(self) -> Fetcher:
        if self._fetcher is None:
            raise VmtError("Browser not initialized. Use 'async with DataBrowser(...) as browser:'")
        return self._fetcher

    def _fail(self, error: DatasetLoadError) -> DatasetLoadError:
        _logger.error("%s", error)
        if self._on_error is not None:
            try:
                self._on_error(str(error))
            except Exception:
                _logger.debug("on_error callback failed", exc_info=True)
        return error

    async def start(self) -> RenderUpdate:
        """Fetch geometry, outline and the default year concurrently, then join.

        The join waits for every fetch. Any failure aborts the load with one
        :class:`DatasetLoadError` listing all underlying errors.
        """
        fetcher = self._require_fetcher()
        config = self._config
        year = config.default_year
        self._load_state = LoadState.LOADING
        started = time.monotonic()

        jobs = [
            fetch_geometry(config, fetcher),
            fetch_tabular(config, fetcher, year, name_for=self._registry.display_name),
        ]
        if config.load_outline:
            jobs.append(fetch_outline(config, fetcher))
        results = await asyncio.gather(*jobs, return_exceptions=True)

        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                self._load_state = LoadState.ERROR
                raise result
        errors = [r for r in results if isinstance(r, Exception)]
        if errors:
            self._load_state = LoadState.ERROR
            raise self._fail(DatasetLoadError(errors))

        geometry, records = results[0], results[1]
        collection, warnings = FeatureCollection.from_join(geometry, {year: records})
        self._warnings.extend(warnings)
        self._outline = list(results[2]) if config.load_outline else []
        _logger.debug("Startup fetches for %s finished in %.3fs", year, time.monotonic() - started)

        self._load_state = LoadState.READY
        update = self._manager.bind_dataset(collection)
        _logger.info("Loaded %d municipalities for %s (%d join warnings)", len(collection), year, len(warnings))
        return update

    async def change_year(self, year: int) -> RenderUpdate | None:
        """Make *year* active, fetching its CSV first when it is not loaded.

        A newer request cancels an older in-flight one; the superseded call
        returns ``None`` and never touches the state.
        """
        if year not in self._config.years:
            raise InvalidSelection(f"Year {year!r} is not one of {self._config.years}", kind="year", value=year)
        collection = self._manager.collection
        if collection is None:
            raise DataNotReady("No dataset is loaded yet", year=year)

        self._generation += 1
        generation = self._generation
        if self._year_task is not None and not self._year_task.done():
            _logger.info("Year %s requested; cancelling the in-flight year load", year)
            self._year_task.cancel()
        self._year_task = None

        if year in collection.years:
            self._load_state = LoadState.READY
            return self._manager.select_year(year)

        fetcher = self._require_fetcher()
        self._load_state = LoadState.LOADING
        task = asyncio.create_task(
            fetch_tabular(self._config, fetcher, year, name_for=self._registry.display_name),
        )
        self._year_task = task
        try:
            records = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if generation != self._generation and (current is None or not current.cancelling()):
                _logger.info("Year %s load superseded", year)
                return None
            if generation == self._generation:
                self._year_task = None
                self._load_state = LoadState.READY
            raise
        except VmtError as exc:
            if generation != self._generation:
                _logger.info("Ignoring failure of superseded year %s load: %s", year, exc)
                return None
            self._year_task = None
            self._load_state = LoadState.READY
            raise self._fail(DatasetLoadError([exc])) from exc
        except Exception:
            if generation == self._generation:
                self._year_task = None
                self._load_state = LoadState.READY
            raise

        if generation != self._generation:
            _logger.info("Discarding superseded year %s data", year)
            return None
        self._year_task = None

        current_collection = self._manager.collection
        if current_collection is None:
            raise DataNotReady("Dataset was unbound during the year load", year=year)
        updated, warnings = current_collection.with_year(year, records)
        self._warnings.extend(warnings)
        self._load_state = LoadState.READY
        _logger.info("Loaded %d tabular records for %s", len(records), year)
        return self._manager.swap_dataset(updated, year)

    # ------------------------------------------------------------------
    # Selections
    # ------------------------------------------------------------------

    def select_municipality(self, municipality_id: int) -> RenderUpdate:
        return self._manager.select_municipality(municipality_id)

    def on_feature_clicked(self, municipality_id: int | str) -> RenderUpdate:
        return self._manager.on_feature_clicked(municipality_id)

    def select_theme(self, theme_id: str) -> RenderUpdate:
        return self._manager.select_theme(theme_id)

    def select_tab(self, tab_id: str) -> RenderUpdate:
        return self._manager.select_tab(tab_id)

    def snapshot(self) -> RenderUpdate:
        return self._manager.snapshot()
