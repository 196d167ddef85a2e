from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest
from conftest import FakeFetcher

from vmtbrowser._transport import LocalFetcher
from vmtbrowser.browser import DataBrowser
from vmtbrowser.config import BrowserConfig
from vmtbrowser.exceptions import DataNotReady, DatasetLoadError, FetchError, InvalidSelection, ParseError
from vmtbrowser.municipalities import MunicipalityRegistry
from vmtbrowser.state.events import LoadState, RenderUpdate


def _browser(
    config: BrowserConfig,
    fetcher: FakeFetcher,
    registry: MunicipalityRegistry,
    **kwargs: object,
) -> DataBrowser:
    return DataBrowser(config, fetcher=fetcher, registry=registry, **kwargs)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_startup_fetches_concurrently_then_joins(
    config: BrowserConfig,
    fetcher: FakeFetcher,
    registry: MunicipalityRegistry,
) -> None:
    events: list[RenderUpdate] = []

    async with _browser(config, fetcher, registry, on_update=events.append) as browser:
        assert browser.load_state is LoadState.UNINITIALIZED
        update = await browser.start()

        assert browser.load_state is LoadState.READY
        assert events == [update]
        assert update.map.ordered_ids == (2, 10, 35)
        assert len(browser.outline) == 1
        assert browser.manager.collection is not None
        assert browser.manager.collection.years == frozenset({2012})
        assert sorted(fetcher.calls) == sorted(
            [
                "data_old/MA_TOWNS_MPO101.json",
                "data_old/MA_TOWNS_NON_MPO101.json",
                "data_old/CTPS_TOWNS_MAPC_VMT_2012.csv",
            ]
        )


@pytest.mark.asyncio
async def test_outline_can_be_skipped(fetcher: FakeFetcher, registry: MunicipalityRegistry) -> None:
    config = BrowserConfig(load_outline=False)

    async with _browser(config, fetcher, registry) as browser:
        await browser.start()

    assert browser.outline == []
    assert "data_old/MA_TOWNS_NON_MPO101.json" not in fetcher.calls


@pytest.mark.asyncio
async def test_startup_failures_are_aggregated(
    config: BrowserConfig,
    fetcher: FakeFetcher,
    registry: MunicipalityRegistry,
) -> None:
    files = config.files
    fetcher.failures[files.outline_path] = FetchError("HTTP 500", url=files.outline_path, status=500)
    fetcher.files[files.tabular_path(2012)] = "TOWN_ID,TOWN,VMT_TOTAL\nabc,X,1\n"
    events: list[RenderUpdate] = []
    messages: list[str] = []

    async with _browser(config, fetcher, registry, on_update=events.append, on_error=messages.append) as browser:
        with pytest.raises(DatasetLoadError) as excinfo:
            await browser.start()

        assert browser.load_state is LoadState.ERROR

    assert {type(err) for err in excinfo.value.errors} == {FetchError, ParseError}
    assert events == []
    assert messages == [str(excinfo.value)]
    assert "2 error(s)" in messages[0]


@pytest.mark.asyncio
async def test_change_year_loads_and_swaps_atomically(
    config: BrowserConfig,
    fetcher: FakeFetcher,
    registry: MunicipalityRegistry,
) -> None:
    events: list[RenderUpdate] = []

    async with _browser(config, fetcher, registry, on_update=events.append) as browser:
        await browser.start()
        browser.select_theme("THEME_VMT")
        browser.select_municipality(35)
        events.clear()

        update = await browser.change_year(2040)

        assert update is not None
        assert events == [update]
        assert update.state.active_year == 2040
        assert update.map.ordered_ids[-1] == 35
        assert set(update.map.colors.values()) == {"#a10048"}
        assert browser.load_state is LoadState.READY

        # Already loaded: no new fetch.
        calls = len(fetcher.calls)
        back = await browser.change_year(2012)
        assert back is not None and back.state.active_year == 2012
        assert len(fetcher.calls) == calls


@pytest.mark.asyncio
async def test_superseded_year_change_is_dropped(
    config: BrowserConfig,
    fetcher: FakeFetcher,
    registry: MunicipalityRegistry,
) -> None:
    fetcher.delays[config.files.tabular_path(2020)] = 0.5

    async with _browser(config, fetcher, registry) as browser:
        await browser.start()

        slow = asyncio.create_task(browser.change_year(2020))
        await asyncio.sleep(0)
        fast = asyncio.create_task(browser.change_year(2040))

        assert await slow is None
        newer = await fast

        assert newer is not None
        assert browser.manager.state.active_year == 2040
        assert browser.manager.collection is not None
        assert 2020 not in browser.manager.collection.years


@pytest.mark.asyncio
async def test_failed_year_load_keeps_previous_data(
    config: BrowserConfig,
    fetcher: FakeFetcher,
    registry: MunicipalityRegistry,
) -> None:
    del fetcher.files[config.files.tabular_path(2020)]
    messages: list[str] = []

    async with _browser(config, fetcher, registry, on_error=messages.append) as browser:
        await browser.start()

        with pytest.raises(DatasetLoadError):
            await browser.change_year(2020)

        assert browser.load_state is LoadState.READY
        assert browser.manager.state.active_year == 2012
        assert len(messages) == 1
        browser.select_theme("THEME_VHT")


@pytest.mark.asyncio
async def test_undecodable_year_file_is_a_load_error(
    config: BrowserConfig,
    fetcher: FakeFetcher,
    registry: MunicipalityRegistry,
    tmp_path: Path,
) -> None:
    for url, payload in fetcher.files.items():
        path = tmp_path / url
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    (tmp_path / config.files.tabular_path(2040)).write_bytes(b"TOWN_ID\n\xff\xfe\n")

    async with DataBrowser(config, fetcher=LocalFetcher(tmp_path), registry=registry) as browser:
        await browser.start()

        with pytest.raises(DatasetLoadError) as excinfo:
            await browser.change_year(2040)

        assert isinstance(excinfo.value.errors[0], FetchError)
        assert browser.load_state is LoadState.READY
        assert browser.manager.state.active_year == 2012
        update = await browser.change_year(2020)
        assert update is not None
        assert browser.manager.state.active_year == 2020


@pytest.mark.asyncio
async def test_unexpected_year_load_error_restores_ready(
    config: BrowserConfig,
    fetcher: FakeFetcher,
    registry: MunicipalityRegistry,
) -> None:
    fetcher.failures[config.files.tabular_path(2040)] = RuntimeError("boom")

    async with _browser(config, fetcher, registry) as browser:
        await browser.start()

        with pytest.raises(RuntimeError, match="boom"):
            await browser.change_year(2040)

        assert browser.load_state is LoadState.READY
        assert browser.manager.state.active_year == 2012
        assert await browser.change_year(2020) is not None


@pytest.mark.asyncio
async def test_change_year_validation(
    config: BrowserConfig,
    fetcher: FakeFetcher,
    registry: MunicipalityRegistry,
) -> None:
    async with _browser(config, fetcher, registry) as browser:
        with pytest.raises(DataNotReady):
            await browser.change_year(2040)
        await browser.start()
        with pytest.raises(InvalidSelection):
            await browser.change_year(2016)


@pytest.mark.asyncio
async def test_selections_work_while_a_year_loads(
    config: BrowserConfig,
    fetcher: FakeFetcher,
    registry: MunicipalityRegistry,
) -> None:
    fetcher.delays[config.files.tabular_path(2040)] = 0.05

    async with _browser(config, fetcher, registry) as browser:
        await browser.start()
        pending = asyncio.create_task(browser.change_year(2040))
        await asyncio.sleep(0)

        assert browser.load_state is LoadState.LOADING
        update = browser.on_feature_clicked("10")
        assert update.state.active_year == 2012

        done = await pending
        assert done is not None
        assert done.state.selected_municipality_id == 10
        assert done.state.active_year == 2040
