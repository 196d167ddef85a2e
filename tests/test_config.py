from __future__ import annotations

import pytest

from vmtbrowser.config import BrowserConfig, Region
from vmtbrowser.exceptions import VmtConfigError


def test_defaults() -> None:
    config = BrowserConfig()

    assert config.region is Region.MPO101
    assert config.years == (2012, 2020, 2040)
    assert config.default_year == 2012
    assert config.files.tabular_path(2040) == "data_old/CTPS_TOWNS_MAPC_VMT_2040.csv"
    assert config.files.geometry_object == "MA_TOWNS_MPO101"


def test_mpo97_files() -> None:
    config = BrowserConfig(region="mpo97")

    assert config.region is Region.MPO97
    assert config.files.geometry_path == "data/MA_TOWNS_MPO97.json"
    assert config.files.outline_object == "MA_TOWNS_NON_MPO97"
    assert config.files.tabular_path(2020) == "data/CTPS_TOWNS_MAPC_97_VMT_2020.csv"


def test_url_for_joins_base_url() -> None:
    assert BrowserConfig().url_for("data/x.csv") == "data/x.csv"
    assert BrowserConfig(base_url="https://example.org/app/").url_for("/data/x.csv") == "https://example.org/app/data/x.csv"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"default_year": 2016},
        {"region": "mpo42"},
        {"fetch_timeout": 0},
        {"years": ()},
        {"total_tolerance": -1},
    ],
)
def test_invalid_config_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(VmtConfigError):
        BrowserConfig(**kwargs)  # type: ignore[arg-type]


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VMT_BASE_URL", "https://example.org")
    monkeypatch.setenv("VMT_REGION", "mpo97")
    monkeypatch.setenv("VMT_YEARS", "2012, 2040")
    monkeypatch.setenv("VMT_DEFAULT_YEAR", "2040")
    monkeypatch.setenv("VMT_FETCH_TIMEOUT", "5")
    monkeypatch.setenv("VMT_LOAD_OUTLINE", "no")

    config = BrowserConfig.from_env(grouping_separator=" ")

    assert config.base_url == "https://example.org"
    assert config.region is Region.MPO97
    assert config.years == (2012, 2040)
    assert config.default_year == 2040
    assert config.fetch_timeout == 5.0
    assert config.load_outline is False
    assert config.grouping_separator == " "


def test_from_env_bad_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VMT_FETCH_TIMEOUT", "soon")

    with pytest.raises(VmtConfigError):
        BrowserConfig.from_env()
