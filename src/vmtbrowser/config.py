"""Browser configuration for vmtbrowser."""

from __future__ import annotations

import dataclasses
import os
from enum import StrEnum
from typing import Any

from vmtbrowser.exceptions import VmtConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_years(value: str) -> tuple[int, ...]:
    try:
        return tuple(int(part) for part in value.split(",") if part.strip())
    except ValueError as exc:
        raise VmtConfigError(f"VMT_YEARS must be a comma separated list of years, got {value!r}") from exc


class Region(StrEnum):
    MPO101 = "mpo101"
    MPO97 = "mpo97"


@dataclasses.dataclass(frozen=True)
class RegionFiles:
    """Relative data paths and TopoJSON object names for one region."""

    geometry_path: str
    geometry_object: str
    outline_path: str
    outline_object: str
    tabular_template: str

    def tabular_path(self, year: int) -> str:
        return self.tabular_template.format(year=year)


REGION_FILES: dict[Region, RegionFiles] = {
    Region.MPO101: RegionFiles(
        geometry_path="data_old/MA_TOWNS_MPO101.json",
        geometry_object="MA_TOWNS_MPO101",
        outline_path="data_old/MA_TOWNS_NON_MPO101.json",
        outline_object="MA_TOWNS_NON_MPO101",
        tabular_template="data_old/CTPS_TOWNS_MAPC_VMT_{year}.csv",
    ),
    Region.MPO97: RegionFiles(
        geometry_path="data/MA_TOWNS_MPO97.json",
        geometry_object="MA_TOWNS_MPO97",
        outline_path="data/MA_TOWNS_NON_MPO97.json",
        outline_object="MA_TOWNS_NON_MPO97",
        tabular_template="data/CTPS_TOWNS_MAPC_97_VMT_{year}.csv",
    ),
}


@dataclasses.dataclass(frozen=True)
class BrowserConfig:
    """Browser configuration.

    Parameters
    ----------
    base_url : str
        Prefix joined with the region's relative data paths. May be an
        ``http(s)://`` URL or empty when a fetcher resolves paths itself
        (e.g. :class:`vmtbrowser._transport.LocalFetcher`).
    region : Region
        Which municipality set (and data file family) to load.
    years : tuple of int
        Forecast years that may be selected.
    default_year : int
        Year loaded at startup. Must be one of ``years``.
    fetch_timeout : float
        Total timeout in seconds for a single fetch.
    load_outline : bool
        Fetch the background outline of municipalities outside the region.
    grouping_separator : str
        Thousands separator used in table cells.
    total_tolerance : float
        Largest accepted difference between a supplied daily total and the
        sum of its components before a discrepancy is reported.
    """

    base_url: str = ""
    region: Region = Region.MPO101
    years: tuple[int, ...] = (2012, 2020, 2040)
    default_year: int = 2012
    fetch_timeout: float = 30.0
    load_outline: bool = True
    grouping_separator: str = ","
    total_tolerance: float = 0.5

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "region", Region(self.region))
        except ValueError as exc:
            raise VmtConfigError(f"Unknown region {self.region!r}") from exc
        object.__setattr__(self, "years", tuple(int(y) for y in self.years))
        if not self.years:
            raise VmtConfigError("At least one year must be configured")
        if self.default_year not in self.years:
            raise VmtConfigError(f"default_year {self.default_year} is not one of {self.years}")
        if self.fetch_timeout <= 0:
            raise VmtConfigError("fetch_timeout must be positive")
        if self.total_tolerance < 0:
            raise VmtConfigError("total_tolerance must not be negative")

    @property
    def files(self) -> RegionFiles:
        return REGION_FILES[self.region]

    def url_for(self, path: str) -> str:
        if not self.base_url:
            return path
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @classmethod
    def from_env(cls, **overrides: Any) -> BrowserConfig:
        """Create configuration from ``VMT_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "VMT_BASE_URL": "base_url",
            "VMT_REGION": "region",
            "VMT_GROUPING_SEPARATOR": "grouping_separator",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        years_env = env.get("VMT_YEARS")
        if years_env is not None and "years" not in overrides:
            config_kwargs["years"] = _env_years(years_env)

        try:
            default_year_env = env.get("VMT_DEFAULT_YEAR")
            if default_year_env is not None and "default_year" not in overrides:
                config_kwargs["default_year"] = int(default_year_env)

            timeout_env = env.get("VMT_FETCH_TIMEOUT")
            if timeout_env is not None and "fetch_timeout" not in overrides:
                config_kwargs["fetch_timeout"] = float(timeout_env)

            tolerance_env = env.get("VMT_TOTAL_TOLERANCE")
            if tolerance_env is not None and "total_tolerance" not in overrides:
                config_kwargs["total_tolerance"] = float(tolerance_env)
        except ValueError as exc:
            raise VmtConfigError(f"Invalid numeric environment value: {exc}") from exc

        if "load_outline" not in overrides:
            config_kwargs["load_outline"] = _env_bool(env.get("VMT_LOAD_OUTLINE"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
