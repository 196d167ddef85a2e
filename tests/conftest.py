from __future__ import annotations

import asyncio
import csv
import io
import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from vmtbrowser.config import BrowserConfig
from vmtbrowser.dataset import FeatureCollection
from vmtbrowser.exceptions import FetchError
from vmtbrowser.ingestion.geometry import parse_geometry
from vmtbrowser.ingestion.tabular import parse_tabular_rows
from vmtbrowser.models.metrics import MetricFamily, Period, VehicleClass, all_metric_fields, field_name, total_field
from vmtbrowser.municipalities import MunicipalityRegistry

RowFactory = Callable[..., dict[str, str]]


def build_row(town_id: int, town: str = "", cell: float = 10.0, **overrides: Any) -> dict[str, str]:
    """A complete source row: every class/period cell is *cell*, totals match."""
    row: dict[str, str] = {"TOWN_ID": str(town_id), "TOWN": town}
    for family in MetricFamily:
        for vehicle_class in VehicleClass:
            for period in Period:
                row[field_name(family, vehicle_class, period)] = str(cell)
        row[total_field(family)] = str(cell * 12)
    row.update({key: str(value) for key, value in overrides.items()})
    return row


def build_csv(rows: Iterable[Mapping[str, str]]) -> str:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=["TOWN_ID", "TOWN", *all_metric_fields()])
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return out.getvalue()


def build_topology(towns: Iterable[tuple[int, str]], object_name: str) -> dict[str, Any]:
    """One unit square per municipality, placed side by side."""
    arcs: list[list[list[float]]] = []
    geometries: list[dict[str, Any]] = []
    for index, (town_id, name) in enumerate(towns):
        x = float(index)
        arcs.append([[x, 0.0], [x + 1, 0.0], [x + 1, 1.0], [x, 1.0], [x, 0.0]])
        geometries.append(
            {"type": "Polygon", "arcs": [[index]], "properties": {"TOWN_ID": town_id, "TOWN": name}}
        )
    return {
        "type": "Topology",
        "arcs": arcs,
        "objects": {object_name: {"type": "GeometryCollection", "geometries": geometries}},
    }


def build_collection(
    towns: Iterable[tuple[int, str]],
    rows_by_year: Mapping[int, Iterable[Mapping[str, str]]],
) -> FeatureCollection:
    geometry = parse_geometry(build_topology(towns, "TOWNS"), "TOWNS")
    tabular = {year: parse_tabular_rows(rows, year) for year, rows in rows_by_year.items()}
    collection, _ = FeatureCollection.from_join(geometry, tabular)
    return collection


@dataclass
class FakeFetcher:
    """In-memory stand-in for the HTTP fetcher.

    ``files`` maps URL to text (or an already-decoded JSON object);
    ``delays`` and ``failures`` make individual URLs slow or broken.
    """

    files: dict[str, Any] = field(default_factory=dict)
    delays: dict[str, float] = field(default_factory=dict)
    failures: dict[str, Exception] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    async def fetch_text(self, url: str) -> str:
        self.calls.append(url)
        delay = self.delays.get(url)
        if delay:
            await asyncio.sleep(delay)
        if url in self.failures:
            raise self.failures[url]
        if url not in self.files:
            raise FetchError(f"HTTP 404 from {url}", url=url, status=404)
        payload = self.files[url]
        return payload if isinstance(payload, str) else json.dumps(payload)

    async def fetch_json(self, url: str) -> Any:
        return json.loads(await self.fetch_text(url))


TEST_TOWNS: tuple[tuple[int, str], ...] = ((2, "ACTON"), (10, "ARLINGTON"), (35, "BOSTON"))


@pytest.fixture
def config() -> BrowserConfig:
    return BrowserConfig(years=(2012, 2020, 2040), default_year=2012)


@pytest.fixture
def registry() -> MunicipalityRegistry:
    return MunicipalityRegistry(TEST_TOWNS)


@pytest.fixture
def make_row() -> RowFactory:
    return build_row


@pytest.fixture
def fetcher(config: BrowserConfig) -> FakeFetcher:
    """Serves geometry, outline and 2012/2020/2040 data for the three test towns."""
    files = config.files
    fake = FakeFetcher()
    fake.files[files.geometry_path] = build_topology(TEST_TOWNS, files.geometry_object)
    fake.files[files.outline_path] = build_topology(((1, "ABINGTON"),), files.outline_object)
    for year, vmt in ((2012, 100000), (2020, 600000), (2040, 1000000)):
        fake.files[files.tabular_path(year)] = build_csv(
            build_row(town_id, name, VMT_TOTAL=vmt) for town_id, name in TEST_TOWNS
        )
    return fake
