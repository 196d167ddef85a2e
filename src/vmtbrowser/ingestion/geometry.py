"""Boundary geometry ingestion: TopoJSON topology -> shapely features.

Decoding (quantized arcs, shared-arc stitching) is left to GDAL through
geopandas; every TopoJSON object is read as one layer.
"""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Mapping
from typing import Any

import geopandas as gpd
from shapely.geometry.base import BaseGeometry

from vmtbrowser._constants import ID_FIELD, NAME_FIELD
from vmtbrowser._transport import Fetcher
from vmtbrowser.config import BrowserConfig
from vmtbrowser.exceptions import GeometryError
from vmtbrowser.ingestion.normalize import strict_int, to_title_case
from vmtbrowser.models.feature import GeometryFeature

_logger = logging.getLogger(__name__)

TopologySource = Mapping[str, Any] | str | bytes


def _check_topology(topology: TopologySource, object_name: str) -> bytes:
    if isinstance(topology, (str, bytes)):
        try:
            topology = json.loads(topology)
        except ValueError as exc:
            raise GeometryError(f"Invalid TopoJSON: {exc}", object_name=object_name) from exc
    if not isinstance(topology, Mapping) or topology.get("type") != "Topology":
        raise GeometryError("Input is not a TopoJSON topology", object_name=object_name)
    objects = topology.get("objects")
    if not isinstance(objects, Mapping) or object_name not in objects:
        raise GeometryError(f"Topology has no object named {object_name!r}", object_name=object_name)
    return json.dumps(topology).encode("utf-8")


def read_layer(topology: TopologySource, object_name: str) -> gpd.GeoDataFrame:
    """Read ``topology.objects[object_name]`` into a GeoDataFrame."""
    payload = _check_topology(topology, object_name)
    try:
        return gpd.read_file(io.BytesIO(payload), layer=object_name)
    except (RuntimeError, ValueError, OSError) as exc:
        raise GeometryError(f"Cannot decode {object_name!r}: {exc}", object_name=object_name) from exc


def _usable(boundary: BaseGeometry | None) -> bool:
    return boundary is not None and not boundary.is_empty


def parse_geometry(topology: TopologySource, object_name: str) -> dict[int, GeometryFeature]:
    """Extract one feature per municipality from ``topology.objects[object_name]``.

    The returned dict preserves topology order, which is the map's paint
    order.

    Raises
    ------
    GeometryError
        If the input is not a topology, the named object is absent, or a
        geometry lacks a numeric ``TOWN_ID``.
    """
    frame = read_layer(topology, object_name)
    if ID_FIELD not in frame.columns:
        raise GeometryError(f"Object {object_name!r} has no {ID_FIELD} property", object_name=object_name)

    names = frame[NAME_FIELD] if NAME_FIELD in frame.columns else [None] * len(frame)
    features: dict[int, GeometryFeature] = {}
    for index, (raw_id, name, boundary) in enumerate(zip(frame[ID_FIELD], names, frame.geometry)):
        try:
            municipality_id = strict_int(raw_id)
        except ValueError as exc:
            raise GeometryError(
                f"Geometry {index} in {object_name!r} has no usable {ID_FIELD}: {exc}",
                object_name=object_name,
            ) from exc

        if not _usable(boundary):
            _logger.warning("Skipping null geometry for %s=%s in %s", ID_FIELD, municipality_id, object_name)
            continue
        if municipality_id in features:
            _logger.warning("Duplicate %s=%s in %s; keeping the last geometry", ID_FIELD, municipality_id, object_name)

        has_name = isinstance(name, str) and name.strip()
        features[municipality_id] = GeometryFeature(
            municipality_id=municipality_id,
            display_name=to_title_case(name.strip()) if has_name else f"Municipality {municipality_id}",
            geometry=boundary,
        )

    _logger.debug("Decoded %d boundary features from %s", len(features), object_name)
    return features


def parse_outline(topology: TopologySource, object_name: str) -> list[BaseGeometry]:
    """Decode a background layer; ids are not required."""
    frame = read_layer(topology, object_name)
    return [boundary for boundary in frame.geometry if _usable(boundary)]


async def fetch_geometry(config: BrowserConfig, fetcher: Fetcher) -> dict[int, GeometryFeature]:
    files = config.files
    text = await fetcher.fetch_text(config.url_for(files.geometry_path))
    return parse_geometry(text, files.geometry_object)


async def fetch_outline(config: BrowserConfig, fetcher: Fetcher) -> list[BaseGeometry]:
    files = config.files
    text = await fetcher.fetch_text(config.url_for(files.outline_path))
    return parse_outline(text, files.outline_object)
