"""Join engine: boundary geometry joined with per-year tabular records.

Geometry is authoritative for membership and order. Every feature carries
one entry per loaded year: the matching :class:`TabularRecord`, or an
explicit :class:`MissingRecord` when the year has no row for it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass

from vmtbrowser.models.feature import (
    EnrichedFeature,
    GeometryFeature,
    JoinWarning,
    JoinWarningKind,
    MissingRecord,
)
from vmtbrowser.models.record import TabularRecord

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JoinResult:
    features: tuple[EnrichedFeature, ...]
    warnings: tuple[JoinWarning, ...]


def _attach_year(
    features: Sequence[EnrichedFeature],
    year: int,
    records: Mapping[int, TabularRecord],
) -> tuple[list[EnrichedFeature], list[JoinWarning]]:
    attached: list[EnrichedFeature] = []
    warnings: list[JoinWarning] = []
    known: set[int] = set()

    for feature in features:
        known.add(feature.municipality_id)
        record: TabularRecord | MissingRecord | None = records.get(feature.municipality_id)
        if record is None:
            record = MissingRecord(municipality_id=feature.municipality_id, year=year)
            warnings.append(
                JoinWarning(
                    kind=JoinWarningKind.MISSING_TABULAR,
                    municipality_id=feature.municipality_id,
                    year=year,
                    message=f"{feature.display_name} ({feature.municipality_id}) has no tabular data for {year}",
                )
            )
        attached.append(feature.with_record(year, record))

    for municipality_id in records:
        if municipality_id not in known:
            warnings.append(
                JoinWarning(
                    kind=JoinWarningKind.UNMATCHED_TABULAR,
                    municipality_id=municipality_id,
                    year=year,
                    message=f"Tabular row {municipality_id} for {year} has no boundary geometry; dropped",
                )
            )

    _log_warnings(year, warnings)
    return attached, warnings


def _log_warnings(year: int, warnings: Sequence[JoinWarning]) -> None:
    for kind in JoinWarningKind:
        ids = [w.municipality_id for w in warnings if w.kind is kind]
        if ids:
            _logger.warning("Join %s for %s: %d municipality id(s) %s", kind.value, year, len(ids), ids)


def join(
    geometry: Mapping[int, GeometryFeature],
    tabular_by_year: Mapping[int, Mapping[int, TabularRecord]],
) -> JoinResult:
    """Merge geometry features with the tabular records of every supplied year.

    Output order is geometry-load order. Municipalities missing from a
    year get a :class:`MissingRecord` (never a zeroed record) and a
    ``missing_tabular`` warning; tabular ids without geometry are dropped
    with an ``unmatched_tabular`` warning.
    """
    features: list[EnrichedFeature] = [
        EnrichedFeature(
            municipality_id=feature.municipality_id,
            display_name=feature.display_name,
            geometry=feature.geometry,
        )
        for feature in geometry.values()
    ]
    warnings: list[JoinWarning] = []
    for year, records in tabular_by_year.items():
        features, year_warnings = _attach_year(features, year, records)
        warnings.extend(year_warnings)
    return JoinResult(features=tuple(features), warnings=tuple(warnings))


def relocate_to_end(features: Sequence[EnrichedFeature], municipality_id: int) -> tuple[EnrichedFeature, ...]:
    """Move one feature to the tail, keeping the relative order of the rest.

    The map paints features in sequence order, so the selected feature
    must come last for its highlight to stay on top.

    Raises :class:`KeyError` if no feature has *municipality_id*.
    """
    for index, feature in enumerate(features):
        if feature.municipality_id == municipality_id:
            return (*features[:index], *features[index + 1 :], feature)
    raise KeyError(municipality_id)


class FeatureCollection:
    """Ordered, joined dataset shared read-only with the selection manager.

    The only mutation is :meth:`relocate_to_end`; loading another year
    produces a new collection through :meth:`with_year`.
    """

    def __init__(self, features: Iterable[EnrichedFeature], years: Iterable[int]) -> None:
        self._features: tuple[EnrichedFeature, ...] = tuple(features)
        self._index: dict[int, EnrichedFeature] = {f.municipality_id: f for f in self._features}
        self._years: frozenset[int] = frozenset(years)

    @classmethod
    def from_join(
        cls,
        geometry: Mapping[int, GeometryFeature],
        tabular_by_year: Mapping[int, Mapping[int, TabularRecord]],
    ) -> tuple[FeatureCollection, tuple[JoinWarning, ...]]:
        result = join(geometry, tabular_by_year)
        return cls(result.features, tabular_by_year.keys()), result.warnings

    @property
    def features(self) -> tuple[EnrichedFeature, ...]:
        return self._features

    @property
    def years(self) -> frozenset[int]:
        return self._years

    @property
    def ids(self) -> tuple[int, ...]:
        return tuple(f.municipality_id for f in self._features)

    def __len__(self) -> int:
        return len(self._features)

    def __iter__(self) -> Iterator[EnrichedFeature]:
        return iter(self._features)

    def __contains__(self, municipality_id: object) -> bool:
        return municipality_id in self._index

    def get(self, municipality_id: int) -> EnrichedFeature | None:
        return self._index.get(municipality_id)

    def relocate_to_end(self, municipality_id: int) -> None:
        self._features = relocate_to_end(self._features, municipality_id)

    def with_year(
        self,
        year: int,
        records: Mapping[int, TabularRecord],
    ) -> tuple[FeatureCollection, tuple[JoinWarning, ...]]:
        """Attach (or replace) one year's records, keeping the current order."""
        features, warnings = _attach_year(self._features, year, records)
        return FeatureCollection(features, self._years | {year}), tuple(warnings)
