"""Geometry and joined feature models."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from pydantic import Field, field_serializer, field_validator
from shapely.geometry.base import BaseGeometry

from vmtbrowser.models._base import VmtBaseModel
from vmtbrowser.models.record import TabularRecord


class GeometryFeature(VmtBaseModel):
    """One municipality boundary (polygon or multipolygon)."""

    municipality_id: int
    display_name: str
    geometry: BaseGeometry


class MissingRecord(VmtBaseModel):
    """Explicit marker for a year without a tabular row for a municipality."""

    municipality_id: int
    year: int


YearRecords = Mapping[int, TabularRecord | MissingRecord]


class EnrichedFeature(VmtBaseModel):
    """Boundary geometry plus the tabular record of every loaded year.

    ``records`` is a read-only mapping; :meth:`with_record` returns a new
    feature with one year attached or replaced.
    """

    municipality_id: int
    display_name: str
    geometry: BaseGeometry
    records: YearRecords = Field(default_factory=dict, validate_default=True)

    @field_validator("records", mode="after")
    @classmethod
    def _freeze_records(cls, value: YearRecords) -> YearRecords:
        return MappingProxyType(dict(value))

    @field_serializer("records")
    def _serialize_records(self, value: YearRecords) -> dict[int, Any]:
        return {year: record.model_dump() for year, record in value.items()}

    def with_record(self, year: int, record: TabularRecord | MissingRecord) -> EnrichedFeature:
        return self.model_copy(update={"records": MappingProxyType({**self.records, year: record})})

    def record_for(self, year: int) -> TabularRecord | None:
        """The record for *year*, or ``None`` when it is missing or not loaded."""
        record = self.records.get(year)
        if isinstance(record, TabularRecord):
            return record
        return None

    def is_missing(self, year: int) -> bool:
        return isinstance(self.records.get(year), MissingRecord)


class JoinWarningKind(StrEnum):
    MISSING_TABULAR = "missing_tabular"
    UNMATCHED_TABULAR = "unmatched_tabular"


class JoinWarning(VmtBaseModel):
    """A join-completeness fact reported (not raised) by the join engine."""

    kind: JoinWarningKind
    municipality_id: int
    year: int
    message: str
