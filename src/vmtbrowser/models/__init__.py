"""Data models for vmtbrowser."""

from vmtbrowser.models._base import VmtBaseModel
from vmtbrowser.models.feature import (
    EnrichedFeature,
    GeometryFeature,
    JoinWarning,
    JoinWarningKind,
    MissingRecord,
)
from vmtbrowser.models.metrics import (
    MetricFamily,
    Period,
    VehicleClass,
    all_metric_fields,
    family_fields,
    field_name,
    split_field_name,
    total_field,
)
from vmtbrowser.models.record import MetricValues, PeriodValues, TabularRecord
from vmtbrowser.models.selection import SelectionState
from vmtbrowser.models.table import DisplayRow, RowValues, TotalDiscrepancy
from vmtbrowser.models.theme import LegendBucket, Theme

__all__ = [
    "DisplayRow",
    "EnrichedFeature",
    "GeometryFeature",
    "JoinWarning",
    "JoinWarningKind",
    "LegendBucket",
    "MetricFamily",
    "MetricValues",
    "MissingRecord",
    "Period",
    "PeriodValues",
    "RowValues",
    "SelectionState",
    "TabularRecord",
    "Theme",
    "TotalDiscrepancy",
    "VehicleClass",
    "VmtBaseModel",
    "all_metric_fields",
    "family_fields",
    "field_name",
    "split_field_name",
    "total_field",
]
