"""Tabular metric record model."""

from __future__ import annotations

from pydantic import Field

from vmtbrowser.models._base import VmtBaseModel
from vmtbrowser.models.metrics import MetricFamily, Period, VehicleClass, split_field_name


class PeriodValues(VmtBaseModel):
    """Values for the four time-of-day periods of one vehicle class."""

    am: float
    md: float
    pm: float
    nt: float

    def get(self, period: Period) -> float:
        return float(getattr(self, period.value.lower()))

    @property
    def daily(self) -> float:
        """Sum of the four periods (derived, not a source field)."""
        return self.am + self.md + self.pm + self.nt


class MetricValues(VmtBaseModel):
    """One metric family for one municipality and year.

    ``total`` is the supplied ``<FAMILY>_TOTAL`` column and is
    authoritative, even when it differs from the component sum.
    """

    family: MetricFamily
    by_class: dict[VehicleClass, PeriodValues]
    total: float

    def period_sum(self, period: Period) -> float:
        """Sum across vehicle classes for one period."""
        return sum(self.by_class[vc].get(period) for vc in VehicleClass)

    @property
    def component_sum(self) -> float:
        return sum(values.daily for values in self.by_class.values())


class TabularRecord(VmtBaseModel):
    """All metric families for one municipality in one forecast year."""

    municipality_id: int
    display_name: str
    year: int
    metrics: dict[MetricFamily, MetricValues] = Field(default_factory=dict)

    def metric(self, family: MetricFamily | str) -> MetricValues:
        return self.metrics[MetricFamily(family)]

    def value(self, name: str) -> float:
        """Resolve a flat source column name such as ``VMT_TOTAL`` or ``NOX_HOV_PM``."""
        family, vehicle_class, period = split_field_name(name)
        values = self.metrics[family]
        if vehicle_class is None or period is None:
            return values.total
        return values.by_class[vehicle_class].get(period)
