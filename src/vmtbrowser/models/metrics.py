"""Metric families and the declarative column-name table.

Every tabular column is ``<FAMILY>_<CLASS>_<PERIOD>`` or
``<FAMILY>_TOTAL``. Parsing and aggregation are both driven from this
table so the six families can never drift apart.
"""

from __future__ import annotations

from enum import StrEnum


class MetricFamily(StrEnum):
    VMT = "VMT"
    VHT = "VHT"
    VOC = "VOC"
    NOX = "NOX"
    CO = "CO"
    CO2 = "CO2"


class VehicleClass(StrEnum):
    SOV = "SOV"
    HOV = "HOV"
    TRK = "TRK"

    @property
    def label(self) -> str:
        return VEHICLE_CLASS_LABELS[self]


class Period(StrEnum):
    AM = "AM"
    MD = "MD"
    PM = "PM"
    NT = "NT"

    @property
    def label(self) -> str:
        return PERIOD_LABELS[self]


VEHICLE_CLASS_LABELS: dict[VehicleClass, str] = {
    VehicleClass.SOV: "Single Occupant Vehicles",
    VehicleClass.HOV: "High Occupant Vehicles",
    VehicleClass.TRK: "Trucks",
}

PERIOD_LABELS: dict[Period, str] = {
    Period.AM: "6AM-9AM",
    Period.MD: "9AM-3PM",
    Period.PM: "3PM-6PM",
    Period.NT: "6PM-6AM",
}

TOTAL_SUFFIX = "TOTAL"


def field_name(family: MetricFamily, vehicle_class: VehicleClass, period: Period) -> str:
    """Column name for one class/period cell, e.g. ``VMT_SOV_AM``."""
    return f"{family.value}_{vehicle_class.value}_{period.value}"


def total_field(family: MetricFamily) -> str:
    """Column name of the supplied daily total, e.g. ``VMT_TOTAL``."""
    return f"{family.value}_{TOTAL_SUFFIX}"


def family_fields(family: MetricFamily) -> tuple[str, ...]:
    """All columns of one family: twelve class/period cells plus the total."""
    cells = tuple(field_name(family, vc, p) for vc in VehicleClass for p in Period)
    return (*cells, total_field(family))


def all_metric_fields() -> tuple[str, ...]:
    return tuple(name for family in MetricFamily for name in family_fields(family))


def split_field_name(name: str) -> tuple[MetricFamily, VehicleClass | None, Period | None]:
    """Inverse of :func:`field_name` / :func:`total_field`.

    Raises :class:`KeyError` for names outside the table.
    """
    parts = name.upper().split("_")
    try:
        family = MetricFamily(parts[0])
        if len(parts) == 2 and parts[1] == TOTAL_SUFFIX:
            return family, None, None
        if len(parts) == 3:
            return family, VehicleClass(parts[1]), Period(parts[2])
    except ValueError:
        pass
    raise KeyError(name)
