"""Display row models for the accessible tables."""

from __future__ import annotations

from vmtbrowser.models._base import VmtBaseModel
from vmtbrowser.models.metrics import MetricFamily


class RowValues(VmtBaseModel):
    """Unrounded numbers behind one display row."""

    am: float
    md: float
    pm: float
    nt: float
    total: float


class DisplayRow(VmtBaseModel):
    """One table row: rounded, grouped strings ready for the grid."""

    title: str
    am: str
    md: str
    pm: str
    nt: str
    total: str
    values: RowValues

    def as_grid_row(self) -> dict[str, str]:
        return {
            "title": self.title,
            "am": self.am,
            "md": self.md,
            "pm": self.pm,
            "nt": self.nt,
            "total": self.total,
        }


class TotalDiscrepancy(VmtBaseModel):
    """Supplied daily total differs from the sum of its components."""

    municipality_id: int
    year: int
    family: MetricFamily
    supplied_total: float
    recomputed_total: float

    @property
    def difference(self) -> float:
        return self.supplied_total - self.recomputed_total
