"""Render-update events.

Every successful selection produces exactly one :class:`RenderUpdate`.
Renderers consume the projections it carries and never read the selection
manager directly.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field

from vmtbrowser.models._base import VmtBaseModel
from vmtbrowser.models.metrics import MetricFamily
from vmtbrowser.models.selection import SelectionState
from vmtbrowser.models.table import DisplayRow, TotalDiscrepancy
from vmtbrowser.models.theme import LegendBucket


class LoadState(StrEnum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class MapProjection(VmtBaseModel):
    """Everything a choropleth renderer needs for one frame.

    ``ordered_ids`` is the paint order; the highlighted municipality, when
    there is one, is always last.
    """

    year: int
    theme_id: str | None = None
    ordered_ids: tuple[int, ...]
    colors: dict[int, str]
    legend_title: str = ""
    legend_description: str = ""
    legend_buckets: tuple[LegendBucket, ...] = ()
    highlighted_id: int | None = None
    missing_ids: tuple[int, ...] = Field(
        default=(),
        description="Municipalities without a record for the active year.",
    )


class TableProjection(VmtBaseModel):
    """One metric family's table for the selected municipality."""

    family: MetricFamily
    tab_id: str
    title: str
    summary: str
    columns: tuple[tuple[str, str], ...]
    rows: tuple[DisplayRow, ...] = ()
    discrepancy: TotalDiscrepancy | None = None
    missing: bool = False


class RenderUpdate(VmtBaseModel):
    state: SelectionState
    map: MapProjection
    tables: tuple[TableProjection, ...] = ()
    active_tab: str | None = None
